from fastapi import APIRouter, Depends
from app.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectSubmissionUpdate, ProjectResponse, ProjectStatus
)
from app.modules.projects.service import ProjectService
from app.modules.profiles.schemas import ProfileResponse
from app.core.dependencies import require_permission, get_user_supabase
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(supabase: Client = Depends(get_user_supabase)) -> ProjectService:
    return ProjectService(supabase)


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    caller: ProfileResponse = Depends(require_permission("projects:create")),
    service: ProjectService = Depends(get_project_service)
):
    """Create a project, optionally assigned to a committee member (admin)"""
    return service.create_project(caller, project_data)


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    status: Optional[ProjectStatus] = None,
    assigned_to: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    caller: ProfileResponse = Depends(require_permission("projects:read")),
    service: ProjectService = Depends(get_project_service)
):
    """All committee projects (admin) or projects assigned to the caller (member)"""
    return service.list_projects(caller, status=status, assigned_to=assigned_to, limit=limit, offset=offset)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    caller: ProfileResponse = Depends(require_permission("projects:read")),
    service: ProjectService = Depends(get_project_service)
):
    return service.get_project(caller, project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    caller: ProfileResponse = Depends(require_permission("projects:update")),
    service: ProjectService = Depends(get_project_service)
):
    """Update a project (admin)"""
    return service.update_project(caller, project_id, project_data)


@router.patch("/{project_id}/submission", response_model=ProjectResponse)
async def submit_project(
    project_id: str,
    submission: ProjectSubmissionUpdate,
    caller: ProfileResponse = Depends(require_permission("projects:submit")),
    service: ProjectService = Depends(get_project_service)
):
    """Update status / submission URL of a project assigned to the caller"""
    return service.submit_project(caller, project_id, submission)


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: str,
    caller: ProfileResponse = Depends(require_permission("projects:delete")),
    service: ProjectService = Depends(get_project_service)
):
    """Delete a project (admin)"""
    service.delete_project(caller, project_id)
    return None
