from supabase import Client
from app.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectSubmissionUpdate, ProjectResponse, ProjectStatus
)
from app.modules.profiles.schemas import ProfileResponse
from app.core.exceptions import NotFoundError
from app.core.policy import authorize, can_view_row, owner_filter
from app.core.tenancy import ensure_profile_in_committee, fetch_scoped, require_committee, utc_now
from app.config import settings
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# fields that may be cleared with an explicit null on update
NULLABLE_FIELDS = {"assigned_to", "due_date", "submission_url"}


class ProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_project(self, caller: ProfileResponse, project_data: ProjectCreate) -> ProjectResponse:
        """Create a project in the caller's committee (admin)"""
        authorize(caller, "projects:create")
        committee_id = require_committee(caller)
        try:
            if project_data.assigned_to:
                ensure_profile_in_committee(self.supabase, project_data.assigned_to, committee_id, "assigned_to")

            payload = project_data.model_dump(mode="json")
            payload["committee_id"] = committee_id
            result = self.supabase.table("projects").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create project")

            logger.info(f"Project {result.data[0]['id']} created in committee {committee_id} by {caller.id}")
            return ProjectResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_project(self, caller: ProfileResponse, project_id: str) -> ProjectResponse:
        """Get a project; members only see projects assigned to them"""
        authorize(caller, "projects:read")
        try:
            row = fetch_scoped(self.supabase, "projects", project_id, caller.committee_id, label="Project")
            if not can_view_row(caller, "projects", row):
                raise NotFoundError("Project not found")
            return ProjectResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_projects(
        self,
        caller: ProfileResponse,
        status: Optional[ProjectStatus] = None,
        assigned_to: Optional[str] = None,
        limit: int = None,
        offset: int = 0
    ) -> List[ProjectResponse]:
        """Newest first; members are scoped to assigned_to = self in the query itself"""
        authorize(caller, "projects:read")
        if not caller.committee_id:
            return []
        try:
            query = self.supabase.table("projects")\
                .select("*")\
                .eq("committee_id", caller.committee_id)
            for field, value in (owner_filter(caller, "projects") or {}).items():
                query = query.eq(field, value)
            if assigned_to:
                query = query.eq("assigned_to", assigned_to)
            if status:
                query = query.eq("status", ProjectStatus(status).value)
            result = query.order("created_at", desc=True)\
                .limit(settings.clamp_limit(limit))\
                .offset(offset)\
                .execute()
            return [ProjectResponse(**project) for project in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_project(self, caller: ProfileResponse, project_id: str, project_data: ProjectUpdate) -> ProjectResponse:
        """Full update (admin)"""
        authorize(caller, "projects:update")
        committee_id = require_committee(caller)
        try:
            existing = fetch_scoped(self.supabase, "projects", project_id, committee_id, label="Project")
            update_data = {
                field: value
                for field, value in project_data.model_dump(exclude_unset=True, mode="json").items()
                if value is not None or field in NULLABLE_FIELDS
            }
            if not update_data:
                return ProjectResponse(**existing)
            if update_data.get("assigned_to"):
                ensure_profile_in_committee(self.supabase, update_data["assigned_to"], committee_id, "assigned_to")

            return self._write(project_id, committee_id, update_data)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def submit_project(self, caller: ProfileResponse, project_id: str, submission: ProjectSubmissionUpdate) -> ProjectResponse:
        """Assignee (or admin) updates status and/or submission URL"""
        authorize(caller, "projects:submit")
        committee_id = require_committee(caller)
        try:
            existing = fetch_scoped(self.supabase, "projects", project_id, committee_id, label="Project")
            if not caller.is_admin and existing.get("assigned_to") != caller.id:
                raise NotFoundError("Project not found")

            update_data = submission.model_dump(exclude_unset=True, mode="json")
            update_data = {k: v for k, v in update_data.items() if v is not None or k == "submission_url"}
            if not update_data:
                return ProjectResponse(**existing)

            project = self._write(project_id, committee_id, update_data)
            logger.info(f"Project {project_id} submission updated by {caller.id}: {sorted(update_data)}")
            return project
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_project(self, caller: ProfileResponse, project_id: str) -> bool:
        authorize(caller, "projects:delete")
        committee_id = require_committee(caller)
        try:
            fetch_scoped(self.supabase, "projects", project_id, committee_id, columns="id", label="Project")
            result = self.supabase.table("projects")\
                .delete()\
                .eq("id", project_id)\
                .eq("committee_id", committee_id)\
                .execute()
            logger.info(f"Project {project_id} deleted from committee {committee_id} by {caller.id}")
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _write(self, project_id: str, committee_id: str, update_data: dict) -> ProjectResponse:
        update_data["updated_at"] = utc_now()
        result = self.supabase.table("projects")\
            .update(update_data)\
            .eq("id", project_id)\
            .eq("committee_id", committee_id)\
            .execute()

        if not result.data:
            raise NotFoundError("Project not found")

        return ProjectResponse(**result.data[0])
