from enum import Enum
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class Role(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile"""
    full_name: Optional[str] = Field(default=None, min_length=1)
    avatar_url: Optional[str] = None


class ProfileAdminUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1)
    avatar_url: Optional[str] = None
    role: Optional[Role] = None


class MemberCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)
    role: Role = Role.MEMBER


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str = ""
    role: Role
    committee_id: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class EmbeddedProfile(BaseModel):
    """Author/recipient name attached to a row through a PostgREST embed"""
    full_name: Optional[str] = None
    role: Optional[Role] = None
