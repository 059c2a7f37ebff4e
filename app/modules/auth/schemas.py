from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from app.modules.profiles.schemas import ProfileResponse, Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    profile: ProfileResponse


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)
    role: Role = Role.MEMBER
    committee_id: Optional[str] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str
    profile: ProfileResponse


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    profile: ProfileResponse
    permissions: List[str]
