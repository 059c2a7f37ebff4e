from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CommitteeCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""


class CommitteeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class CommitteeResponse(BaseModel):
    id: str
    name: str
    description: str = ""
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
