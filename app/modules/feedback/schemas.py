from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from app.modules.profiles.schemas import EmbeddedProfile


class FeedbackCreate(BaseModel):
    user_id: str
    content: str = Field(min_length=1)
    rating: Optional[int] = Field(default=None, ge=1, le=5)


class FeedbackUpdate(BaseModel):
    """rating may be cleared with an explicit null"""
    content: Optional[str] = Field(default=None, min_length=1)
    rating: Optional[int] = Field(default=None, ge=1, le=5)


class FeedbackResponse(BaseModel):
    id: str
    committee_id: str
    user_id: str
    given_by: str
    content: str
    rating: Optional[int] = None
    created_at: Optional[datetime] = None
    giver: Optional[EmbeddedProfile] = None
    recipient: Optional[EmbeddedProfile] = None

    class Config:
        from_attributes = True
