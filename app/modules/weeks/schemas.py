from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import date, datetime


class WeekCreate(BaseModel):
    week_number: int = Field(ge=1)
    title: str = Field(min_length=1)
    description: str = ""
    content: str = ""
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class WeekUpdate(BaseModel):
    week_number: Optional[int] = Field(default=None, ge=1)
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    content: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class WeekResponse(BaseModel):
    id: str
    committee_id: str
    week_number: int
    title: str
    description: str = ""
    content: str = ""
    start_date: date
    end_date: date
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
