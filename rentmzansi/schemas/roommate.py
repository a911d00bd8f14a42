from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class RoommateProfileBase(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=100)
    budget_max: Optional[float] = Field(None, ge=0)
    preferred_areas: List[str] = []
    gender_preference: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=1000)


class RoommateProfileUpdate(RoommateProfileBase):
    """Schema for creating or replacing a roommate profile"""
    pass


class RoommateProfile(RoommateProfileBase):
    user_id: str
    updated_at: datetime
