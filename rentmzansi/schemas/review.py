from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime

from rentmzansi.models.enums import ReportReason


class ReviewCreate(BaseModel):
    """Schema for leaving a review on a listing"""
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=1000)

    @validator('comment')
    def strip_comment(cls, v):
        return v.strip()


class Review(ReviewCreate):
    timestamp: datetime


class ReviewSummary(BaseModel):
    listing_id: str
    average_rating: float
    review_count: int


class ReportCreate(BaseModel):
    """Schema for reporting a listing"""
    reason: ReportReason
    comment: Optional[str] = Field(None, max_length=1000)

    @validator('comment')
    def blank_comment_to_none(cls, v):
        if v is None:
            return v
        return v.strip() or None


class ListingReport(ReportCreate):
    timestamp: datetime
