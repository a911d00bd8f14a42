from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime

from rentmzansi.models.enums import BadgeColor


class ListingSnapshot(BaseModel):
    """Last price a viewer saw for a listing"""
    price: float = Field(..., ge=0)
    timestamp: datetime


class ListingViewCreate(BaseModel):
    user_id: Optional[str] = None


class ViewedPriceCreate(BaseModel):
    user_id: Optional[str] = None
    price: float = Field(..., ge=0)


class ViewCountResponse(BaseModel):
    listing_id: str
    count: int


class CompareResult(BaseModel):
    """Outcome of an add-to-compare request, shown to the user as-is"""
    success: bool
    message: str
    compare_list: List[str] = []


class ResponseBadge(BaseModel):
    """Coarse landlord responsiveness label"""
    text: str
    color: BadgeColor


class QuickRepliesUpdate(BaseModel):
    replies: List[str] = Field(..., min_length=1, max_length=20)

    @validator('replies')
    def drop_blank_replies(cls, v):
        cleaned = [r.strip() for r in v if r.strip()]
        if not cleaned:
            raise ValueError('At least one reply template is required')
        return cleaned


class SubscribeRequest(BaseModel):
    area: str = ""


class SubscribeResult(BaseModel):
    success: bool
    message: str
    areas: List[str] = []


class RecentSearchCreate(BaseModel):
    location: str


class FavoriteToggleResponse(BaseModel):
    listing_id: str
    is_favorite: bool
    favorites: List[str]
