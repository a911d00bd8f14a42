from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from rentmzansi.models.enums import NotificationType
from rentmzansi.schemas.listing import Listing


class NotificationCreate(BaseModel):
    """Candidate notification produced by the generator, not yet in the inbox"""
    type: NotificationType
    title: str = Field(..., min_length=1, max_length=200)
    body: str = ""
    listing_id: Optional[str] = None
    search_id: Optional[str] = None
    area: Optional[str] = None
    old_price: Optional[float] = None
    new_price: Optional[float] = None
    id: Optional[str] = None
    timestamp: Optional[datetime] = None


class Notification(NotificationCreate):
    """Inbox entry"""
    id: str
    timestamp: datetime
    read: bool = False


class NotificationCheckRequest(BaseModel):
    """Current listing set to diff against saved searches, favorites and areas"""
    listings: List[Listing]
    favorite_ids: Optional[List[str]] = Field(None, description="Defaults to the stored favorites")
    user_id: Optional[str] = None


class UnreadCount(BaseModel):
    unread: int
    total: int
