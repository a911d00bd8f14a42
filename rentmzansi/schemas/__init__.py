from rentmzansi.schemas.common import Message
from rentmzansi.schemas.listing import Listing
from rentmzansi.schemas.saved_search import SavedSearch, SavedSearchCreate
from rentmzansi.schemas.notification import (
    Notification,
    NotificationCreate,
    NotificationCheckRequest,
    UnreadCount
)
from rentmzansi.schemas.engagement import (
    CompareResult,
    ListingSnapshot,
    ResponseBadge,
    SubscribeResult
)
from rentmzansi.schemas.review import Review, ReviewCreate, ReviewSummary, ListingReport, ReportCreate
from rentmzansi.schemas.roommate import RoommateProfile, RoommateProfileUpdate

__all__ = [
    "Message",
    "Listing",
    "SavedSearch",
    "SavedSearchCreate",
    "Notification",
    "NotificationCreate",
    "NotificationCheckRequest",
    "UnreadCount",
    "CompareResult",
    "ListingSnapshot",
    "ResponseBadge",
    "SubscribeResult",
    "Review",
    "ReviewCreate",
    "ReviewSummary",
    "ListingReport",
    "ReportCreate",
    "RoommateProfile",
    "RoommateProfileUpdate"
]
