from fastapi import APIRouter, Depends, Request
from typing import List, Optional

from rentmzansi.api.dependencies import ServiceProvider
from rentmzansi.core.exceptions import StorageWriteFailedException
from rentmzansi.core.rate_limiting import RateLimits, limiter
from rentmzansi.schemas.common import Message
from rentmzansi.schemas.engagement import QuickRepliesUpdate, ResponseBadge
from rentmzansi.services.landlord_service import LandlordService

router = APIRouter()

get_landlord_service = ServiceProvider(LandlordService)


@router.post("/{landlord_id}/contact-clicks", response_model=Message)
@limiter.limit(RateLimits.CONTACT_CLICK)
def track_contact_click(
    request: Request,
    landlord_id: str,
    service: LandlordService = Depends(get_landlord_service)
):
    """
    Record that a renter tapped "Contact" on one of the landlord's listings
    """
    service.track_landlord_contact_click(landlord_id)
    return Message(message="Contact recorded")


@router.get("/{landlord_id}/response-badge", response_model=Optional[ResponseBadge])
def get_response_badge(
    landlord_id: str,
    service: LandlordService = Depends(get_landlord_service)
):
    """
    Response-time badge, or null when the landlord has no contact history
    """
    return service.get_response_time_badge(landlord_id)


@router.get("/{landlord_id}/quick-replies", response_model=List[str])
def get_quick_replies(
    landlord_id: str,
    service: LandlordService = Depends(get_landlord_service)
):
    return service.get_quick_replies(landlord_id)


@router.put("/{landlord_id}/quick-replies", response_model=List[str])
def save_quick_replies(
    landlord_id: str,
    update: QuickRepliesUpdate,
    service: LandlordService = Depends(get_landlord_service)
):
    if not service.save_quick_replies(landlord_id, update.replies):
        raise StorageWriteFailedException("quick replies")
    return service.get_quick_replies(landlord_id)
