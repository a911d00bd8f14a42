from fastapi import APIRouter, Body, Depends, Request, status
from typing import List, Optional

from rentmzansi.api.dependencies import ServiceProvider
from rentmzansi.core.exceptions import StorageWriteFailedException
from rentmzansi.core.rate_limiting import RateLimits, limiter
from rentmzansi.schemas.engagement import ListingViewCreate, ViewCountResponse, ViewedPriceCreate
from rentmzansi.schemas.common import Message
from rentmzansi.schemas.review import ListingReport, ReportCreate, Review, ReviewCreate, ReviewSummary
from rentmzansi.services.engagement_service import EngagementService
from rentmzansi.services.review_service import ReportService, ReviewService

router = APIRouter()

get_engagement_service = ServiceProvider(EngagementService)
get_review_service = ServiceProvider(ReviewService)
get_report_service = ServiceProvider(ReportService)


# ============ VIEWS ============

@router.post("/{listing_id}/views", response_model=ViewCountResponse)
def track_listing_view(
    listing_id: str,
    view: Optional[ListingViewCreate] = Body(None),
    service: EngagementService = Depends(get_engagement_service)
):
    """
    Count a listing view

    Signed-in viewers (user_id given) count once per listing; anonymous
    views always count.
    """
    user_id = view.user_id if view else None
    count = service.track_listing_view(listing_id, user_id)
    return ViewCountResponse(listing_id=listing_id, count=count)


@router.get("/{listing_id}/views", response_model=ViewCountResponse)
def get_view_count(
    listing_id: str,
    service: EngagementService = Depends(get_engagement_service)
):
    return ViewCountResponse(listing_id=listing_id, count=service.get_view_count(listing_id))


@router.post("/{listing_id}/viewed-price", response_model=Message)
def track_viewed_price(
    listing_id: str,
    viewed: ViewedPriceCreate,
    service: EngagementService = Depends(get_engagement_service)
):
    """
    Record the price a user saw, used as the baseline for price-drop alerts
    """
    if not service.track_user_viewed_listing(viewed.user_id, listing_id, viewed.price):
        raise StorageWriteFailedException("viewed price")
    return Message(message="Viewed price recorded")


# ============ REVIEWS ============

@router.post("/{listing_id}/reviews", response_model=Review, status_code=status.HTTP_201_CREATED)
@limiter.limit(RateLimits.REVIEW_CREATE)
def add_review(
    request: Request,
    listing_id: str,
    review: ReviewCreate,
    service: ReviewService = Depends(get_review_service)
):
    """
    Leave a 1-5 star review with an optional comment
    """
    entry = service.add_review(listing_id, review)
    if entry is None:
        raise StorageWriteFailedException("review")
    return entry


@router.get("/{listing_id}/reviews", response_model=List[Review])
def get_reviews(
    listing_id: str,
    service: ReviewService = Depends(get_review_service)
):
    return service.get_reviews(listing_id)


@router.get("/{listing_id}/reviews/summary", response_model=ReviewSummary)
def get_review_summary(
    listing_id: str,
    service: ReviewService = Depends(get_review_service)
):
    return service.get_review_summary(listing_id)


# ============ REPORTS ============

@router.post("/{listing_id}/reports", response_model=ListingReport, status_code=status.HTTP_201_CREATED)
@limiter.limit(RateLimits.REPORT_CREATE)
def report_listing(
    request: Request,
    listing_id: str,
    report: ReportCreate,
    service: ReportService = Depends(get_report_service)
):
    entry = service.report_listing(listing_id, report)
    if entry is None:
        raise StorageWriteFailedException("report")
    return entry


@router.get("/{listing_id}/reports", response_model=List[ListingReport])
def get_reports(
    listing_id: str,
    service: ReportService = Depends(get_report_service)
):
    return service.get_reports(listing_id)
