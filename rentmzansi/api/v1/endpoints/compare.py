from fastapi import APIRouter, Depends, status
from typing import List

from rentmzansi.api.dependencies import ServiceProvider
from rentmzansi.schemas.engagement import CompareResult
from rentmzansi.services.engagement_service import EngagementService

router = APIRouter()

get_engagement_service = ServiceProvider(EngagementService)


@router.get("", response_model=List[str])
def get_compare_list(
    service: EngagementService = Depends(get_engagement_service)
):
    return service.get_compare_list()


@router.post("/{listing_id}", response_model=CompareResult)
def add_to_compare(
    listing_id: str,
    service: EngagementService = Depends(get_engagement_service)
):
    """
    Add a listing to the compare list

    A full list or a duplicate id is not an HTTP error: the result carries
    success=false and a message for display.
    """
    return service.add_to_compare(listing_id)


@router.delete("/{listing_id}", response_model=List[str])
def remove_from_compare(
    listing_id: str,
    service: EngagementService = Depends(get_engagement_service)
):
    return service.remove_from_compare(listing_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_compare(
    service: EngagementService = Depends(get_engagement_service)
):
    service.clear_compare()
