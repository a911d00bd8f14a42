from fastapi import APIRouter, Depends
from typing import List

from rentmzansi.api.dependencies import ServiceProvider
from rentmzansi.schemas.engagement import RecentSearchCreate
from rentmzansi.services.search_history_service import RecentSearchService

router = APIRouter()

get_recent_search_service = ServiceProvider(RecentSearchService)


@router.get("", response_model=List[str])
def get_recent_searches(
    service: RecentSearchService = Depends(get_recent_search_service)
):
    return service.get_recent_searches()


@router.post("", response_model=List[str])
def add_recent_search(
    search: RecentSearchCreate,
    service: RecentSearchService = Depends(get_recent_search_service)
):
    return service.add_recent_search(search.location)
