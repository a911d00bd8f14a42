from fastapi import APIRouter, Depends
from typing import List

from rentmzansi.api.dependencies import ServiceProvider
from rentmzansi.schemas.engagement import FavoriteToggleResponse
from rentmzansi.services.favorite_service import FavoriteService

router = APIRouter()

get_favorite_service = ServiceProvider(FavoriteService)


@router.get("", response_model=List[str])
def get_favorites(
    service: FavoriteService = Depends(get_favorite_service)
):
    return service.get_favorites()


@router.post("/{listing_id}/toggle", response_model=FavoriteToggleResponse)
def toggle_favorite(
    listing_id: str,
    service: FavoriteService = Depends(get_favorite_service)
):
    """
    Add the listing to favorites, or remove it if it is already there
    """
    is_favorite = service.toggle_favorite(listing_id)
    return FavoriteToggleResponse(
        listing_id=listing_id,
        is_favorite=is_favorite,
        favorites=service.get_favorites()
    )
