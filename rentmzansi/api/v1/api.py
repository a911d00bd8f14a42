from fastapi import APIRouter
from rentmzansi.api.v1.endpoints import (
    saved_searches,
    notifications,
    listings,
    compare,
    landlords,
    favorites,
    recent_searches,
    subscriptions,
    roommates
)

api_router = APIRouter()

# Include routers
api_router.include_router(saved_searches.router, prefix="/saved-searches", tags=["Saved Searches"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(listings.router, prefix="/listings", tags=["Listing Engagement"])
api_router.include_router(compare.router, prefix="/compare", tags=["Compare"])
api_router.include_router(landlords.router, prefix="/landlords", tags=["Landlords"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["Favorites"])
api_router.include_router(recent_searches.router, prefix="/recent-searches", tags=["Recent Searches"])
api_router.include_router(subscriptions.router, prefix="/subscriptions", tags=["Area Subscriptions"])
api_router.include_router(roommates.router, prefix="/roommates", tags=["Roommates"])
