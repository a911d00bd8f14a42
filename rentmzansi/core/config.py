from typing import List, Optional
from pydantic import AnyHttpUrl, BaseModel, validator
from pydantic_settings import BaseSettings


class StorageKeys(BaseModel):
    """Key names of the JSON blobs kept in the key-value store"""
    saved_searches: str = "saved-searches"
    notifications: str = "notifications"
    listing_snapshots: str = "listing-snapshots"
    view_counts: str = "view-counts"
    view_count_viewers: str = "view-count-viewers"
    area_subscriptions: str = "subscriptions"
    seen_listings: str = "seen-listings"
    seen_area_listings: str = "seen-area-listings"
    landlord_response_times: str = "landlord-response-times"
    compare_list: str = "compare-list"
    roommate_profiles: str = "roommate-profiles"
    quick_replies: str = "quick-replies"
    favorites: str = "favorites"
    recent_searches: str = "recent-searches"
    reviews: str = "reviews"
    reports: str = "reports"


class Settings(BaseSettings):
    # API
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "RentMzansi Engagement Engine"

    # CORS
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Storage
    STORAGE_BACKEND: str = "memory"  # memory | redis
    REDIS_URL: str = "redis://localhost:6379/0"
    STORAGE_KEY_PREFIX: str = "rentmzansi:"
    STORAGE_QUOTA_BYTES: Optional[int] = 5 * 1024 * 1024
    STORAGE_KEYS: StorageKeys = StorageKeys()

    @validator("STORAGE_BACKEND")
    def validate_storage_backend(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in ("memory", "redis"):
            raise ValueError(f"Unsupported storage backend: {v}")
        return v

    # Engagement limits
    NOTIFICATIONS_MAX: int = 100
    SAVED_SEARCH_LIMIT: int = 20
    COMPARE_LIST_MAX: int = 4
    RECENT_SEARCHES_MAX: int = 5
    RESPONSE_HISTORY_MAX: int = 50
    RESPONSE_FAST_WINDOW_HOURS: int = 24
    RESPONSE_RECENT_WINDOW_DAYS: int = 7
    SEEN_LISTINGS_MAX: int = 2000
    VIEWERS_PER_LISTING_MAX: int = 500

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    CONTACT_CLICK_RATE_LIMIT: str = "30/minute"
    REVIEW_RATE_LIMIT: str = "10/minute"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

settings = Settings()
