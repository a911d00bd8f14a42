from pydantic import BaseModel, Field, validator
from typing import Optional, List, Union


class Listing(BaseModel):
    """Listing record as delivered by the listing data source"""
    id: Optional[str] = None
    title: str = ""
    price: float = Field(..., ge=0, description="Monthly rent in rand")
    location: str = ""
    amenities: List[str] = []
    created_at: Optional[Union[int, str]] = None
    landlord_id: Optional[str] = None

    class Config:
        extra = "allow"

    @validator('id', 'landlord_id', pre=True)
    def coerce_identifier(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @validator('location', 'title', pre=True)
    def none_to_empty(cls, v):
        return "" if v is None else v

    @validator('amenities', pre=True)
    def none_to_no_amenities(cls, v):
        return [] if v is None else v

    @property
    def key(self) -> str:
        """Stable identifier; listings without an id fall back to title and creation time"""
        return self.id or f"{self.title}-{self.created_at}"


def format_rand(amount: float) -> str:
    """Render an amount the way listing cards do, e.g. R4500 or R4500.50"""
    if float(amount).is_integer():
        return f"R{int(amount)}"
    return f"R{amount:.2f}"
