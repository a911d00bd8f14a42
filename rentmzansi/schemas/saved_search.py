from pydantic import BaseModel, Field, root_validator, validator
from typing import Optional, List
from datetime import datetime


class SavedSearchCreate(BaseModel):
    """Search criteria a renter wants to be notified about"""
    location: Optional[str] = Field(None, max_length=200)
    price_min: Optional[float] = Field(None, ge=0)
    price_max: Optional[float] = Field(None, ge=0)
    price_range: Optional[List[float]] = Field(None, description="[min, max] monthly rent")
    amenities: List[str] = []
    payment: Optional[str] = None
    sort: Optional[str] = None

    @validator('location')
    def strip_location(cls, v):
        if v is None:
            return v
        return v.strip() or None

    @validator('amenities')
    def unique_amenities(cls, v):
        seen = []
        for amenity in v:
            if amenity not in seen:
                seen.append(amenity)
        return seen

    @validator('price_range')
    def validate_price_range(cls, v):
        if v is None:
            return v
        if len(v) != 2:
            raise ValueError('Price range must be [min, max]')
        if v[0] > v[1]:
            raise ValueError('Price range minimum cannot exceed maximum')
        return v

    @root_validator(skip_on_failure=True)
    def sync_price_bounds(cls, values):
        """Explicit bounds win over price_range; the range is rebuilt from the final bounds"""
        price_range = values.get('price_range')
        price_min = values.get('price_min')
        price_max = values.get('price_max')

        if price_range is not None:
            if price_min is None:
                price_min = price_range[0]
            if price_max is None:
                price_max = price_range[1]

        if price_min is not None and price_max is not None:
            if price_min > price_max:
                raise ValueError('Minimum price cannot exceed maximum price')
            price_range = [price_min, price_max]

        values['price_min'] = price_min
        values['price_max'] = price_max
        values['price_range'] = price_range
        return values


class SavedSearch(SavedSearchCreate):
    """Persisted saved search"""
    id: str
    created_at: datetime
