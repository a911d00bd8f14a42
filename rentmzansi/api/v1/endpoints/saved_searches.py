from fastapi import APIRouter, Depends, status
from typing import List

from rentmzansi.api.dependencies import ServiceProvider
from rentmzansi.core.exceptions import SavedSearchNotFoundException, StorageWriteFailedException
from rentmzansi.schemas.saved_search import SavedSearch, SavedSearchCreate
from rentmzansi.services.saved_search_service import SavedSearchService

router = APIRouter()

get_saved_search_service = ServiceProvider(SavedSearchService)


@router.post("", response_model=SavedSearch, status_code=status.HTTP_201_CREATED)
def create_saved_search(
    search_data: SavedSearchCreate,
    service: SavedSearchService = Depends(get_saved_search_service)
):
    """
    Save search criteria for new-listing notifications

    **Example:**
    ```json
    {
      "location": "Sandton",
      "price_range": [0, 5000],
      "amenities": ["WiFi", "Parking"]
    }
    ```
    """
    saved_search = service.save_search(search_data)
    if saved_search is None:
        raise StorageWriteFailedException("saved search")
    return saved_search


@router.get("", response_model=List[SavedSearch])
def get_saved_searches(
    service: SavedSearchService = Depends(get_saved_search_service)
):
    """
    Get all saved searches, newest first
    """
    return service.get_saved_searches()


@router.get("/{search_id}", response_model=SavedSearch)
def get_saved_search(
    search_id: str,
    service: SavedSearchService = Depends(get_saved_search_service)
):
    saved_search = service.get_saved_search(search_id)
    if not saved_search:
        raise SavedSearchNotFoundException(search_id)
    return saved_search


@router.delete("/{search_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_saved_search(
    search_id: str,
    service: SavedSearchService = Depends(get_saved_search_service)
):
    """
    Delete saved search
    """
    if not service.get_saved_search(search_id):
        raise SavedSearchNotFoundException(search_id)

    if not service.delete_saved_search(search_id):
        raise StorageWriteFailedException("saved search changes")
