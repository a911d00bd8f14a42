from fastapi import APIRouter, Depends, status
from typing import List

from rentmzansi.api.dependencies import ServiceProvider
from rentmzansi.core.exceptions import RoommateProfileNotFoundException, StorageWriteFailedException
from rentmzansi.schemas.roommate import RoommateProfile, RoommateProfileUpdate
from rentmzansi.services.roommate_service import RoommateService

router = APIRouter()

get_roommate_service = ServiceProvider(RoommateService)


@router.get("", response_model=List[RoommateProfile])
def list_profiles(
    service: RoommateService = Depends(get_roommate_service)
):
    """
    Roommate profiles, most recently updated first
    """
    return service.list_profiles()


@router.get("/{user_id}", response_model=RoommateProfile)
def get_profile(
    user_id: str,
    service: RoommateService = Depends(get_roommate_service)
):
    profile = service.get_profile(user_id)
    if profile is None:
        raise RoommateProfileNotFoundException(user_id)
    return profile


@router.put("/{user_id}", response_model=RoommateProfile)
def save_profile(
    user_id: str,
    profile_data: RoommateProfileUpdate,
    service: RoommateService = Depends(get_roommate_service)
):
    profile = service.save_profile(user_id, profile_data)
    if profile is None:
        raise StorageWriteFailedException("roommate profile")
    return profile


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_profile(
    user_id: str,
    service: RoommateService = Depends(get_roommate_service)
):
    if not service.delete_profile(user_id):
        raise RoommateProfileNotFoundException(user_id)
