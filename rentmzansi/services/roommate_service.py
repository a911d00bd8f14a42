from typing import Optional, List

from rentmzansi.core.storage import validate_record
from rentmzansi.schemas.roommate import RoommateProfile, RoommateProfileUpdate
from rentmzansi.services.base import StoreService


class RoommateService(StoreService):
    """Roommate profiles keyed by user id"""

    def _load(self) -> dict:
        return self.store.read_json(self.keys.roommate_profiles, {})

    def save_profile(self, user_id: str, profile: RoommateProfileUpdate) -> Optional[RoommateProfile]:
        entry = RoommateProfile(**profile.model_dump(), user_id=user_id, updated_at=self.now())

        profiles = self._load()
        profiles[user_id] = entry.model_dump(mode="json")

        if not self.store.write_json(self.keys.roommate_profiles, profiles):
            return None
        return entry

    def get_profile(self, user_id: str) -> Optional[RoommateProfile]:
        raw = self._load().get(user_id)
        if raw is None:
            return None
        return validate_record(RoommateProfile, raw, f"{self.keys.roommate_profiles}/{user_id}")

    def list_profiles(self) -> List[RoommateProfile]:
        profiles = []
        for user_id, raw in self._load().items():
            profile = validate_record(RoommateProfile, raw, f"{self.keys.roommate_profiles}/{user_id}")
            if profile is not None:
                profiles.append(profile)
        return sorted(profiles, key=lambda p: p.updated_at, reverse=True)

    def delete_profile(self, user_id: str) -> bool:
        profiles = self._load()
        if user_id not in profiles:
            return False

        del profiles[user_id]
        return self.store.write_json(self.keys.roommate_profiles, profiles)
