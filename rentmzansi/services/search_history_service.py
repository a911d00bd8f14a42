from typing import List

from rentmzansi.services.base import StoreService


class RecentSearchService(StoreService):
    """Most recent location searches, newest first"""

    def get_recent_searches(self) -> List[str]:
        stored = self.store.read_json(self.keys.recent_searches, [])
        return [s for s in stored if isinstance(s, str)][:self.config.RECENT_SEARCHES_MAX]

    def add_recent_search(self, location: str) -> List[str]:
        trimmed = (location or "").strip()
        if len(trimmed) < 2:
            return self.get_recent_searches()

        others = [s for s in self.get_recent_searches() if s.lower() != trimmed.lower()]
        updated = [trimmed, *others][:self.config.RECENT_SEARCHES_MAX]

        self.store.write_json(self.keys.recent_searches, updated)
        return updated
