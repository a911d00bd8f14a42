from typing import Optional, List, Union
from uuid import uuid4
import logging

from rentmzansi.core.exceptions import SavedSearchLimitException
from rentmzansi.schemas.saved_search import SavedSearch, SavedSearchCreate
from rentmzansi.services.base import StoreService

logger = logging.getLogger(__name__)


class SavedSearchService(StoreService):
    """Saved search registry persisted as a JSON list in insertion order"""

    def _load(self) -> List[SavedSearch]:
        return self.store.read_models(self.keys.saved_searches, SavedSearch)

    def save_search(
        self,
        criteria: Union[SavedSearchCreate, dict]
    ) -> Optional[SavedSearch]:
        """
        Persist new search criteria

        Args:
            criteria: Search criteria (schema or plain dict)

        Returns:
            The stored record, or None when storage rejected the write

        Raises:
            SavedSearchLimitException: If SAVED_SEARCH_LIMIT is reached
        """
        if isinstance(criteria, dict):
            criteria = SavedSearchCreate.model_validate(criteria)

        searches = self._load()

        limit = self.config.SAVED_SEARCH_LIMIT
        if limit and len(searches) >= limit:
            raise SavedSearchLimitException(limit)

        entry = SavedSearch(
            id=uuid4().hex,
            created_at=self.now(),
            **criteria.model_dump()
        )
        searches.append(entry)

        if not self.store.write_models(self.keys.saved_searches, searches):
            logger.error("Failed to save search for location %r", entry.location)
            return None

        logger.info("Saved search %s (location=%r)", entry.id, entry.location)
        return entry

    def get_saved_searches(self) -> List[SavedSearch]:
        """All saved searches, newest first"""
        return list(reversed(self._load()))

    def get_saved_search(self, search_id: str) -> Optional[SavedSearch]:
        for search in self._load():
            if search.id == search_id:
                return search
        return None

    def delete_saved_search(self, search_id: str) -> bool:
        """Delete saved search. Returns False when the id is unknown or the write failed"""
        searches = self._load()
        remaining = [s for s in searches if s.id != search_id]

        if len(remaining) == len(searches):
            return False

        return self.store.write_models(self.keys.saved_searches, remaining)
