from typing import Optional, List, Type, TypeVar
import logging

from pydantic import BaseModel

from rentmzansi.core.storage import validate_record
from rentmzansi.schemas.review import (
    ListingReport,
    ReportCreate,
    Review,
    ReviewCreate,
    ReviewSummary
)
from rentmzansi.services.base import StoreService

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class _PerListingStore(StoreService):
    """Lists of records grouped by listing key under one storage key"""

    storage_key: str = ""

    def _records(self, listing_id: str, model: Type[RecordT]) -> List[RecordT]:
        raw = self.store.read_json(self.storage_key, {}).get(listing_id)
        if not isinstance(raw, list):
            return []

        where = f"{self.storage_key}/{listing_id}"
        parsed = [validate_record(model, item, where) for item in raw]
        return [item for item in parsed if item is not None]

    def _append(self, listing_id: str, record: BaseModel, model: Type[RecordT]) -> bool:
        grouped = self.store.read_json(self.storage_key, {})
        records = self._records(listing_id, model)
        records.append(record)
        grouped[listing_id] = [r.model_dump(mode="json") for r in records]
        return self.store.write_json(self.storage_key, grouped)


class ReviewService(_PerListingStore):
    """Star ratings and comments left on listings"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.storage_key = self.keys.reviews

    def add_review(self, listing_id: str, review: ReviewCreate) -> Optional[Review]:
        entry = Review(**review.model_dump(), timestamp=self.now())
        if not self._append(listing_id, entry, Review):
            logger.error("Failed to store review for %s", listing_id)
            return None
        return entry

    def get_reviews(self, listing_id: str) -> List[Review]:
        return self._records(listing_id, Review)

    def get_review_summary(self, listing_id: str) -> ReviewSummary:
        reviews = self.get_reviews(listing_id)
        average = 0.0
        if reviews:
            average = round(sum(r.rating for r in reviews) / len(reviews), 1)

        return ReviewSummary(
            listing_id=listing_id,
            average_rating=average,
            review_count=len(reviews)
        )


class ReportService(_PerListingStore):
    """Renter reports about suspicious or incorrect listings"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.storage_key = self.keys.reports

    def report_listing(self, listing_id: str, report: ReportCreate) -> Optional[ListingReport]:
        entry = ListingReport(**report.model_dump(), timestamp=self.now())
        if not self._append(listing_id, entry, ListingReport):
            logger.error("Failed to store report for %s", listing_id)
            return None

        logger.info("Listing %s reported: %s", listing_id, entry.reason.value)
        return entry

    def get_reports(self, listing_id: str) -> List[ListingReport]:
        return self._records(listing_id, ListingReport)
