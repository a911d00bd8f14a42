from typing import Optional, List
import logging

from rentmzansi.core.monitoring import MetricsTracker
from rentmzansi.core.storage import validate_record
from rentmzansi.schemas.engagement import CompareResult, ListingSnapshot
from rentmzansi.services.base import ANONYMOUS_USER, StoreService

logger = logging.getLogger(__name__)


def _as_count(value) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return 0


class EngagementService(StoreService):
    """View counters, viewed-price snapshots and the compare list"""

    # VIEWS

    def track_listing_view(self, listing_id: str, user_id: Optional[str] = None) -> int:
        """
        Count a view of a listing

        A signed-in viewer is counted once per listing. Anonymous views
        cannot be deduplicated and always count. The viewer index keeps the
        newest VIEWERS_PER_LISTING_MAX ids per listing.

        Returns:
            Distinct-viewer count after this view, unchanged when the count
            could not be stored
        """
        counts = self.store.read_json(self.keys.view_counts, {})
        current = _as_count(counts.get(listing_id))

        viewers = {}
        listing_viewers = []
        if user_id:
            viewers = self.store.read_json(self.keys.view_count_viewers, {})
            listing_viewers = viewers.get(listing_id)
            if not isinstance(listing_viewers, list):
                listing_viewers = []

            if user_id in listing_viewers:
                MetricsTracker.track_listing_view(deduplicated=True)
                return current

        counts[listing_id] = current + 1
        if not self.store.write_json(self.keys.view_counts, counts):
            return current

        if user_id:
            listing_viewers.append(user_id)
            viewers[listing_id] = listing_viewers[-max(self.config.VIEWERS_PER_LISTING_MAX, 1):]
            self.store.write_json(self.keys.view_count_viewers, viewers)

        MetricsTracker.track_listing_view(deduplicated=False)
        return current + 1

    def get_view_count(self, listing_id: str) -> int:
        return _as_count(self.store.read_json(self.keys.view_counts, {}).get(listing_id))

    def track_user_viewed_listing(
        self,
        user_id: Optional[str],
        listing_id: str,
        price: float
    ) -> bool:
        """Record the price a user saw; check_price_drops compares against it"""
        snapshots = self.store.read_json(self.keys.listing_snapshots, {})
        user_key = user_id or ANONYMOUS_USER

        user_snapshots = snapshots.get(user_key)
        if not isinstance(user_snapshots, dict):
            user_snapshots = {}

        user_snapshots[listing_id] = ListingSnapshot(
            price=price,
            timestamp=self.now()
        ).model_dump(mode="json")
        snapshots[user_key] = user_snapshots

        return self.store.write_json(self.keys.listing_snapshots, snapshots)

    def get_viewed_price(self, user_id: Optional[str], listing_id: str) -> Optional[ListingSnapshot]:
        user_key = user_id or ANONYMOUS_USER
        user_snapshots = self.store.read_json(self.keys.listing_snapshots, {}).get(user_key)

        if not isinstance(user_snapshots, dict) or listing_id not in user_snapshots:
            return None

        return validate_record(ListingSnapshot, user_snapshots[listing_id], f"{user_key}/{listing_id}")

    # COMPARE

    def get_compare_list(self) -> List[str]:
        return [i for i in self.store.read_json(self.keys.compare_list, []) if isinstance(i, str)]

    def add_to_compare(self, listing_id: str) -> CompareResult:
        compare = self.get_compare_list()
        limit = self.config.COMPARE_LIST_MAX

        if listing_id in compare:
            MetricsTracker.track_compare_rejection("duplicate")
            return CompareResult(
                success=False,
                message="This listing is already in your compare list",
                compare_list=compare
            )

        if len(compare) >= limit:
            MetricsTracker.track_compare_rejection("full")
            return CompareResult(
                success=False,
                message=f"You can compare up to {limit} listings. Remove one to add another.",
                compare_list=compare
            )

        compare.append(listing_id)
        if not self.store.write_json(self.keys.compare_list, compare):
            return CompareResult(
                success=False,
                message="Could not update your compare list. Please try again.",
                compare_list=compare[:-1]
            )

        return CompareResult(success=True, message="Added to compare list", compare_list=compare)

    def remove_from_compare(self, listing_id: str) -> List[str]:
        compare = self.get_compare_list()
        remaining = [i for i in compare if i != listing_id]

        if len(remaining) != len(compare):
            self.store.write_json(self.keys.compare_list, remaining)

        return remaining

    def clear_compare(self) -> bool:
        return self.store.write_json(self.keys.compare_list, [])
