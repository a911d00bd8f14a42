from typing import Optional, List, Iterable, Union
from uuid import uuid4
import logging

from rentmzansi.core.monitoring import MetricsTracker
from rentmzansi.core.storage import validate_record
from rentmzansi.models.enums import NotificationType
from rentmzansi.schemas.engagement import ListingSnapshot
from rentmzansi.schemas.listing import Listing, format_rand
from rentmzansi.schemas.notification import Notification, NotificationCreate
from rentmzansi.schemas.saved_search import SavedSearch
from rentmzansi.services.base import ANONYMOUS_USER, StoreService
from rentmzansi.services.favorite_service import FavoriteService
from rentmzansi.services.saved_search_service import SavedSearchService
from rentmzansi.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

ListingLike = Union[Listing, dict]
SearchLike = Union[SavedSearch, dict]


def _as_listing(listing: ListingLike) -> Listing:
    return listing if isinstance(listing, Listing) else Listing.model_validate(listing)


def _as_search(search: SearchLike) -> SavedSearch:
    return search if isinstance(search, SavedSearch) else SavedSearch.model_validate(search)


def listing_matches_search(listing: Listing, search: SavedSearch) -> bool:
    """Check if a listing satisfies saved search criteria"""

    # Location is a plain case-insensitive substring test
    if search.location and search.location.lower() not in listing.location.lower():
        return False

    if search.price_min is not None and listing.price < search.price_min:
        return False

    if search.price_max is not None and listing.price > search.price_max:
        return False

    if search.amenities:
        listing_amenities = set(listing.amenities)
        if not all(a in listing_amenities for a in search.amenities):
            return False

    return True


class NotificationService(StoreService):
    """Notification generator and inbox"""

    # GENERATOR

    def check_new_listings(
        self,
        current_listings: Iterable[ListingLike],
        saved_searches: Iterable[SearchLike]
    ) -> List[NotificationCreate]:
        """
        Find listings not seen before that match at least one saved search

        Every listing in current_listings is marked seen afterwards, so
        repeated checks over the same set produce nothing new. When the seen
        set cannot be stored, no matches are returned; they come through on
        a later check once storage accepts the write.
        """
        listings = [_as_listing(listing) for listing in current_listings]
        searches = [_as_search(search) for search in saved_searches]

        seen = self._load_seen(self.keys.seen_listings)
        seen_keys = set(seen)
        notifications = []

        for listing in listings:
            key = listing.key
            if key in seen_keys:
                continue
            seen_keys.add(key)
            seen.append(key)

            for search in searches:
                if listing_matches_search(listing, search):
                    notifications.append(NotificationCreate(
                        type=NotificationType.NEW_LISTING,
                        title="New Listing Match",
                        body=(
                            f'"{listing.title}" at {format_rand(listing.price)}/month '
                            f'in {listing.location or "your area"} matches your saved search'
                        ),
                        listing_id=key,
                        search_id=search.id
                    ))
                    break

        if not self._save_seen(self.keys.seen_listings, seen):
            logger.warning("Seen listings could not be stored, holding back %d matches", len(notifications))
            return []

        return notifications

    def check_price_drops(
        self,
        current_listings: Iterable[ListingLike],
        favorite_ids: Iterable[str],
        user_id: Optional[str] = None
    ) -> List[NotificationCreate]:
        """
        Compare favorited listings against the viewer's price snapshots

        First observation only records a baseline. A strictly lower price
        produces a notification and becomes the new baseline.
        """
        favorites = set(favorite_ids)
        user_key = user_id or ANONYMOUS_USER

        snapshots = self.store.read_json(self.keys.listing_snapshots, {})
        user_snapshots = snapshots.get(user_key)
        if not isinstance(user_snapshots, dict):
            user_snapshots = {}

        notifications = []
        changed = False

        for listing in map(_as_listing, current_listings):
            key = listing.key
            if key not in favorites:
                continue

            snapshot = None
            if key in user_snapshots:
                snapshot = validate_record(ListingSnapshot, user_snapshots[key], f"{user_key}/{key}")

            if snapshot is None:
                user_snapshots[key] = self._snapshot(listing.price)
                changed = True
                continue

            if listing.price < snapshot.price:
                drop = snapshot.price - listing.price
                notifications.append(NotificationCreate(
                    type=NotificationType.PRICE_DROP,
                    title="Price Drop Alert",
                    body=(
                        f'"{listing.title}" dropped by {format_rand(drop)} '
                        f'to {format_rand(listing.price)}/month'
                    ),
                    listing_id=key,
                    old_price=snapshot.price,
                    new_price=listing.price
                ))
                user_snapshots[key] = self._snapshot(listing.price)
                changed = True

        if changed:
            snapshots[user_key] = user_snapshots
            self.store.write_json(self.keys.listing_snapshots, snapshots)

        return notifications

    def check_subscribed_areas(
        self,
        current_listings: Iterable[ListingLike],
        areas: Iterable[str]
    ) -> List[NotificationCreate]:
        """New listings whose location contains one of the subscribed areas"""
        wanted = [a.strip() for a in areas if a and a.strip()]

        seen = self._load_seen(self.keys.seen_area_listings)
        seen_keys = set(seen)
        notifications = []

        for listing in map(_as_listing, current_listings):
            key = listing.key
            if key in seen_keys:
                continue
            seen_keys.add(key)
            seen.append(key)

            location = listing.location.lower()
            for area in wanted:
                if area.lower() in location:
                    notifications.append(NotificationCreate(
                        type=NotificationType.SAVED_AREA,
                        title=f"New room in {area}",
                        body=f'"{listing.title}" is now available for {format_rand(listing.price)}/month',
                        listing_id=key,
                        area=area
                    ))
                    break

        if not self._save_seen(self.keys.seen_area_listings, seen):
            logger.warning("Seen area listings could not be stored, holding back %d matches", len(notifications))
            return []

        return notifications

    def _load_seen(self, name: str) -> List[str]:
        return [k for k in self.store.read_json(name, []) if isinstance(k, str)]

    def _save_seen(self, name: str, seen: List[str]) -> bool:
        """Persist a seen set in insertion order, dropping the oldest keys past SEEN_LISTINGS_MAX"""
        limit = max(self.config.SEEN_LISTINGS_MAX, 1)
        return self.store.write_json(name, seen[-limit:])

    def _snapshot(self, price: float) -> dict:
        return ListingSnapshot(price=price, timestamp=self.now()).model_dump(mode="json")

    def process_listings(
        self,
        current_listings: Iterable[ListingLike],
        favorite_ids: Optional[Iterable[str]] = None,
        user_id: Optional[str] = None
    ) -> List[Notification]:
        """
        Run every check against the current listing set and store the results

        Saved searches come from the registry and areas from the user's
        subscriptions. Price drops are checked on favorite_ids, or on the
        stored favorites when none are given. Returns the notifications that
        reached the inbox.
        """
        listings = [_as_listing(listing) for listing in current_listings]

        saved_searches = SavedSearchService(self.store, self.now, self.config).get_saved_searches()
        areas = []
        if user_id:
            areas = SubscriptionService(self.store, self.now, self.config).get_subscriptions(user_id)
        if favorite_ids is None:
            favorite_ids = FavoriteService(self.store, self.now, self.config).get_favorites()

        candidates = (
            self.check_new_listings(listings, saved_searches)
            + self.check_price_drops(listings, favorite_ids, user_id)
            + self.check_subscribed_areas(listings, areas)
        )

        stored = []
        for candidate in candidates:
            entry = self.add_notification(candidate)
            if entry is not None:
                stored.append(entry)

        if stored:
            logger.info("Generated %d notifications from %d listings", len(stored), len(listings))

        return stored

    # INBOX

    def add_notification(
        self,
        notification: Union[NotificationCreate, dict]
    ) -> Optional[Notification]:
        """
        Prepend a notification to the inbox

        Keeps at most NOTIFICATIONS_MAX entries, evicting the oldest.
        Returns None when storage rejected the write.
        """
        if isinstance(notification, dict):
            notification = NotificationCreate.model_validate(notification)

        data = notification.model_dump(exclude={"id", "timestamp", "read"})
        entry = Notification(
            **data,
            id=notification.id or uuid4().hex,
            timestamp=notification.timestamp or self.now(),
            read=False
        )

        inbox = self.get_notifications()
        inbox.insert(0, entry)
        inbox = inbox[:max(self.config.NOTIFICATIONS_MAX, 1)]

        if not self.store.write_models(self.keys.notifications, inbox):
            logger.error("Failed to add %s notification", entry.type.value)
            return None

        MetricsTracker.track_notification(entry.type.value)
        return entry

    def get_notifications(self) -> List[Notification]:
        """Inbox entries, newest first"""
        return self.store.read_models(self.keys.notifications, Notification)

    def get_unread_count(self) -> int:
        return sum(1 for n in self.get_notifications() if not n.read)

    def mark_notification_read(self, notification_id: str) -> bool:
        """Mark one notification read. Returns False for unknown ids"""
        inbox = self.get_notifications()

        for item in inbox:
            if item.id == notification_id:
                if not item.read:
                    item.read = True
                    self.store.write_models(self.keys.notifications, inbox)
                return True

        return False

    def mark_all_read(self) -> int:
        """Mark every notification read. Returns how many changed"""
        inbox = self.get_notifications()
        unread = [n for n in inbox if not n.read]

        if unread:
            for item in unread:
                item.read = True
            self.store.write_models(self.keys.notifications, inbox)

        return len(unread)

    def delete_notification(self, notification_id: str) -> bool:
        inbox = self.get_notifications()
        remaining = [n for n in inbox if n.id != notification_id]

        if len(remaining) == len(inbox):
            return False

        return self.store.write_models(self.keys.notifications, remaining)

    def clear_notifications(self) -> bool:
        return self.store.write_json(self.keys.notifications, [])
