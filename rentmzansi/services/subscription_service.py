from typing import List
import logging

from rentmzansi.schemas.engagement import SubscribeResult
from rentmzansi.services.base import StoreService

logger = logging.getLogger(__name__)


class SubscriptionService(StoreService):
    """Per-user area subscriptions ({user_id: [area, ...]})"""

    def _load(self) -> dict:
        return self.store.read_json(self.keys.area_subscriptions, {})

    def get_subscriptions(self, user_id: str) -> List[str]:
        areas = self._load().get(user_id)
        if not isinstance(areas, list):
            return []
        return [a for a in areas if isinstance(a, str)]

    def subscribe_to_area(self, user_id: str, area: str) -> SubscribeResult:
        """Subscribe a user to updates for an area"""
        area = (area or "").strip()

        if not user_id:
            return SubscribeResult(success=False, message="Sign in to subscribe to area updates.")

        if not area:
            return SubscribeResult(
                success=False,
                message="Please enter a location to subscribe to.",
                areas=self.get_subscriptions(user_id)
            )

        subscriptions = self._load()
        areas = self.get_subscriptions(user_id)

        if any(a.lower() == area.lower() for a in areas):
            return SubscribeResult(
                success=False,
                message=f"You are already subscribed to {area}",
                areas=areas
            )

        areas.append(area)
        subscriptions[user_id] = areas

        if not self.store.write_json(self.keys.area_subscriptions, subscriptions):
            return SubscribeResult(
                success=False,
                message="Could not subscribe. Please try again.",
                areas=areas[:-1]
            )

        logger.info("User %s subscribed to %r", user_id, area)
        return SubscribeResult(success=True, message=f"Subscribed to updates for {area}", areas=areas)

    def unsubscribe_from_area(self, user_id: str, area: str) -> List[str]:
        """Remove an area subscription (case-insensitive). Returns the remaining areas"""
        subscriptions = self._load()
        areas = self.get_subscriptions(user_id)
        remaining = [a for a in areas if a.lower() != (area or "").strip().lower()]

        if len(remaining) != len(areas):
            subscriptions[user_id] = remaining
            self.store.write_json(self.keys.area_subscriptions, subscriptions)

        return remaining
