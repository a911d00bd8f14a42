from typing import Optional, List
from datetime import datetime, timedelta, timezone
from pydantic import TypeAdapter, ValidationError
import logging

from rentmzansi.core.monitoring import MetricsTracker
from rentmzansi.models.enums import BadgeColor
from rentmzansi.schemas.engagement import ResponseBadge
from rentmzansi.services.base import StoreService

logger = logging.getLogger(__name__)

_timestamp = TypeAdapter(datetime)

DEFAULT_QUICK_REPLIES = [
    "Hi! Thanks for your interest. When would you like to view the room?",
    "The room is still available. Would you like to schedule a viewing?",
    "Yes, the price includes water and electricity.",
    "Sorry, the room has been taken. I'll let you know if anything else comes up.",
    "The deposit is equal to one month's rent.",
]


def _parse_timestamp(value) -> Optional[datetime]:
    try:
        parsed = _timestamp.validate_python(value)
    except ValidationError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class LandlordService(StoreService):
    """Landlord contact history, response-time badge and quick replies"""

    # RESPONSE TRACKING

    def track_landlord_contact_click(self, landlord_id: str) -> bool:
        """Append a contact timestamp, keeping the newest RESPONSE_HISTORY_MAX entries"""
        records = self.store.read_json(self.keys.landlord_response_times, {})

        history = records.get(landlord_id)
        if not isinstance(history, list):
            history = []

        history.append(self.now().isoformat())
        records[landlord_id] = history[-self.config.RESPONSE_HISTORY_MAX:]

        MetricsTracker.track_contact_click()
        return self.store.write_json(self.keys.landlord_response_times, records)

    def get_contact_history(self, landlord_id: str) -> List[datetime]:
        history = self.store.read_json(self.keys.landlord_response_times, {}).get(landlord_id)
        if not isinstance(history, list):
            return []

        parsed = [_parse_timestamp(value) for value in history]
        return [ts for ts in parsed if ts is not None]

    def get_response_time_badge(self, landlord_id: str) -> Optional[ResponseBadge]:
        """
        Coarse responsiveness label from the most recent contact

        Returns:
            Badge, or None when the landlord has no contact history
        """
        history = self.get_contact_history(landlord_id)
        if not history:
            return None

        age = self.now() - max(history)

        if age <= timedelta(hours=self.config.RESPONSE_FAST_WINDOW_HOURS):
            return ResponseBadge(text="Responds within hours", color=BadgeColor.GREEN)

        if age <= timedelta(days=self.config.RESPONSE_RECENT_WINDOW_DAYS):
            return ResponseBadge(text="Responds within a few days", color=BadgeColor.AMBER)

        return ResponseBadge(text="Usually responds slowly", color=BadgeColor.GRAY)

    # QUICK REPLIES

    def get_quick_replies(self, landlord_id: str) -> List[str]:
        stored = self.store.read_json(self.keys.quick_replies, {}).get(landlord_id)

        if isinstance(stored, list):
            replies = [r for r in stored if isinstance(r, str) and r.strip()]
            if replies:
                return replies

        return list(DEFAULT_QUICK_REPLIES)

    def save_quick_replies(self, landlord_id: str, replies: List[str]) -> bool:
        """Store a landlord's reply templates. Blank templates are dropped"""
        cleaned = [r.strip() for r in replies if r and r.strip()]
        if not cleaned:
            return False

        stored = self.store.read_json(self.keys.quick_replies, {})
        stored[landlord_id] = cleaned
        return self.store.write_json(self.keys.quick_replies, stored)
