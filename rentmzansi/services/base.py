from datetime import datetime, timezone
from typing import Callable, Optional

from rentmzansi.core.config import Settings, settings
from rentmzansi.core.storage import LocalStore

ANONYMOUS_USER = "anonymous"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoreService:
    """Base for services that keep their state in one LocalStore"""

    def __init__(
        self,
        store: LocalStore,
        clock: Optional[Callable[[], datetime]] = None,
        config: Settings = settings
    ):
        self.store = store
        self.keys = store.keys
        self.config = config
        self.now = clock or utcnow
