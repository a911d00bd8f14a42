import redis
from redis.exceptions import RedisError, ResponseError
from pydantic import BaseModel, ValidationError
from typing import Optional, Any, Dict, List, Type, TypeVar
import json
import logging
import time

from rentmzansi.core.config import Settings, StorageKeys, settings
from rentmzansi.core.exceptions import (
    StorageError,
    StorageQuotaExceededError,
    StorageUnavailableError,
)
from rentmzansi.core.monitoring import MetricsTracker

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class MemoryStorage:
    """In-process string key-value storage with an optional size quota"""

    name = "memory"

    def __init__(self, quota_bytes: Optional[int] = None):
        self._items: Dict[str, str] = {}
        self.quota_bytes = quota_bytes
        self.enabled = True

    def is_available(self) -> bool:
        return self.enabled

    def _ensure_enabled(self, key: str):
        if not self.enabled:
            raise StorageUnavailableError("Storage is disabled", key=key)

    def get_item(self, key: str) -> Optional[str]:
        self._ensure_enabled(key)
        return self._items.get(key)

    def set_item(self, key: str, value: str):
        self._ensure_enabled(key)

        if self.quota_bytes is not None:
            used = sum(
                len(k) + len(v) for k, v in self._items.items() if k != key
            )
            size = len(key) + len(value)
            if used + size > self.quota_bytes:
                raise StorageQuotaExceededError(key, size, self.quota_bytes)

        self._items[key] = value

    def remove_item(self, key: str):
        self._ensure_enabled(key)
        self._items.pop(key, None)

    def keys(self, prefix: str = "") -> List[str]:
        self._ensure_enabled(prefix)
        return sorted(k for k in self._items if k.startswith(prefix))

    def clear(self):
        self._items.clear()

    def close(self):
        pass


class RedisStorage:
    """Redis-backed string key-value storage"""

    name = "redis"

    def __init__(
            self,
            url: str,
            socket_connect_timeout: int = 5,
            client: Optional[redis.Redis] = None
    ):
        self.url = url
        self.redis = client or redis.Redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=socket_connect_timeout
        )

    def connect(self) -> bool:
        """Check the connection, logging instead of raising"""
        try:
            self.redis.ping()
            logger.info("Connected to Redis at %s", self.url)
            return True
        except RedisError as e:
            logger.warning("Redis connection failed: %s. Storage will degrade to no-ops", e)
            return False

    def is_available(self) -> bool:
        try:
            return bool(self.redis.ping())
        except RedisError:
            return False

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self.redis.get(key)
        except RedisError as e:
            raise StorageUnavailableError(str(e), key=key) from e

    def set_item(self, key: str, value: str):
        try:
            self.redis.set(key, value)
        except ResponseError as e:
            if str(e).startswith("OOM"):
                raise StorageQuotaExceededError(key, len(value)) from e
            raise StorageUnavailableError(str(e), key=key) from e
        except RedisError as e:
            raise StorageUnavailableError(str(e), key=key) from e

    def remove_item(self, key: str):
        try:
            self.redis.delete(key)
        except RedisError as e:
            raise StorageUnavailableError(str(e), key=key) from e

    def keys(self, prefix: str = "") -> List[str]:
        try:
            return sorted(self.redis.scan_iter(match=f"{prefix}*", count=100))
        except RedisError as e:
            raise StorageUnavailableError(str(e), key=prefix) from e

    def close(self):
        try:
            self.redis.close()
            logger.info("Redis connection closed")
        except RedisError as e:
            logger.warning("Redis close error: %s", e)


def create_storage_backend(config: Settings = settings):
    """Build the storage backend selected by STORAGE_BACKEND"""
    if config.STORAGE_BACKEND == "redis":
        backend = RedisStorage(config.REDIS_URL)
        backend.connect()
        return backend
    return MemoryStorage(quota_bytes=config.STORAGE_QUOTA_BYTES)


class LocalStore:
    """
    JSON repository over a key-value backend

    One instance covers one namespace (a client or browser profile). Reads
    that fail or return malformed JSON come back as the supplied default;
    writes that fail are logged and reported as False.
    """

    def __init__(
            self,
            backend,
            keys: Optional[StorageKeys] = None,
            namespace: str = "",
            prefix: str = ""
    ):
        self.backend = backend
        self.keys = keys or settings.STORAGE_KEYS
        self.namespace = namespace
        self.prefix = prefix

    def for_namespace(self, namespace: str) -> "LocalStore":
        return LocalStore(self.backend, self.keys, namespace=namespace, prefix=self.prefix)

    def full_key(self, name: str) -> str:
        if self.namespace:
            return f"{self.prefix}{self.namespace}:{name}"
        return f"{self.prefix}{name}"

    def read_json(self, name: str, default: Any) -> Any:
        """
        Read and decode a JSON blob

        Args:
            name: Logical key (a StorageKeys value)
            default: Returned when the key is missing, unreadable or holds a
                value of a different JSON type than the default

        Returns:
            Decoded value or default
        """
        key = self.full_key(name)
        start = time.time()

        try:
            raw = self.backend.get_item(key)
        except StorageError as e:
            logger.warning("Storage read failed for %s: %s", key, e)
            MetricsTracker.track_storage_error("read", type(e).__name__)
            return default
        finally:
            MetricsTracker.track_storage_operation("read", time.time() - start)

        if raw is None:
            return default

        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Discarding corrupt JSON under %s: %s", key, e)
            MetricsTracker.track_storage_error("parse", type(e).__name__)
            return default

        if default is not None and not isinstance(value, type(default)):
            logger.warning(
                "Discarding %s under %s, expected %s",
                type(value).__name__, key, type(default).__name__
            )
            MetricsTracker.track_storage_error("parse", "UnexpectedType")
            return default

        return value

    def write_json(self, name: str, value: Any) -> bool:
        """Encode and store a JSON blob. Returns False when the write was dropped"""
        key = self.full_key(name)

        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error("Value for %s is not JSON serializable: %s", key, e)
            MetricsTracker.track_storage_error("write", type(e).__name__)
            return False

        start = time.time()
        try:
            self.backend.set_item(key, payload)
            return True
        except StorageError as e:
            logger.warning("Storage write failed for %s: %s", key, e)
            MetricsTracker.track_storage_error("write", type(e).__name__)
            return False
        finally:
            MetricsTracker.track_storage_operation("write", time.time() - start)

    def remove(self, name: str) -> bool:
        key = self.full_key(name)
        try:
            self.backend.remove_item(key)
            return True
        except StorageError as e:
            logger.warning("Storage remove failed for %s: %s", key, e)
            MetricsTracker.track_storage_error("remove", type(e).__name__)
            return False

    def read_models(self, name: str, model: Type[ModelT]) -> List[ModelT]:
        """Read a JSON list and validate each entry, dropping invalid ones"""
        items = []
        for raw in self.read_json(name, []):
            parsed = validate_record(model, raw, self.full_key(name))
            if parsed is not None:
                items.append(parsed)
        return items

    def write_models(self, name: str, items: List[BaseModel]) -> bool:
        return self.write_json(name, [item.model_dump(mode="json") for item in items])


def validate_record(model: Type[ModelT], raw: Any, where: str = "") -> Optional[ModelT]:
    """Validate one persisted record, returning None (and logging) when malformed"""
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.warning(
            "Dropping malformed %s record under %s (%d errors)",
            model.__name__, where, e.error_count()
        )
        MetricsTracker.track_storage_error("parse", "ValidationError")
        return None
