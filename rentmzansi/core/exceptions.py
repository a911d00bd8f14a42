"""
Custom Exception Classes and Handlers
Storage-layer errors raised by the key-value backends, API errors raised by
the endpoints, and the handlers that render them in one error format
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, Optional
import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


# ============================================================================
# STORAGE EXCEPTIONS
# ============================================================================

class StorageError(Exception):
    """Base class for key-value storage failures"""

    def __init__(self, message: str, key: str = None):
        super().__init__(message)
        self.key = key


class StorageQuotaExceededError(StorageError):
    """Raised when a write would exceed the storage quota"""

    def __init__(self, key: str, size: int, quota: Optional[int] = None):
        limit = f"the storage quota of {quota} bytes" if quota else "the backend memory limit"
        super().__init__(f"Writing {size} bytes to '{key}' exceeds {limit}", key=key)
        self.size = size
        self.quota = quota


class StorageUnavailableError(StorageError):
    """Raised when the storage backend cannot be reached or is disabled"""


# ============================================================================
# API EXCEPTIONS
# ============================================================================

class BaseAPIException(HTTPException):
    """Base exception class for all API exceptions"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str = None,
        headers: Dict[str, Any] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code or self.__class__.__name__


class SavedSearchLimitException(BaseAPIException):
    """Raised when the saved search limit is reached"""

    def __init__(self, limit: int = 20):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum number of saved searches reached ({limit})",
            error_code="SAVED_SEARCH_LIMIT"
        )
        self.limit = limit


class SavedSearchNotFoundException(BaseAPIException):
    """Raised when saved search is not found"""

    def __init__(self, search_id: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Saved search {search_id} not found",
            error_code="SAVED_SEARCH_NOT_FOUND"
        )


class NotificationNotFoundException(BaseAPIException):
    """Raised when a notification is not in the inbox"""

    def __init__(self, notification_id: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {notification_id} not found",
            error_code="NOTIFICATION_NOT_FOUND"
        )


class RoommateProfileNotFoundException(BaseAPIException):
    """Raised when a roommate profile does not exist"""

    def __init__(self, user_id: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Roommate profile for {user_id} not found",
            error_code="PROFILE_NOT_FOUND"
        )


class StorageWriteFailedException(BaseAPIException):
    """Raised by endpoints when a write was dropped by the storage layer"""

    def __init__(self, what: str):
        super().__init__(
            status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
            detail=f"Could not store {what}. Storage may be full or unavailable.",
            error_code="STORAGE_WRITE_FAILED"
        )


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

def _error_body(code: str, message: Any, path: str, **extra) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": path,
            **extra
        }
    }


async def base_api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    """
    Handler for custom API exceptions
    Returns consistent error format
    """
    logger.error(
        f"API Exception: {exc.error_code} - {exc.detail}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error_code, exc.detail, request.url.path),
        headers=exc.headers
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handler for Pydantic validation errors
    Returns detailed field-level errors
    """
    logger.warning(
        f"Validation Error: {request.url.path}",
        extra={
            "path": request.url.path,
            "method": request.method
        }
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            "VALIDATION_ERROR",
            "Request validation failed",
            request.url.path,
            details=jsonable_encoder(exc.errors())
        )
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handler for standard HTTP exceptions
    """
    logger.error(
        f"HTTP Exception: {exc.status_code} - {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(f"HTTP_{exc.status_code}", exc.detail, request.url.path),
        headers=getattr(exc, "headers", None)
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler for unhandled exceptions
    Logs detailed error and returns generic message to user
    """
    logger.critical(
        f"Unhandled Exception: {str(exc)}",
        extra={
            "exception_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred.",
            request.url.path
        )
    )
