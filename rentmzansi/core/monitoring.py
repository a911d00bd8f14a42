"""
Monitoring and Observability Module
Integrates Prometheus metrics, structured logging, and performance tracking
"""

from prometheus_client import Counter, Histogram, generate_latest, REGISTRY
from prometheus_client.exposition import CONTENT_TYPE_LATEST
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import re
import time
import logging
from typing import Callable
from datetime import datetime, timezone
import json

# ============================================================================
# PROMETHEUS METRICS
# ============================================================================

# API Request Metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)
)

# Engagement Metrics
notifications_generated_total = Counter(
    'notifications_generated_total',
    'Total notifications added to inboxes',
    ['notification_type']  # new-listing, price-drop, saved-area
)

listing_views_total = Counter(
    'listing_views_total',
    'Total listing views tracked',
    ['deduplicated']  # true when the viewer had already been counted
)

compare_rejections_total = Counter(
    'compare_rejections_total',
    'Rejected add-to-compare requests',
    ['reason']  # full, duplicate
)

landlord_contact_clicks_total = Counter(
    'landlord_contact_clicks_total',
    'Total landlord contact clicks tracked'
)

# Storage Metrics
storage_errors_total = Counter(
    'storage_errors_total',
    'Storage operations that degraded to a no-op',
    ['operation', 'error']  # operation: read, write, parse
)

storage_operation_duration_seconds = Histogram(
    'storage_operation_duration_seconds',
    'Key-value storage operation duration in seconds',
    ['operation'],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1)
)

# Error Metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type', 'endpoint']
)

# ============================================================================
# MONITORING MIDDLEWARE
# ============================================================================

class PrometheusMonitoringMiddleware(BaseHTTPMiddleware):
    """
    Middleware to track HTTP requests and responses with Prometheus metrics
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip metrics endpoint itself
        if request.url.path == "/metrics":
            return await call_next(request)

        endpoint = self._clean_endpoint(request.url.path)
        method = request.method
        status_code = 500

        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            errors_total.labels(
                error_type=type(e).__name__,
                endpoint=endpoint
            ).inc()
            raise
        finally:
            duration = time.time() - start_time
            if status_code >= 500 or duration > SLOW_REQUEST_SECONDS:
                request_logger.warning(
                    "Slow or failed request",
                    method=method,
                    endpoint=endpoint,
                    status=status_code,
                    duration=round(duration, 4)
                )
            http_request_duration_seconds.labels(
                method=method,
                endpoint=endpoint
            ).observe(duration)

            http_requests_total.labels(
                method=method,
                endpoint=endpoint,
                status=status_code
            ).inc()

        return response

    def _clean_endpoint(self, path: str) -> str:
        """
        Collapse per-entity path segments so label cardinality stays bounded
        Example: /api/v1/listings/L1/views -> /api/v1/listings/{id}/views
        """
        def _replace(match: re.Match) -> str:
            if match.group(2) in _STATIC_SEGMENTS:
                return match.group(0)
            return f"/{match.group(1)}/{{id}}"

        return _ENTITY_SEGMENT.sub(_replace, path)


_ENTITY_SEGMENT = re.compile(
    r'/(saved-searches|notifications|listings|compare|landlords|favorites|subscriptions|roommates)/([^/]+)'
)
_STATIC_SEGMENTS = {"read-all", "unread-count", "check"}


# ============================================================================
# METRICS TRACKING HELPERS
# ============================================================================

class MetricsTracker:
    """Helper class for tracking custom metrics"""

    @staticmethod
    def track_notification(notification_type: str):
        notifications_generated_total.labels(notification_type=notification_type).inc()

    @staticmethod
    def track_listing_view(deduplicated: bool):
        listing_views_total.labels(deduplicated=str(deduplicated).lower()).inc()

    @staticmethod
    def track_compare_rejection(reason: str):
        compare_rejections_total.labels(reason=reason).inc()

    @staticmethod
    def track_contact_click():
        landlord_contact_clicks_total.inc()

    @staticmethod
    def track_storage_error(operation: str, error: str):
        storage_errors_total.labels(operation=operation, error=error).inc()

    @staticmethod
    def track_storage_operation(operation: str, duration: float):
        storage_operation_duration_seconds.labels(operation=operation).observe(duration)


# ============================================================================
# STRUCTURED LOGGING
# ============================================================================

class StructuredLogger:
    """Structured JSON logger for better observability"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self._setup_handlers()

    def _setup_handlers(self):
        """Setup JSON logging handlers"""
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
                '"logger": "%(name)s", "message": %(message)s}'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def log(self, level: str, message: str, **kwargs):
        """Log with structured data"""
        log_data = {
            'message': message,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            **kwargs
        }

        log_func = getattr(self.logger, level.lower())
        log_func(json.dumps(log_data, default=str))

    def info(self, message: str, **kwargs):
        self.log('INFO', message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.log('WARNING', message, **kwargs)

    def error(self, message: str, **kwargs):
        self.log('ERROR', message, **kwargs)

    def debug(self, message: str, **kwargs):
        self.log('DEBUG', message, **kwargs)


# ============================================================================
# METRICS ENDPOINT
# ============================================================================

async def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint
    Returns metrics in Prometheus exposition format
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )


# ============================================================================
# HEALTH CHECK
# ============================================================================

def health_check(storage) -> dict:
    """
    Storage-aware health check
    Returns system health status
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {}
    }

    storage_healthy = storage.is_available()
    health_status["checks"]["storage"] = {
        "status": "healthy" if storage_healthy else "unhealthy",
        "backend": storage.name
    }

    if not storage_healthy:
        health_status["status"] = "degraded"

    return health_status


request_logger = StructuredLogger("rentmzansi.requests")
SLOW_REQUEST_SECONDS = 1.0
