from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from rentmzansi.core.config import settings
from rentmzansi.core.exceptions import (
    BaseAPIException,
    base_api_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler
)
from rentmzansi.core.monitoring import PrometheusMonitoringMiddleware, health_check, metrics_endpoint
from rentmzansi.core.rate_limiting import limiter, rate_limit_exceeded_handler
from rentmzansi.core.storage import LocalStore, create_storage_backend
from rentmzansi.api.v1.api import api_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    """
    backend = create_storage_backend(settings)
    app.state.storage = LocalStore(
        backend,
        settings.STORAGE_KEYS,
        prefix=settings.STORAGE_KEY_PREFIX
    )
    logger.info("Storage initialized (%s backend)", backend.name)

    yield

    backend.close()
    logger.info("Storage closed")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
    version="0.2.0",
    description="""
    # RentMzansi Engagement API

    Saved searches, notifications and engagement tracking for the
    RentMzansi room-rental marketplace.

    ## Features

    * **Saved Searches**: Store search criteria and get notified of new matches
    * **Notifications**: New listings, price drops on favorites, subscribed areas
    * **Engagement**: View counts, compare list, reviews and reports
    * **Landlords**: Response-time badges and quick-reply templates

    Each client profile is selected with the `X-Client-Id` header.
    """
)

app.state.limiter = limiter

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(PrometheusMonitoringMiddleware)

# Exception handlers
app.add_exception_handler(BaseAPIException, base_api_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)
app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Welcome to the RentMzansi Engagement API",
        "version": "0.2.0",
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health():
    """Health check endpoint"""
    status = health_check(app.state.storage.backend)
    status["environment"] = settings.ENVIRONMENT
    return status
