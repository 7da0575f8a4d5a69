from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from app.core.config import settings, app_logger
from app.core.exceptions.handlers import (
    exception_schema,
    general_exception_handler,
    not_found_exception_handler,
    rate_limit_exception_handler,
    request_validation_exception_handler,
    storage_exception_handler,
    submission_failed_exception_handler,
    submission_validation_exception_handler,
)
from app.core.exceptions.types import (
    AppException,
    NotFoundException,
    RateLimitExceededException,
    StorageException,
    SubmissionFailedException,
    SubmissionValidationException,
)
from app.core.services import RateLimiter, RedisService
from app.apps.website.routers import contact_router, quotes_router
from app.apps.website.services import SubmissionNotifier, SubmissionService
from app.apps.website.storage import create_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_logger.info("Starting application...")

    # Initialize submission storage
    app_logger.info(f"Initializing {settings.STORAGE_BACKEND} submission store...")
    store = create_store()
    await store.init()
    app_logger.info("Submission store initialized successfully.")

    # Initialize Redis service (only when counters are shared)
    if settings.RATE_LIMIT_BACKEND == "redis":
        app_logger.info("Initializing Redis service...")
        await RedisService.init(settings.REDIS_URL)
        app_logger.info("Redis service initialized successfully.")

    rate_limiter = RateLimiter(backend=settings.RATE_LIMIT_BACKEND)
    notifier = SubmissionNotifier()
    app.state.submission_service = SubmissionService(
        store=store,
        rate_limiter=rate_limiter,
        notifier=notifier,
    )

    # Yield control back to the application
    yield

    # Cleanup on shutdown
    app_logger.info("Shutting down application...")

    app_logger.info("Waiting for pending notifications...")
    await notifier.drain()

    app_logger.info("Closing submission store...")
    await store.close()
    app_logger.info("Submission store closed successfully.")

    if settings.RATE_LIMIT_BACKEND == "redis":
        app_logger.info("Closing Redis service...")
        await RedisService.aclose()
        app_logger.info("Redis service closed successfully.")


app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=settings.APP_DESCRIPTION,
    debug=settings.DEBUG,
    openapi_url="/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    responses=exception_schema,
    root_path_in_servers=False,
    servers=[
        {
            "url": f"{settings.API_DOMAIN}",
        },
    ],
)

# Register exception handlers (order matters - more specific first)
app.add_exception_handler(
    SubmissionValidationException, submission_validation_exception_handler
)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(RateLimitExceededException, rate_limit_exception_handler)
app.add_exception_handler(NotFoundException, not_found_exception_handler)
app.add_exception_handler(SubmissionFailedException, submission_failed_exception_handler)
app.add_exception_handler(StorageException, storage_exception_handler)
# Generic fallback
app.add_exception_handler(AppException, general_exception_handler)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(quotes_router, prefix="/api", tags=["Quotes"])
app.include_router(contact_router, prefix="/api", tags=["Contact"])


@app.get("/", include_in_schema=False)
async def root(request: Request):
    base_url = str(request.base_url).rstrip("/")
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "documentations": {
            "swagger": f"{base_url}/docs",
            "redoc": f"{base_url}/redoc",
        },
        "version": settings.APP_VERSION,
    }


@app.head("/health", include_in_schema=False)
@app.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint to verify if the API is running.

    Checks:
        - Submission storage reachability (with pool gauges for SQL)
        - Rate limit backend connectivity
    """
    service: SubmissionService = request.app.state.submission_service
    health_status: dict = {
        "status": "ok",
        "message": f"{settings.APP_NAME} is running.",
        "checks": {
            "storage": {"status": "healthy"},
            "rate_limit": "ok",
        },
    }

    # Check storage
    try:
        storage = await service.store.health()
        health_status["checks"]["storage"] = storage
        if storage.get("status") != "healthy":
            health_status["status"] = "degraded"
    except Exception as e:
        app_logger.error(f"Storage health check failed: {e}")
        health_status["checks"]["storage"] = {"status": "unhealthy"}
        health_status["status"] = "degraded"

    # Check rate limit backend
    try:
        if not await service.rate_limiter.ping():
            health_status["checks"]["rate_limit"] = "unhealthy"
            health_status["status"] = "degraded"
    except Exception as e:
        app_logger.error(f"Rate limit health check failed: {e}")
        health_status["checks"]["rate_limit"] = "unhealthy"
        health_status["status"] = "degraded"

    if health_status["status"] != "ok":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health_status
        )

    return health_status
