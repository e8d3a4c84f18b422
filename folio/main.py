"""Main FastAPI application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from folio.config import settings
from folio.database import engine
from folio.rate_limiter import limiter
from folio.schemas.common import ErrorResponse
from folio.services.auth import (
    AuthenticationError,
    IdentityConfigurationError,
    build_identity_strategy,
)
from folio.services.market_data import (
    QuoteProviderError,
    QuoteProviderNotConfiguredError,
    QuoteRateLimitError,
)
from folio.services.repositories import (
    ConstraintViolationError,
    DuplicateError,
    NotFoundError,
)
from folio.services.schema_lifecycle import SchemaInitializationError, SchemaLifecycle
from folio.services.session_scope import StorageUnavailableError

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Folio API",
    description="Multi-tenant personal investment tracking",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add rate limiter to app state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Identity strategy and schema lifecycle are chosen once per process
app.state.identity_strategy = build_identity_strategy(settings)
app.state.schema_lifecycle = SchemaLifecycle(
    engine, production=settings.is_production, seed_dev_users=settings.seed_dev_users
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(request: Request, status_code: int, error: str, message: str, headers=None):
    body = ErrorResponse(error=error, message=message, path=request.url.path)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(mode="json"), headers=headers
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(request, status.HTTP_404_NOT_FOUND, "NotFound", str(exc))


@app.exception_handler(DuplicateError)
async def duplicate_handler(request: Request, exc: DuplicateError):
    return _error(request, status.HTTP_409_CONFLICT, "Duplicate", str(exc))


@app.exception_handler(ConstraintViolationError)
async def constraint_violation_handler(request: Request, exc: ConstraintViolationError):
    return _error(request, status.HTTP_400_BAD_REQUEST, "ConstraintViolation", str(exc))


@app.exception_handler(AuthenticationError)
async def authentication_handler(request: Request, exc: AuthenticationError):
    return _error(
        request,
        status.HTTP_401_UNAUTHORIZED,
        "Unauthorized",
        str(exc),
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(IdentityConfigurationError)
async def identity_configuration_handler(request: Request, exc: IdentityConfigurationError):
    logger.error(f"Identity source misconfigured: {exc}")
    return _error(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "IdentityNotConfigured",
        "Authentication is not configured",
    )


@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
    logger.error(f"Storage unavailable: {exc}")
    return _error(
        request, status.HTTP_503_SERVICE_UNAVAILABLE, "StorageUnavailable", "Database unavailable"
    )


@app.exception_handler(SchemaInitializationError)
async def schema_initialization_handler(request: Request, exc: SchemaInitializationError):
    logger.error(f"Schema initialization failed: {exc}")
    return _error(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "SchemaInitializationFailed",
        "Database schema is not ready",
    )


@app.exception_handler(QuoteProviderError)
async def quote_provider_handler(request: Request, exc: QuoteProviderError):
    if isinstance(exc, QuoteRateLimitError):
        return _error(
            request,
            status.HTTP_429_TOO_MANY_REQUESTS,
            "QuoteRateLimited",
            "Stock quote rate limit reached, try again later",
        )
    if isinstance(exc, QuoteProviderNotConfiguredError):
        return _error(request, status.HTTP_503_SERVICE_UNAVAILABLE, "QuoteNotConfigured", str(exc))
    return _error(request, status.HTTP_502_BAD_GATEWAY, "QuoteProviderError", str(exc))


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Folio API", "version": "0.1.0", "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include routers
from folio.routers import (  # noqa: E402
    distributions,
    investments,
    labels,
    market_data,
    portfolios,
    snapshots,
    users,
)

app.include_router(users.router)
app.include_router(portfolios.router)
app.include_router(investments.router)
app.include_router(distributions.router)
app.include_router(labels.categories_router)
app.include_router(labels.tags_router)
app.include_router(labels.investment_types_router)
app.include_router(snapshots.router)
app.include_router(market_data.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
