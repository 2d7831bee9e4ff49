"""FastAPI application entry point."""

import logging
import logging.config
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from portfolio.api.routes import (
    allocation,
    exchange_rates,
    fi_milestones,
    health,
    holdings,
    intelligence,
    portfolio,
    prices,
    tax,
    users,
    yearly_data,
)
from portfolio.core.cache import configure_price_feed_cache
from portfolio.core.config import settings
from portfolio.core.exceptions import AppException, app_exception_handler
from portfolio.core.middleware import RequestLoggingMiddleware
from portfolio.core.rate_limit import limiter, rate_limit_exceeded_handler
from portfolio.db.base import Base
from portfolio.db.session import engine

logging.config.dictConfig(settings.LOGGING_CONFIG)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})")

    if settings.ENVIRONMENT == "development":
        # Production schemas are managed by Alembic
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    configure_price_feed_cache()

    yield

    logger.info("Shutting down")
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Rate limit counters live in the limiter's storage, owned by the app
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_CREDENTIALS,
    allow_methods=settings.CORS_METHODS,
    allow_headers=settings.CORS_HEADERS,
)
# Added last so it wraps everything else
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

app.include_router(health.router, tags=["health"])
app.include_router(users.router, prefix="/api/v1/users", tags=["users"])
app.include_router(holdings.router, prefix="/api/v1/holdings", tags=["holdings"])
app.include_router(portfolio.router, prefix="/api/v1/portfolio", tags=["portfolio"])
app.include_router(allocation.router, prefix="/api/v1/allocation", tags=["allocation"])
app.include_router(
    exchange_rates.router, prefix="/api/v1/exchange-rates", tags=["exchange-rates"]
)
app.include_router(prices.router, prefix="/api/v1/prices", tags=["prices"])
app.include_router(tax.router, prefix="/api/v1/tax", tags=["tax"])
app.include_router(intelligence.router, prefix="/api/v1/intelligence", tags=["intelligence"])
app.include_router(yearly_data.router, prefix="/api/v1/yearly-data", tags=["yearly-data"])
app.include_router(
    fi_milestones.router, prefix="/api/v1/fi-milestones", tags=["fi-milestones"]
)
