"""HTTP cache for the Yahoo Finance price feed (requests-cache on Redis).

yfinance goes through ``requests``; installing a global requests-cache
session means repeated quote and FX lookups inside the cache window never
leave the process. Without Redis the feed simply runs uncached.
"""

import logging
from datetime import timedelta
from typing import Any

import requests_cache
from redis import Redis
from redis.exceptions import RedisError
from requests_cache.backends.redis import RedisCache

from portfolio.core.config import settings

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "price_feed"


def get_redis_connection() -> "Redis[Any] | None":
    """Return a connected Redis client, or None when Redis is unreachable."""
    try:
        redis_client: Redis[Any] = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=False,  # requests-cache stores binary payloads
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        redis_client.ping()
        return redis_client
    except RedisError as e:
        logger.warning(f"Redis unavailable at {settings.REDIS_URL}: {e}. Price cache disabled.")
        return None


def configure_price_feed_cache() -> bool:
    """
    Install the requests-cache session used by yfinance.

    Quotes (chart endpoint, covers FX pairs too) expire after
    ``PRICE_CACHE_TTL_SECONDS``; metadata lookups are kept longer.

    Returns:
        True when the cache was installed
    """
    if not settings.PRICE_CACHE_ENABLED:
        logger.info("Price feed cache disabled by configuration")
        return False

    redis_conn = get_redis_connection()
    if redis_conn is None:
        return False

    quote_ttl = timedelta(seconds=settings.PRICE_CACHE_TTL_SECONDS)
    requests_cache.install_cache(
        backend=RedisCache(namespace=CACHE_NAMESPACE, connection=redis_conn),
        urls_expire_after={
            "*/v8/finance/chart/*": quote_ttl,
            "*/v7/finance/quote/*": quote_ttl,
            "*/v10/finance/quoteSummary/*": timedelta(hours=6),
        },
        expire_after=quote_ttl,
        allowable_methods=("GET",),
        stale_if_error=True,
    )
    logger.info(f"Price feed cache installed (quotes expire after {quote_ttl})")
    return True


def clear_price_feed_cache() -> None:
    """Drop every cached feed response, e.g. before a forced refresh."""
    cache = requests_cache.get_cache()
    if cache is None:
        return
    cache.clear()
    logger.info("Cleared price feed cache")


def get_cache_stats() -> dict[str, Any]:
    """Describe the installed cache for the health endpoint."""
    cache = requests_cache.get_cache()
    if cache is None:
        return {"enabled": False}

    stats: dict[str, Any] = {"enabled": True, "backend": type(cache).__name__}
    try:
        stats["size"] = len(cache.responses)
    except RedisError as e:
        logger.warning(f"Could not read price feed cache size: {e}")
        stats["size"] = "unavailable"
    return stats
