"""Redis connection helper for state shared across workers."""

import redis
import logging

logger = logging.getLogger(__name__)


def connect_redis(redis_url):
    """Open a Redis connection, or return None if unset or unreachable."""
    if not redis_url:
        logger.warning("REDIS_URL not set - send rate limits are kept in process memory")
        return None

    try:
        client = redis.from_url(redis_url, decode_responses=True)
        # Test connection
        client.ping()
        logger.info("Redis connected successfully")
        return client
    except redis.RedisError as e:
        logger.error(f"Redis connection failed: {e}")
        return None
