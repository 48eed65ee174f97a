"""
Redis connection for the fingerprint store.
"""

import logging
from functools import lru_cache

import redis
from redis.exceptions import RedisError, AuthenticationError

from neurogate.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_redis_client() -> redis.Redis:
    """
    Singleton Redis client built from Settings (REDIS_HOST, REDIS_PORT,
    REDIS_PASSWORD). The password is required.
    """
    settings = get_settings()
    if not settings.redis_password:
        logger.critical("REDIS_PASSWORD environment variable is not set.")
        raise ValueError("REDIS_PASSWORD is required to enable the fingerprint store.")

    try:
        # One small JSON record per user
        pool = redis.ConnectionPool(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password,
            decode_responses=True,
            max_connections=20,
            socket_timeout=5.0,
        )
        client = redis.Redis(connection_pool=pool)
        client.ping()
        logger.info(f"Fingerprint store connected to Redis at {settings.redis_host}:{settings.redis_port}")
        return client

    except AuthenticationError:
        logger.critical("Redis authentication failed. Check REDIS_PASSWORD.")
        raise
    except RedisError as e:
        logger.critical(f"Could not connect to Redis: {e}")
        raise
