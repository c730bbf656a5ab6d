"""Redis-backed cache for role listings.

Listings are cached as JSON under keys that carry a generation number.
``invalidate()`` bumps the generation, so a listing computed before a
mutation and written after it lands under a key nobody reads any more.
If Redis is unavailable the cache behaves as a pass-through and tries to
reconnect on the next call.
"""

import json
import logging
from typing import Any, List, Optional

import redis

from backoffice.core.config import get_settings

logger = logging.getLogger(__name__)

LISTING_KEY = "roles:list"
COUNTS_KEY = "roles:list:counts"
GENERATION_KEY = "roles:list:generation"


def versioned_key(key: str, generation: int) -> str:
    return f"{key}:v{generation}"


class RoleListingCache:
    """Cache-aside store for role listings."""

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        redis_url: Optional[str] = None,
        ttl: Optional[int] = None,
        enabled: Optional[bool] = None,
    ):
        settings = get_settings()
        self.redis_url = redis_url or settings.redis_url
        self.ttl = ttl if ttl is not None else settings.role_cache_ttl
        self.enabled = settings.role_cache_enabled if enabled is None else enabled
        self._redis = client

    def get_redis(self) -> Optional[redis.Redis]:
        """Get or create the Redis connection."""
        if not self.enabled:
            return None
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    self.redis_url,
                    decode_responses=True,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                self._redis.ping()
            except redis.RedisError as e:
                logger.warning("Redis unavailable for role cache: %s", e)
                self._redis = None
        return self._redis

    def generation(self) -> Optional[int]:
        """
        Current listing generation, or None when Redis cannot be read.

        Read it before querying the store and pass it to ``get``/``set``.
        """
        r = self.get_redis()
        if r is None:
            return None
        try:
            return int(r.get(GENERATION_KEY) or 0)
        except redis.RedisError as e:
            logger.warning("Role cache generation read failed: %s", e)
            return None

    def get(self, key: str = LISTING_KEY, generation: Optional[int] = None) -> Optional[List[dict]]:
        if generation is None:
            return None
        r = self.get_redis()
        if r is None:
            return None
        try:
            raw = r.get(versioned_key(key, generation))
        except redis.RedisError as e:
            logger.warning("Role cache read failed: %s", e)
            return None
        return json.loads(raw) if raw else None

    def set(self, value: Any, key: str = LISTING_KEY, generation: Optional[int] = None) -> None:
        if generation is None:
            return
        r = self.get_redis()
        if r is None:
            return
        try:
            r.set(versioned_key(key, generation), json.dumps(value), ex=self.ttl)
        except redis.RedisError as e:
            logger.warning("Role cache write failed: %s", e)

    def invalidate(self) -> None:
        """Retire every cached listing by moving to the next generation."""
        r = self.get_redis()
        if r is None:
            return
        try:
            r.incr(GENERATION_KEY)
        except redis.RedisError as e:
            logger.warning("Role cache invalidation failed: %s", e)


class NullRoleCache(RoleListingCache):
    """Cache that never stores anything."""

    def __init__(self):
        super().__init__(enabled=False)
