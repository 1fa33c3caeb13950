# pageimages/services/redis_cache.py
# Responsibility: Thin JSON get/set layer over Redis used as the shared durable cache.

import json
from typing import Any, Optional

import redis

from pageimages.config.settings import settings


class RedisCacheManager:
    """
    Stores JSON-serializable values in Redis with a TTL.
    Redis failures are logged and reported as a miss / failed write, never raised.
    """

    def __init__(self, client: Optional[redis.Redis] = None):
        """
        decode_responses=True ensures we get strings back, not bytes.
        """
        self.client = client or redis.from_url(settings.REDIS.URL, decode_responses=True)

    def get(self, key: str) -> Optional[Any]:
        """
        Args:
            key (str): Cache key.

        Returns:
            Optional[Any]: The decoded value, or None on a cache miss.
        """
        try:
            cached_data = self.client.get(key)
            if cached_data is not None:
                return json.loads(cached_data)
        except (redis.RedisError, json.JSONDecodeError) as e:
            print(f"[Redis] Cache fetch error: {e}")
        return None

    def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """
        Args:
            key (str): Cache key.
            value (Any): JSON-serializable value.
            ttl_seconds (int): Expiry.

        Returns:
            bool: True if the value was written.
        """
        try:
            self.client.setex(key, ttl_seconds, json.dumps(value))
            return True
        except (redis.RedisError, TypeError) as e:
            print(f"[Redis] Cache write error: {e}")
            return False

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.RedisError as e:
            print(f"[Redis] Cache delete error: {e}")
