"""
Redis client factory with lazy initialization.

Backs the per-actor rate limiter. For tests, set REDIS_URL=fakeredis:// to
use an in-memory fake.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import redis


@lru_cache(maxsize=4)
def get_redis_client(url: Optional[str]) -> Optional[redis.Redis]:
    if not url:
        return None
    if url.startswith("fakeredis://"):
        # Lazy import to avoid test-only dependency at runtime
        import fakeredis  # type: ignore

        return fakeredis.FakeRedis()
    return redis.from_url(url, decode_responses=True)
