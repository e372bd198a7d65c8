"""Per-key minimum-interval limiters for verification code sends.

Both backends expose ``try_acquire(key) -> bool``: True records the action and
lets the caller proceed, False means the key was acquired within the last
``interval_seconds``.
"""

import logging
import time
from phone_auth.services.redis_client import connect_redis

logger = logging.getLogger(__name__)

SEND_CODE_INTERVAL_SECONDS = 60


class InMemoryRateLimiter:
    """Process-local limiter. State is lost on restart."""

    def __init__(self, interval_seconds=SEND_CODE_INTERVAL_SECONDS, clock=time.time):
        self.interval_seconds = interval_seconds
        self.clock = clock
        self._last_acquired = {}

    def try_acquire(self, key):
        now = self.clock()
        self._prune(now)
        last = self._last_acquired.get(key)
        if last is not None and now - last < self.interval_seconds:
            return False
        self._last_acquired[key] = now
        return True

    def reset(self, key=None):
        if key is None:
            self._last_acquired.clear()
        else:
            self._last_acquired.pop(key, None)

    def _prune(self, now):
        # Entries past the interval no longer block anything
        stale = [k for k, last in self._last_acquired.items() if now - last >= self.interval_seconds]
        for k in stale:
            del self._last_acquired[k]


class RedisRateLimiter:
    """Limiter backed by a Redis key with a TTL, shared by all workers."""

    def __init__(self, redis_client, interval_seconds=SEND_CODE_INTERVAL_SECONDS,
                 prefix='ratelimit:send-code:'):
        self.redis = redis_client
        self.interval_seconds = interval_seconds
        self.prefix = prefix

    def try_acquire(self, key):
        # SET NX only succeeds when no unexpired key exists
        acquired = self.redis.set(
            f"{self.prefix}{key}", int(time.time()), nx=True, ex=self.interval_seconds
        )
        return bool(acquired)

    def reset(self, key=None):
        if key is None:
            for existing in self.redis.scan_iter(f"{self.prefix}*"):
                self.redis.delete(existing)
        else:
            self.redis.delete(f"{self.prefix}{key}")


def build_rate_limiter(config):
    """Pick the Redis limiter when REDIS_URL is reachable, otherwise in-memory."""
    interval = config.get('SEND_CODE_INTERVAL_SECONDS', SEND_CODE_INTERVAL_SECONDS)
    client = connect_redis(config.get('REDIS_URL'))
    if client is not None:
        return RedisRateLimiter(client, interval_seconds=interval)
    return InMemoryRateLimiter(interval_seconds=interval)
