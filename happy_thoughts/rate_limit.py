"""Rate limiting for the /login and /signup endpoints.

Uses a sliding window per client key. State lives in Redis when a Redis URL is
configured and reachable; otherwise it is kept in process memory, which means
each worker process counts separately.

Threading note: threading.Lock rather than asyncio.Lock because the critical
section is a few dict operations and never spans an await.
"""

import time
from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock

import redis

from happy_thoughts.config import Settings
from happy_thoughts.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RateLimitConfig:
    """Rate limit configuration."""

    max_requests: int = 5  # Maximum requests in window
    window_seconds: int = 60  # Time window in seconds
    block_seconds: int = 300  # Block duration after exceeding limit
    namespace: str = "rl"


@dataclass
class RateLimitState:
    """State for a single IP/key (in-memory fallback)."""

    requests: list[float] = field(default_factory=list)
    blocked_until: float = 0.0


class RateLimiter:
    """Sliding-window rate limiter with Redis support and in-memory fallback."""

    def __init__(self, config: RateLimitConfig | None = None, redis_url: str | None = None) -> None:
        self.config = config or RateLimitConfig()
        self._local_state: dict[str, RateLimitState] = defaultdict(RateLimitState)
        self._lock = Lock()
        self._redis: redis.Redis | None = None

        if redis_url:
            try:
                self._redis = redis.from_url(redis_url, decode_responses=True)
                self._redis.ping()
            except redis.RedisError as exc:
                logger.warning("Redis unavailable for rate limiting, using local memory", error=str(exc))
                self._redis = None

    def is_allowed(self, key: str) -> tuple[bool, int]:
        """Check if request is allowed for the given key.

        Returns (allowed, retry_after_seconds).
        """
        if self._redis:
            return self._is_allowed_redis(key)
        return self._is_allowed_local(key)

    def _is_allowed_redis(self, key: str) -> tuple[bool, int]:
        """Redis-based rate limiting using a sorted set for sliding window."""
        now = time.time()
        rl_key = f"{self.config.namespace}:{key}"
        block_key = f"{self.config.namespace}_block:{key}"

        try:
            blocked_until = self._redis.get(block_key)
            if blocked_until:
                remaining = int(float(blocked_until) - now)
                if remaining > 0:
                    return False, remaining

            pipe = self._redis.pipeline()
            pipe.zremrangebyscore(rl_key, 0, now - self.config.window_seconds)
            pipe.zcard(rl_key)
            pipe.zadd(rl_key, {str(now): now})
            pipe.expire(rl_key, self.config.window_seconds * 2)
            results = pipe.execute()

            request_count = results[1]

            if request_count >= self.config.max_requests:
                block_val = str(now + self.config.block_seconds)
                self._redis.setex(block_key, self.config.block_seconds, block_val)
                return False, self.config.block_seconds

            return True, 0
        except redis.RedisError as exc:
            logger.warning("Redis error during rate limiting, falling back to local", error=str(exc))
            return self._is_allowed_local(key)

    def _is_allowed_local(self, key: str) -> tuple[bool, int]:
        """Local memory fallback for rate limiting."""
        now = time.time()
        with self._lock:
            state = self._local_state[key]
            if state.blocked_until > now:
                return False, max(1, int(state.blocked_until - now))

            window_start = now - self.config.window_seconds
            state.requests = [ts for ts in state.requests if ts >= window_start]

            if len(state.requests) >= self.config.max_requests:
                state.blocked_until = now + self.config.block_seconds
                return False, self.config.block_seconds

            state.requests.append(now)
            return True, 0

    def reset(self, key: str) -> None:
        """Reset rate limit state for a key."""
        if self._redis:
            try:
                self._redis.delete(f"{self.config.namespace}:{key}", f"{self.config.namespace}_block:{key}")
            except redis.RedisError as exc:
                logger.warning("Redis error during reset, ignoring", error=str(exc))

        with self._lock:
            self._local_state.pop(key, None)

    def close(self) -> None:
        """Close Redis connection."""
        if self._redis:
            self._redis.close()


class DisabledRateLimiter(RateLimiter):
    """Limiter that admits every request; used when rate limiting is switched off."""

    def __init__(self) -> None:
        super().__init__(RateLimitConfig(namespace="disabled"))

    def is_allowed(self, key: str) -> tuple[bool, int]:
        return True, 0


def build_rate_limiters(settings: Settings) -> tuple[RateLimiter, RateLimiter]:
    """Create the (login, signup) limiters described by ``settings``."""
    if not settings.rate_limit_enabled:
        return DisabledRateLimiter(), DisabledRateLimiter()

    login_limiter = RateLimiter(
        RateLimitConfig(
            max_requests=settings.login_rate_limit,
            window_seconds=settings.login_rate_window_seconds,
            block_seconds=settings.login_block_seconds,
            namespace="rl_login",
        ),
        redis_url=settings.redis_url,
    )
    signup_limiter = RateLimiter(
        RateLimitConfig(
            max_requests=settings.signup_rate_limit,
            window_seconds=settings.signup_rate_window_seconds,
            block_seconds=settings.signup_block_seconds,
            namespace="rl_signup",
        ),
        redis_url=settings.redis_url,
    )
    return login_limiter, signup_limiter
