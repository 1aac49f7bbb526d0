"""Per-caller sliding-window limits for endpoints that call out to Nominatim
or write clinic records."""
import time
from collections import defaultdict, deque
from typing import Deque, Dict

from fastapi import HTTPException, Request, status

from vetconnect.core.config import settings
from vetconnect.utils.helpers import get_client_ip

_buckets: Dict[str, Deque[float]] = defaultdict(deque)


def _caller_key(request: Request) -> str:
    route = request.scope.get("route")
    path = getattr(route, "path", None) or request.url.path
    return f"{get_client_ip(request)}:{request.method}:{path}"


def _retry_after(bucket: Deque[float], now: float, window: int) -> int:
    return max(1, int(bucket[0] + window - now) + 1)


async def rate_limit(request: Request):
    if not settings.RATE_LIMIT_ENABLED:
        return True

    now = time.monotonic()
    window = settings.RATE_LIMIT_PERIOD_SECONDS
    bucket = _buckets[_caller_key(request)]

    while bucket and bucket[0] <= now - window:
        bucket.popleft()

    if len(bucket) >= settings.RATE_LIMIT_REQUESTS:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please slow down.",
            headers={"Retry-After": str(_retry_after(bucket, now, window))},
        )

    bucket.append(now)
    return True
