from datetime import datetime, timedelta, timezone
from typing import Optional

from app.core.config import settings
from app.core.exceptions import RateLimitExceeded
from app.services.waitlist_repository import WaitlistRepository

RATE_LIMIT_MESSAGE = "You have submitted too many requests. Please try again later."


def window_start(window_seconds: int, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now - timedelta(seconds=window_seconds)


def recent_count(repo: WaitlistRepository, ip_hash: str, window_seconds: int, now: Optional[datetime] = None) -> int:
    return repo.count_since(ip_hash, window_start(window_seconds, now))


def allow(repo: WaitlistRepository, ip_hash: str, limit: int, window_seconds: int, now: Optional[datetime] = None) -> bool:
    """Return True if another signup from ip_hash is allowed, else False.

    Counts stored entries created at or after ``now - window_seconds``, so the
    window slides with every call and is shared by all processes using the
    same database. Rejected attempts are never stored and cost nothing.
    """
    return recent_count(repo, ip_hash, window_seconds, now) < limit


def enforce_for_ip_hash(repo: WaitlistRepository, ip_hash: str, now: Optional[datetime] = None) -> None:
    limit = settings.RATE_LIMIT_MAX_SUBMISSIONS
    window_seconds = settings.RATE_LIMIT_WINDOW_MINUTES * 60
    if not allow(repo, ip_hash, limit, window_seconds, now):
        raise RateLimitExceeded(RATE_LIMIT_MESSAGE, limit=limit, window_seconds=window_seconds)
