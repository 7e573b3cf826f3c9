import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import DatabaseError, RateLimitExceeded, ValidationError
from app.models.waitlist_entry import utcnow
from app.schemas.waitlist import WaitlistResult, parse_submission
from app.services.waitlist_repository import InsertOutcome, WaitlistRepository
from app.utils import rate_limiter
from app.utils.audit import audit
from app.utils.client_ip import hash_ip, resolve_client_ip

logger = logging.getLogger(__name__)

JOINED_MESSAGE = "You're on the list! We'll be in touch soon."
DUPLICATE_MESSAGE = "You're already on the list!"
DUPLICATE_ERROR = "This email is already registered. We'll keep you updated!"
VALIDATION_MESSAGE = "Validation error"
RATE_LIMITED_MESSAGE = "Too many requests"
UNEXPECTED_MESSAGE = "Something went wrong"
UNEXPECTED_ERROR = "An unexpected error occurred. Please try again later."


class WaitlistService:
    """Admits a single anonymous waitlist signup.

    Steps run in order and stop at the first failure: validate, resolve and
    hash the client IP, check the per-IP quota, insert. Every outcome is
    returned as a :class:`WaitlistResult`; nothing internal leaks to the caller.
    """

    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.repo = WaitlistRepository(db)
        self._clock = clock or utcnow

    def join(self, payload: Any, headers: Mapping[str, str]) -> WaitlistResult:
        try:
            return self._join(payload, headers)
        except ValidationError as e:
            audit("WAITLIST_JOIN", result="invalid", field=e.field)
            return WaitlistResult(success=False, message=VALIDATION_MESSAGE, error=e.message)
        except RateLimitExceeded as e:
            return WaitlistResult(success=False, message=RATE_LIMITED_MESSAGE, error=e.message)
        except Exception as e:
            logger.exception(f"Waitlist submission error: {str(e)}")
            audit("WAITLIST_JOIN", result="error", error_type=type(e).__name__)
            return WaitlistResult(success=False, message=UNEXPECTED_MESSAGE, error=UNEXPECTED_ERROR)

    def _join(self, payload: Any, headers: Mapping[str, str]) -> WaitlistResult:
        submission = parse_submission(payload)

        ip_hash = hash_ip(resolve_client_ip(headers))
        now = self._clock()

        try:
            rate_limiter.enforce_for_ip_hash(self.repo, ip_hash, now)
        except RateLimitExceeded:
            audit("WAITLIST_JOIN", email=submission.email, result="rate_limited", ip_hash=ip_hash)
            raise

        result = self.repo.insert(
            email=submission.email,
            role=submission.role.value,
            custom_role=submission.custom_role,
            ip_hash=ip_hash,
            created_at=now,
        )
        if result.outcome is InsertOutcome.DUPLICATE_KEY:
            audit("WAITLIST_JOIN", email=submission.email, result="duplicate", ip_hash=ip_hash)
            return WaitlistResult(success=False, message=DUPLICATE_MESSAGE, error=DUPLICATE_ERROR)
        if not result.ok:
            raise DatabaseError("Failed to store waitlist entry", details=str(result.error)) from result.error

        audit("WAITLIST_JOIN", email=submission.email, result="joined", ip_hash=ip_hash, entry_id=str(result.entry.id), role=submission.role.value)
        return WaitlistResult(success=True, message=JOINED_MESSAGE)
