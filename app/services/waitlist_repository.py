import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.waitlist_entry import WaitlistEntry

logger = logging.getLogger(__name__)

# SQLSTATE for unique_violation (Postgres and most ANSI databases)
UNIQUE_VIOLATION_SQLSTATE = "23505"


class InsertOutcome(enum.Enum):
    OK = "ok"
    DUPLICATE_KEY = "duplicate_key"
    OTHER_FAILURE = "other_failure"


@dataclass
class InsertResult:
    outcome: InsertOutcome
    entry: Optional[WaitlistEntry] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.outcome is InsertOutcome.OK


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return code == UNIQUE_VIOLATION_SQLSTATE
    text = str(orig if orig is not None else exc).lower()
    return "unique constraint" in text or "duplicate key" in text


class WaitlistRepository:
    """Thin store adapter: a windowed count and an insert that reports duplicates as a result."""

    def __init__(self, db: Session):
        self.db = db

    def count_since(self, ip_hash: str, cutoff: datetime) -> int:
        """Entries stored for ``ip_hash`` with ``created_at >= cutoff``."""
        return (
            self.db.query(func.count(WaitlistEntry.id))
            .filter(WaitlistEntry.ip_hash == ip_hash, WaitlistEntry.created_at >= cutoff)
            .scalar()
            or 0
        )

    def insert(
        self,
        *,
        email: str,
        role: str,
        custom_role: Optional[str],
        ip_hash: str,
        created_at: datetime,
    ) -> InsertResult:
        entry = WaitlistEntry(
            email=email,
            role=role,
            custom_role=custom_role,
            ip_hash=ip_hash,
            created_at=created_at,
        )
        self.db.add(entry)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                return InsertResult(outcome=InsertOutcome.DUPLICATE_KEY)
            logger.error(f"Waitlist insert violated a constraint: {str(e)}")
            return InsertResult(outcome=InsertOutcome.OTHER_FAILURE, error=e)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Waitlist insert failed: {str(e)}")
            return InsertResult(outcome=InsertOutcome.OTHER_FAILURE, error=e)
        self.db.refresh(entry)
        return InsertResult(outcome=InsertOutcome.OK, entry=entry)
