from sqlalchemy import Column, String, DateTime, Uuid, Index, UniqueConstraint
from sqlalchemy.sql import func
from datetime import datetime, timezone
import uuid
import enum

from app.core.database import Base

EMAIL_MAX_LENGTH = 255
CUSTOM_ROLE_MAX_LENGTH = 100
IP_HASH_LENGTH = 64  # sha256 hex digest


class RoleEnum(str, enum.Enum):
    STUDENT = "student"
    DEVELOPER = "developer"
    FOUNDER = "founder"
    DESIGNER = "designer"
    OTHER = "other"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WaitlistEntry(Base):
    """A single signup. Rows are only ever inserted, never updated or deleted."""
    __tablename__ = "waitlist_entries"

    id = Column(Uuid(), primary_key=True, default=uuid.uuid4)
    # Stored trimmed and lowercased; uniqueness is enforced by the database
    email = Column(String(EMAIL_MAX_LENGTH), nullable=False)
    role = Column(String(20), nullable=False)
    custom_role = Column(String(CUSTOM_ROLE_MAX_LENGTH), nullable=True)
    ip_hash = Column(String(IP_HASH_LENGTH), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('email', name='uq_waitlist_email'),
        Index('ix_waitlist_entries_ip_hash_created_at', 'ip_hash', 'created_at'),
    )

    def __repr__(self):
        return f"<WaitlistEntry {self.email} ({self.role})>"

