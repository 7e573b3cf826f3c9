from datetime import datetime, timezone
from sqlalchemy.exc import IntegrityError, OperationalError

from app.models.waitlist_entry import WaitlistEntry
from app.services.waitlist_repository import (
    InsertOutcome,
    WaitlistRepository,
    is_unique_violation,
)
from app.utils.client_ip import hash_ip

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def _insert(repo, email, **overrides):
    fields = dict(email=email, role="developer", custom_role=None, ip_hash=hash_ip("10.0.0.1"), created_at=NOW)
    fields.update(overrides)
    return repo.insert(**fields)


def test_insert_ok(db_session):
    repo = WaitlistRepository(db_session)
    result = _insert(repo, "a@x.com")
    assert result.outcome is InsertOutcome.OK
    assert result.entry.id is not None
    assert db_session.query(WaitlistEntry).filter(WaitlistEntry.email == "a@x.com").one().role == "developer"


def test_duplicate_email_is_a_result_not_an_exception(db_session):
    repo = WaitlistRepository(db_session)
    assert _insert(repo, "a@x.com").ok
    result = _insert(repo, "a@x.com", role="founder")
    assert result.outcome is InsertOutcome.DUPLICATE_KEY
    assert db_session.query(WaitlistEntry).count() == 1
    # session is usable again after the rollback
    assert _insert(repo, "b@x.com").ok


def test_other_constraint_failure(db_session):
    repo = WaitlistRepository(db_session)
    result = _insert(repo, "a@x.com", role=None)
    assert result.outcome is InsertOutcome.OTHER_FAILURE
    assert isinstance(result.error, IntegrityError)
    assert db_session.query(WaitlistEntry).count() == 0


def test_store_unavailable(db_session, monkeypatch):
    repo = WaitlistRepository(db_session)

    def broken_commit():
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "commit", broken_commit)
    result = _insert(repo, "a@x.com")
    assert result.outcome is InsertOutcome.OTHER_FAILURE
    assert isinstance(result.error, OperationalError)


class _PgError(Exception):
    def __init__(self, pgcode):
        super().__init__("error")
        self.pgcode = pgcode


def test_unique_violation_recognized_by_sqlstate():
    assert is_unique_violation(IntegrityError("INSERT", {}, _PgError("23505"))) is True
    assert is_unique_violation(IntegrityError("INSERT", {}, _PgError("23502"))) is False


def test_unique_violation_recognized_by_message():
    orig = Exception("UNIQUE constraint failed: waitlist_entries.email")
    assert is_unique_violation(IntegrityError("INSERT", {}, orig)) is True
    orig = Exception("NOT NULL constraint failed: waitlist_entries.role")
    assert is_unique_violation(IntegrityError("INSERT", {}, orig)) is False
