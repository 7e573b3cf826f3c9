import json
import logging
import pytest

from app.utils.audit import audit, email_digest
from app.utils.client_ip import hash_ip


@pytest.fixture
def audit_lines(caplog):
    audit_logger = logging.getLogger("audit")
    audit_logger.addHandler(caplog.handler)
    caplog.set_level(logging.INFO, logger="audit")
    try:
        yield lambda: [json.loads(r.getMessage()) for r in caplog.records if r.name == "audit"]
    finally:
        audit_logger.removeHandler(caplog.handler)


def test_audit_line_never_contains_raw_identifiers(audit_lines):
    ip_hash = hash_ip("203.0.113.9")
    audit("WAITLIST_JOIN", email=" Foo@Bar.com", ip_hash=ip_hash, result="joined")

    [line] = audit_lines()
    assert line["event"] == "WAITLIST_JOIN"
    assert line["result"] == "joined"
    assert line["email_hash"] == email_digest("foo@bar.com")
    assert len(line["email_hash"]) == 12
    assert line["ip_hash"] == ip_hash[:12]
    raw = json.dumps(line).lower()
    assert "foo@bar.com" not in raw
    assert "203.0.113.9" not in raw


def test_audit_without_identifiers(audit_lines):
    audit("WAITLIST_JOIN", result="invalid", field="email")
    [line] = audit_lines()
    assert "email_hash" not in line
    assert "ip_hash" not in line
    assert line["field"] == "email"
