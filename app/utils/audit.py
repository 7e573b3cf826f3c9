import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

_logger = logging.getLogger("audit")

# Enough to correlate events across log lines, too short to look anything up
DIGEST_PREFIX_LENGTH = 12


def _short(digest: str) -> str:
    return digest[:DIGEST_PREFIX_LENGTH]


def email_digest(email: str) -> str:
    return _short(hashlib.sha256(email.strip().lower().encode("utf-8")).hexdigest())


def audit(event: str, *, email: Optional[str] = None, ip_hash: Optional[str] = None, **fields: Any) -> None:
    """Write one JSON line to the ``audit`` logger.

    Neither the email nor the client address is written as given: the email is
    hashed and both digests are shortened before they reach the log.
    """
    record = {"ts": datetime.now(timezone.utc).isoformat(), "event": event}
    if email:
        record["email_hash"] = email_digest(email)
    if ip_hash:
        record["ip_hash"] = _short(ip_hash)
    record.update(fields)
    _logger.info(json.dumps(record, ensure_ascii=False, sort_keys=True, default=str))
