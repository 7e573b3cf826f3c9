import hashlib
from typing import Mapping, Optional

UNKNOWN_CLIENT_IP = "unknown"

# Checked in order; the first header with a usable value wins
CLIENT_IP_HEADERS = ("x-forwarded-for", "cf-connecting-ip", "x-real-ip")


def _lookup(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None:
        # Plain dicts are case-sensitive, Starlette's Headers are not
        for key, candidate in headers.items():
            if key.lower() == name:
                return candidate
    return value


def resolve_client_ip(headers: Mapping[str, str]) -> str:
    """Best-effort originating address from proxy headers. Never raises."""
    for name in CLIENT_IP_HEADERS:
        value = _lookup(headers, name)
        if not value:
            continue
        if name == "x-forwarded-for":
            # client, proxy1, proxy2 ... the leftmost entry is the original client
            value = value.split(",")[0]
        value = value.strip()
        if value:
            return value
    return UNKNOWN_CLIENT_IP


def hash_ip(ip: str) -> str:
    """One-way sha256 hex digest so raw addresses are never stored."""
    return hashlib.sha256(ip.encode("utf-8")).hexdigest()
