from starlette.datastructures import Headers

from app.utils.client_ip import UNKNOWN_CLIENT_IP, hash_ip, resolve_client_ip


def test_forwarded_for_takes_leftmost_entry():
    headers = {"x-forwarded-for": " 203.0.113.9 , 198.51.100.2, 10.0.0.1"}
    assert resolve_client_ip(headers) == "203.0.113.9"


def test_forwarded_for_wins_over_other_headers():
    headers = {
        "x-real-ip": "10.0.0.3",
        "cf-connecting-ip": "10.0.0.2",
        "x-forwarded-for": "10.0.0.1",
    }
    assert resolve_client_ip(headers) == "10.0.0.1"


def test_cloudflare_before_real_ip():
    headers = {"x-real-ip": "10.0.0.3", "cf-connecting-ip": "10.0.0.2"}
    assert resolve_client_ip(headers) == "10.0.0.2"


def test_real_ip_last():
    assert resolve_client_ip({"x-real-ip": "10.0.0.3"}) == "10.0.0.3"


def test_unknown_when_nothing_usable():
    assert resolve_client_ip({}) == UNKNOWN_CLIENT_IP
    assert resolve_client_ip({"x-forwarded-for": ""}) == UNKNOWN_CLIENT_IP


def test_empty_forwarded_entry_falls_through():
    headers = {"x-forwarded-for": ", 198.51.100.2", "x-real-ip": "10.0.0.3"}
    assert resolve_client_ip(headers) == "10.0.0.3"


def test_header_names_are_case_insensitive():
    assert resolve_client_ip({"X-Forwarded-For": "203.0.113.9"}) == "203.0.113.9"
    assert resolve_client_ip(Headers({"CF-Connecting-IP": "10.0.0.2"})) == "10.0.0.2"


def test_hash_ip_is_stable_sha256_hex():
    digest = hash_ip("203.0.113.9")
    assert digest == hash_ip("203.0.113.9")
    assert len(digest) == 64
    int(digest, 16)
    assert "203.0.113.9" not in digest
    assert digest != hash_ip("203.0.113.10")
    assert hash_ip("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
