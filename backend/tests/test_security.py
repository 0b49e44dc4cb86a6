"""
Tests for password hashing, session tokens and the cookie Secure flag.
"""

import logging

import pytest
from starlette.requests import Request

import config
from auth.security import (
    hash_password,
    verify_password,
    generate_session_token,
    cookie_secure_for,
)

logger = logging.getLogger(__name__)


def make_request(scheme: str) -> Request:
    return Request({
        "type": "http",
        "scheme": scheme,
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": [(b"host", b"tasks.sample.com")],
        "server": ("tasks.sample.com", 443 if scheme == "https" else 80),
    })


# ============== Passwords ==============


def test_hash_is_salted_and_not_plaintext():
    first = hash_password("correct horse")
    second = hash_password("correct horse")

    assert first != "correct horse"
    assert first.startswith("$argon2")
    assert first != second, "Two hashes of the same password should differ by salt"


def test_verify_password_accepts_matching_password():
    hashed = hash_password("correct horse")
    assert verify_password("correct horse", hashed) is True


def test_verify_password_rejects_wrong_password():
    hashed = hash_password("correct horse")
    assert verify_password("battery staple", hashed) is False


@pytest.mark.parametrize("stored", ["", None, "not-a-hash", "correct horse"])
def test_verify_password_unusable_hash_is_false(stored):
    """A plaintext or garbage value in the hash column never verifies."""
    assert verify_password("correct horse", stored) is False


# ============== Session tokens ==============


def test_session_tokens_are_random_and_url_safe():
    tokens = {generate_session_token() for _ in range(20)}

    assert len(tokens) == 20
    for token in tokens:
        assert len(token) >= 40
        assert all(c.isalnum() or c in "-_" for c in token)


# ============== Cookie Secure flag ==============


@pytest.mark.parametrize(
    "mode, scheme, expected",
    [
        ("auto", "https", True),
        ("auto", "http", False),
        ("always", "http", True),
        ("never", "https", False),
    ],
)
def test_cookie_secure_for(monkeypatch, mode, scheme, expected):
    monkeypatch.setattr(config, "SESSION_COOKIE_SECURE", mode)
    assert cookie_secure_for(make_request(scheme)) is expected
