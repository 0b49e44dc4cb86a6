"""
Security utilities for password hashing and session tokens.

This module provides cryptographic functions for:
- Password hashing using Argon2id (memory-hard, GPU-resistant)
- Password verification as a free function over (plaintext, hash)
- Opaque session token generation
- The Secure-flag decision for the session cookie
"""

import logging
import secrets

from fastapi import Request
from passlib.context import CryptContext

import config

logger = logging.getLogger(__name__)

# Password hashing configuration using Argon2id
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

SESSION_TOKEN_BYTES = 32


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2id.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string (salt and parameters included)

    Example:
        >>> hashed = hash_password("my_secure_password")
        >>> verify_password("my_secure_password", hashed)
        True
    """
    logger.debug("Hashing password")
    hashed = pwd_context.hash(password)
    logger.debug("Password hashed successfully")
    return hashed


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    The comparison is done by passlib against the salted hash; the plaintext
    is never compared directly. A missing or unrecognised hash verifies as
    False instead of raising.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    logger.debug("Verifying password")
    if not hashed_password:
        logger.info("Password verification failed: no stored hash")
        return False
    try:
        is_valid = pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.info(f"Password verification failed: unusable hash ({e})")
        return False
    logger.debug(f"Password verification result: {is_valid}")
    return is_valid


def generate_session_token() -> str:
    """
    Generate an opaque random session token for the session cookie.

    Returns:
        URL-safe token string

    Note:
        The token carries no user data; it only keys a row in user_sessions.
    """
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def cookie_secure_for(request: Request) -> bool:
    """
    Decide whether the session cookie gets the Secure flag.

    In "auto" mode the cookie is marked Secure exactly when the request came
    in over HTTPS, so plain-HTTP development still works.
    """
    if config.SESSION_COOKIE_SECURE == "always":
        return True
    if config.SESSION_COOKIE_SECURE == "never":
        return False
    return request.url.scheme == "https"
