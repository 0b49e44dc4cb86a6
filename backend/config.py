"""
Application configuration loaded from environment variables.

All settings are read once at import time. Invalid values are logged and
replaced by their defaults so a typo never prevents the app from starting.
"""

import logging
import os

logger = logging.getLogger(__name__)


ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")


def is_production_like() -> bool:
    """
    Check if the current environment is production-like (production or staging).

    Returns:
        True if ENVIRONMENT is "production" or "staging", False otherwise
    """
    return ENVIRONMENT.lower() in ("production", "staging")


LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./tasklist.db")

SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "session_id")

try:
    SESSION_MAX_AGE_DAYS = int(os.environ.get("SESSION_MAX_AGE_DAYS", "14"))
    if SESSION_MAX_AGE_DAYS < 1 or SESSION_MAX_AGE_DAYS > 90:
        logger.warning(
            f"⚠️  SESSION_MAX_AGE_DAYS={SESSION_MAX_AGE_DAYS} is outside safe range (1-90). "
            "Using default of 14 days."
        )
        SESSION_MAX_AGE_DAYS = 14
except ValueError:
    logger.warning("⚠️  Invalid SESSION_MAX_AGE_DAYS value in environment. Using default of 14 days.")
    SESSION_MAX_AGE_DAYS = 14

# "auto" sends the cookie with the Secure flag only when the request itself
# arrived over HTTPS.
COOKIE_SECURE_MODES = ("auto", "always", "never")
SESSION_COOKIE_SECURE = os.environ.get("SESSION_COOKIE_SECURE", "auto").lower()
if SESSION_COOKIE_SECURE not in COOKIE_SECURE_MODES:
    logger.warning(
        f"⚠️  Unsupported SESSION_COOKIE_SECURE={SESSION_COOKIE_SECURE}. Using 'auto'. "
        f"Supported: {', '.join(COOKIE_SECURE_MODES)}"
    )
    SESSION_COOKIE_SECURE = "auto"

if is_production_like() and SESSION_COOKIE_SECURE == "never":
    logger.warning(
        "⚠️  SECURITY WARNING: Running in production mode but SESSION_COOKIE_SECURE is 'never'. "
        "Session cookies will be sent over HTTP, which is vulnerable to MITM attacks."
    )

# Who may toggle or delete a task once logged in:
#   participants   - the owner and listed collaborators only
#   authenticated  - any logged-in user
TASK_MUTATION_POLICY = os.environ.get("TASK_MUTATION_POLICY", "participants").lower()
