"""
Form validation shared by registration and task creation.
"""

import logging
from typing import List, Sequence

from email_validator import EmailNotValidError, validate_email

logger = logging.getLogger(__name__)

MAX_COLLABORATORS = 3


def is_valid_email(value: str) -> bool:
    """
    Check that a string is a syntactically valid email address.

    Only the syntax is checked; no DNS lookup is made and the address is
    not required to belong to a registered user.
    """
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        logger.debug(f"Email rejected: {value!r} ({e})")
        return False
    return True


def clean_collaborators(raw: Sequence[str]) -> tuple[List[str], List[str]]:
    """
    Normalize collaborator form fields into an ordered list of emails.

    Blank entries are dropped and repeated addresses keep only their first
    occurrence. Every non-blank entry must be a valid email; one bad entry
    fails the whole list.

    Args:
        raw: Collaborator fields in form order (at most MAX_COLLABORATORS)

    Returns:
        Tuple of (emails, errors). `errors` holds one message per invalid
        entry; when it is non-empty the caller must not persist anything.
    """
    emails: List[str] = []
    errors: List[str] = []

    for value in list(raw)[:MAX_COLLABORATORS]:
        value = (value or "").strip()
        if not value:
            continue
        if not is_valid_email(value):
            errors.append(f"Bad email: {value}")
            continue
        if value not in emails:
            emails.append(value)

    return emails, errors
