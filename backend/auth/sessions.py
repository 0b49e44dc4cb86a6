"""
Server-side session store.

A session is a row in user_sessions keyed by an opaque token that travels in
the session cookie. The row maps the token to a user id until it expires or
is deleted on logout.
"""

import logging
from typing import Optional

from fastapi import Request, Response
from sqlalchemy.orm import Session

import config
from models import User, UserSession
from time_utils import expiry_from_now, is_expired
from auth.security import generate_session_token, cookie_secure_for

logger = logging.getLogger(__name__)


def _short(token: str) -> str:
    return token[:8] + "…"


def create_session(db: Session, user: User, commit: bool = True) -> str:
    """
    Create a new session bound to a user.

    Args:
        db: Database session
        user: User the session belongs to
        commit: Commit immediately; pass False to only flush so the caller can
            commit the session together with its own changes

    Returns:
        The new session token (to be placed in the cookie)
    """
    token = generate_session_token()
    db_session = UserSession(
        token=token,
        user_id=user.id,
        expires_at=expiry_from_now(config.SESSION_MAX_AGE_DAYS),
    )
    db.add(db_session)
    if commit:
        db.commit()
    else:
        db.flush()
    logger.debug(f"Created session {_short(token)} for user ID {user.id}")
    return token


def resolve_session_user(db: Session, token: Optional[str]) -> Optional[User]:
    """
    Look up the user bound to a session token.

    Args:
        db: Database session
        token: Session token from the cookie, if any

    Returns:
        The User if the token names a live session for an existing user,
        None otherwise. Expired sessions are deleted when encountered.

    Raises:
        SQLAlchemyError: if the store fails; callers decide how to degrade
    """
    if not token:
        return None

    db_session = db.query(UserSession).filter(UserSession.token == token).first()
    if db_session is None:
        logger.debug(f"Unknown session token {_short(token)}")
        return None

    if is_expired(db_session.expires_at):
        logger.info(f"Session {_short(token)} expired, removing it")
        db.delete(db_session)
        db.commit()
        return None

    user = db.query(User).filter(User.id == db_session.user_id).first()
    if user is None:
        logger.info(f"Session {_short(token)} points at missing user ID {db_session.user_id}")
    return user


def destroy_session(db: Session, token: Optional[str], commit: bool = True) -> bool:
    """
    Delete the session named by a token.

    Deleting a session that does not exist is not an error. With commit=False
    the delete joins the caller's transaction.

    Returns:
        True if a row was deleted, False if there was nothing to delete
    """
    if not token:
        return False
    deleted = db.query(UserSession).filter(UserSession.token == token).delete()
    if commit:
        db.commit()
    if deleted:
        logger.debug(f"Destroyed session {_short(token)}")
    return bool(deleted)


def set_session_cookie(response: Response, request: Request, token: str) -> None:
    """Attach the session cookie to an outgoing response."""
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        path="/",  # Must match path in delete_cookie for logout to work
        httponly=True,
        secure=cookie_secure_for(request),
        samesite="lax",
        max_age=config.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
    )


def clear_session_cookie(response: Response, request: Request) -> None:
    """Remove the session cookie from the browser."""
    response.delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        path="/",
        secure=cookie_secure_for(request),
        httponly=True,
        samesite="lax",
    )
