"""
FastAPI dependencies for authentication.

This module provides dependency functions that can be used in route handlers to:
- Build the per-request context (the current user, if any) from the session cookie
- Gate routes that require a logged-in user
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import config
from database import get_db
from models import User
from auth.sessions import resolve_session_user

logger = logging.getLogger(__name__)


class LoginRequired(Exception):
    """Raised by the authentication gate when no user is logged in."""


@dataclass(frozen=True)
class RequestContext:
    """
    Everything a handler needs to know about who is calling.

    Built once per request by get_request_context and passed explicitly into
    handlers; never written back to the session.
    """

    current_user: Optional[User] = None
    session_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None


async def get_request_context(request: Request, db: Session = Depends(get_db)) -> RequestContext:
    """
    Resolve the session cookie into a RequestContext.

    A missing cookie, an unknown or expired token, or a store error all
    produce an anonymous context; none of them fail the request.

    Example:
        @app.get("/")
        async def home(ctx: RequestContext = Depends(get_request_context)):
            if ctx.is_authenticated:
                ...
    """
    token = request.cookies.get(config.SESSION_COOKIE_NAME)
    if not token:
        return RequestContext()

    try:
        user = resolve_session_user(db, token)
    except SQLAlchemyError:
        logger.exception("Session lookup failed, continuing as anonymous")
        db.rollback()
        user = None

    if user is not None:
        logger.debug(f"Request authenticated as user ID {user.id}")
    return RequestContext(current_user=user, session_token=token)


async def require_user(ctx: RequestContext = Depends(get_request_context)) -> User:
    """
    Authentication gate: return the current user or stop the request.

    Raises:
        LoginRequired: if no user is logged in (rendered as a bare 403)

    Example:
        @app.post("/task/create")
        async def create_task(current_user: User = Depends(require_user)):
            ...
    """
    if ctx.current_user is None:
        logger.info("Rejected anonymous request to a login-only route")
        raise LoginRequired()
    return ctx.current_user
