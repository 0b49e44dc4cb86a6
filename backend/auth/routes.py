"""
Account endpoints.

This module provides the HTML form endpoints for:
- User registration
- Login
- Logout
"""

import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models import User
from pages import render_home
from validation import is_valid_email
from auth.security import hash_password, verify_password
from auth.dependencies import RequestContext, get_request_context
from auth.sessions import (
    create_session,
    destroy_session,
    set_session_cookie,
    clear_session_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["auth"])

PASSWORD_MISMATCH = "Password and password confirmation do not match"
INVALID_EMAIL = "Invalid email address"
MISSING_FIELDS = "Name and password are required"
EMAIL_TAKEN = "Email already registered"
REGISTER_FAILED = "Error registering you!"
BAD_CREDENTIALS = "Invalid email or password"
LOGIN_FAILED = "Error logging you in!"


def _redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/register")
async def register(
    request: Request,
    email: str = Form(""),
    name: str = Form(""),
    password: str = Form(""),
    password_confirmation: str = Form("", alias="passwordConfirmation"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """
    Register a new user account and log it in.

    Nothing is persisted unless every check passes and the user and its
    session are saved in one transaction. A session the browser already
    carried is replaced.

    Returns:
        303 redirect to the home page with a fresh session cookie, or the
        home page re-rendered with an error
    """
    email = email.strip()
    name = name.strip()
    logger.info(f"Registration attempt for email: {email}")

    if password != password_confirmation:
        logger.info(f"Registration failed: password mismatch for {email}")
        return render_home(request, ctx, db, PASSWORD_MISMATCH, status.HTTP_400_BAD_REQUEST)

    if not is_valid_email(email):
        logger.info(f"Registration failed: invalid email {email!r}")
        return render_home(request, ctx, db, INVALID_EMAIL, status.HTTP_400_BAD_REQUEST)

    if not name or not password:
        logger.info(f"Registration failed: missing name or password for {email}")
        return render_home(request, ctx, db, MISSING_FIELDS, status.HTTP_400_BAD_REQUEST)

    try:
        existing_user = db.query(User).filter(User.email == email).first()
        if existing_user:
            logger.info(f"Registration failed: email already exists: {email}")
            return render_home(request, ctx, db, EMAIL_TAKEN, status.HTTP_400_BAD_REQUEST)

        new_user = User(name=name, email=email, password_hash=hash_password(password))
        db.add(new_user)
        db.flush()

        # User, session and the rotated-out session commit together or not at all
        destroy_session(db, ctx.session_token, commit=False)
        token = create_session(db, new_user, commit=False)
        db.commit()
    except SQLAlchemyError:
        logger.exception(f"Registration failed: store error for {email}")
        db.rollback()
        return render_home(request, ctx, db, REGISTER_FAILED, status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.critical(f"User registered successfully: {new_user.email} (ID: {new_user.id})")
    response = _redirect_home()
    set_session_cookie(response, request, token)
    return response


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """
    Login with email and password.

    An unknown email and a wrong password produce the same response. On
    success any session the browser already carried is replaced by a new one.

    Returns:
        303 redirect to the home page with the session cookie set, or the
        home page re-rendered with a 401
    """
    email = email.strip()
    logger.info(f"Login attempt for email: {email}")

    try:
        user = db.query(User).filter(User.email == email).first()
        if not user:
            logger.info(f"Login failed: user not found: {email}")
            return render_home(request, ctx, db, BAD_CREDENTIALS, status.HTTP_401_UNAUTHORIZED)

        if not verify_password(password, user.password_hash):
            logger.info(f"Login failed: invalid password: {email}")
            return render_home(request, ctx, db, BAD_CREDENTIALS, status.HTTP_401_UNAUTHORIZED)

        # Rotate: never keep a pre-login token bound to the new identity
        destroy_session(db, ctx.session_token, commit=False)
        token = create_session(db, user, commit=False)
        db.commit()
    except SQLAlchemyError:
        logger.exception(f"Login failed: store error for {email}")
        db.rollback()
        return render_home(request, ctx, db, LOGIN_FAILED, status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.critical(f"User logged in successfully: {user.email} (ID: {user.id})")
    response = _redirect_home()
    set_session_cookie(response, request, token)
    return response


@router.get("/logout")
async def logout(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """
    Logout the current session.

    Works whether or not a session exists, so users can always log out even
    when their session already expired.
    """
    logger.info("Logout request received")

    try:
        destroy_session(db, ctx.session_token)
    except SQLAlchemyError:
        # The cookie is cleared regardless; the row will expire on its own
        logger.exception("Failed to delete session row on logout")
        db.rollback()

    response = _redirect_home()
    clear_session_cookie(response, request)
    logger.critical("User logged out successfully")
    return response
