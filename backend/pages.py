"""
Server-side page rendering.

Every HTML response goes through render_home: the home page is the only
page, and errors are shown inline on it.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from fastapi import Request, status
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auth.dependencies import RequestContext
from auth.permissions import get_visible_tasks

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(BASE_DIR / "templates"))

TASK_LOAD_ERROR = "Cannot find task!"


def render_home(
    request: Request,
    ctx: RequestContext,
    db: Session,
    errors: Optional[Union[str, List[str]]] = None,
    status_code: int = status.HTTP_200_OK,
):
    """
    Render index.html for the current request.

    Visible tasks are loaded for logged-in users. If that query fails the
    page is rendered without tasks and with a generic error instead.

    Args:
        request: Incoming request
        ctx: Resolved request context
        db: Database session
        errors: Message or list of messages to show inline
        status_code: HTTP status for the response
    """
    tasks = []
    if ctx.is_authenticated:
        try:
            tasks = get_visible_tasks(ctx.current_user, db)
        except SQLAlchemyError:
            logger.exception(f"Failed to load tasks for user ID {ctx.current_user.id}")
            db.rollback()
            errors = TASK_LOAD_ERROR
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if isinstance(errors, str):
        errors = [errors]

    return TEMPLATES.TemplateResponse(
        request,
        "index.html",
        {
            "current_user": ctx.current_user,
            "tasks": tasks,
            "errors": errors or [],
        },
        status_code=status_code,
    )
