from fastapi import FastAPI, Depends, Form, Request, Response, status
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import ValidationError
import logging

import config
from database import get_db, engine, Base
import models
import schemas
from pages import BASE_DIR, render_home
from validation import clean_collaborators
from auth.routes import router as auth_router
from auth.dependencies import LoginRequired, RequestContext, get_request_context, require_user
from auth.permissions import can_modify_task, get_mutation_policy

# Configure logging
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Task List",
    description="A shared task list with owners and collaborators",
    version="1.0.0"
)

app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

# Register account routes (open to anonymous callers)
app.include_router(auth_router)

TASK_NOT_FOUND = "Could not find task!"
TASK_NAME_REQUIRED = "Task name is required"
TASK_SAVE_FAILED = "Error saving task!"
TASK_COMPLETE_FAILED = "Cannot complete task"
TASK_DELETE_FAILED = "Could not delete task!"


@app.on_event("startup")
async def create_tables():
    """Create any missing tables and report the active mutation policy."""
    Base.metadata.create_all(bind=engine)
    logger.info(f"Task mutation policy: {get_mutation_policy().value}")


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    # Bare 403, no page body
    return Response(status_code=status.HTTP_403_FORBIDDEN)


def _redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


# ============== Pages ==============

@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.get("/")
def home(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Home page; lists the caller's visible tasks when logged in."""
    return render_home(request, ctx, db)


# ============== Tasks (login required) ==============

@app.post("/task/create")
def create_task(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    collaborator1: str = Form(""),
    collaborator2: str = Form(""),
    collaborator3: str = Form(""),
    current_user: models.User = Depends(require_user),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """
    Create a task owned by the current user.

    All collaborator entries are checked before anything is written; one bad
    address rejects the whole task.
    """
    logger.info(f"Creating task for user ID {current_user.id}")

    collaborators, errors = clean_collaborators([collaborator1, collaborator2, collaborator3])
    if errors:
        logger.info(f"Task rejected, invalid collaborators: {errors}")
        return render_home(request, ctx, db, errors, status.HTTP_400_BAD_REQUEST)

    try:
        task_in = schemas.TaskCreate(
            name=name.strip(),
            description=description,
            collaborators=collaborators,
        )
    except ValidationError:
        logger.info("Task rejected, missing or oversized name")
        return render_home(request, ctx, db, TASK_NAME_REQUIRED, status.HTTP_400_BAD_REQUEST)

    task = models.Task(
        owner_id=current_user.id,
        name=task_in.name,
        description=task_in.description,
        is_complete=False,
    )
    task.collaborators = [
        models.TaskCollaborator(position=position, email=email)
        for position, email in enumerate(task_in.collaborators, start=1)
    ]

    try:
        db.add(task)
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        logger.exception(f"Failed to save task for user ID {current_user.id}")
        db.rollback()
        return render_home(request, ctx, db, TASK_SAVE_FAILED, status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Created task {task.id} with {len(task_in.collaborators)} collaborators")
    return _redirect_home()


@app.post("/tasks/{task_id}/complete")
def toggle_task_complete(
    request: Request,
    task_id: int,
    current_user: models.User = Depends(require_user),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """
    Flip a task's completion flag based on its stored value.

    Tasks the caller may not modify are reported as not found.
    """
    logger.debug(f"Toggling completion of task {task_id} by user ID {current_user.id}")

    try:
        task = db.query(models.Task).filter(models.Task.id == task_id).first()
        if task is None or not can_modify_task(current_user, task):
            logger.info(f"Task {task_id} not found for user ID {current_user.id}")
            return render_home(request, ctx, db, TASK_NOT_FOUND, status.HTTP_404_NOT_FOUND)

        task.is_complete = not task.is_complete
        db.commit()
    except SQLAlchemyError:
        logger.exception(f"Failed to toggle task {task_id}")
        db.rollback()
        return render_home(request, ctx, db, TASK_COMPLETE_FAILED, status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Task {task_id} is_complete -> {task.is_complete}")
    return _redirect_home()


@app.post("/tasks/{task_id}/delete")
def delete_task(
    request: Request,
    task_id: int,
    current_user: models.User = Depends(require_user),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """
    Delete a task.

    A missing task, or one the caller may not modify, is a no-op that still
    redirects home.
    """
    logger.debug(f"Deleting task {task_id} by user ID {current_user.id}")

    try:
        task = db.query(models.Task).filter(models.Task.id == task_id).first()
        if task is None:
            logger.info(f"Delete of missing task {task_id} ignored")
            return _redirect_home()
        if not can_modify_task(current_user, task):
            logger.info(f"Delete of task {task_id} by user ID {current_user.id} ignored")
            return _redirect_home()

        db.delete(task)
        db.commit()
    except SQLAlchemyError:
        logger.exception(f"Failed to delete task {task_id}")
        db.rollback()
        return render_home(request, ctx, db, TASK_DELETE_FAILED, status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Deleted task {task_id}")
    return _redirect_home()
