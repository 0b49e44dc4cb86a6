"""
Task-level access control.

This module decides which tasks a user can see and which tasks a user may
change:
- Visibility: a task is visible to its owner and to every user whose email
  is listed as one of its collaborators.
- Mutation: governed by a named TaskMutationPolicy so the rule is an explicit
  configuration choice rather than a missing check.
"""

import enum
import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session, selectinload

import config
from models import User, Task, TaskCollaborator
from schemas import TaskView

logger = logging.getLogger(__name__)


class TaskMutationPolicy(str, enum.Enum):
    # owner and collaborators may toggle/delete
    participants = "participants"
    # any logged-in user may toggle/delete any task
    authenticated = "authenticated"


def get_mutation_policy() -> TaskMutationPolicy:
    """
    Read the configured mutation policy.

    Unknown values fall back to `participants`, the stricter policy.
    """
    try:
        return TaskMutationPolicy(config.TASK_MUTATION_POLICY)
    except ValueError:
        logger.warning(
            f"⚠️  Unsupported TASK_MUTATION_POLICY={config.TASK_MUTATION_POLICY}. "
            "Using 'participants'."
        )
        return TaskMutationPolicy.participants


def visible_tasks_query(user: User, db: Session) -> Query:
    """
    Build the query for every task visible to a user.

    The collaborator check is an EXISTS subquery, so a task matching both the
    owner and the collaborator predicate still appears once.
    """
    return db.query(Task).filter(
        or_(
            Task.owner_id == user.id,
            Task.collaborators.any(TaskCollaborator.email == user.email),
        )
    )


def get_visible_tasks(user: Optional[User], db: Session) -> List[TaskView]:
    """
    Load the tasks a user can see, annotated for presentation.

    Args:
        user: Current user, or None for anonymous requests
        db: Database session

    Returns:
        TaskView list in creation order; empty for anonymous requests

    Raises:
        SQLAlchemyError: if the store query fails
    """
    if user is None:
        return []

    tasks = (
        visible_tasks_query(user, db)
        .options(selectinload(Task.collaborators), selectinload(Task.owner))
        .order_by(Task.id)
        .all()
    )
    logger.debug(f"Found {len(tasks)} visible tasks for user ID {user.id}")

    return [
        TaskView(
            id=task.id,
            name=task.name,
            description=task.description or "",
            owner_name=task.owner.name if task.owner else "",
            collaborators=task.collaborator_emails,
            is_complete=bool(task.is_complete),
            is_my_task=task.owner_id == user.id,
        )
        for task in tasks
    ]


def can_view_task(user: User, task: Task) -> bool:
    """
    Check if a task is visible to a user (owner or listed collaborator).

    Example:
        >>> can_view_task(owner, task)
        True
    """
    if task.owner_id == user.id:
        return True
    return user.email in task.collaborator_emails


def can_modify_task(
    user: User, task: Task, policy: Optional[TaskMutationPolicy] = None
) -> bool:
    """
    Check if a user may toggle or delete a task.

    Args:
        user: Logged-in user attempting the change
        task: Task to change
        policy: Policy to apply; defaults to the configured one

    Returns:
        True if the change is allowed, False otherwise
    """
    if policy is None:
        policy = get_mutation_policy()

    if policy == TaskMutationPolicy.authenticated:
        return True

    allowed = can_view_task(user, task)
    if not allowed:
        logger.info(f"User {user.id} is neither owner nor collaborator of task {task.id}")
    return allowed
