"""Services for Tasks app - Core business logic."""
import logging
from datetime import datetime
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import NotFoundError, ValidationFailedError
from apps.identity.models import User
from apps.identity.services import get_user_or_404
from .models import Task
from .dtos import TaskDTO, task_to_dto
from .schemas import TaskIn

logger = logging.getLogger(__name__)


def _tasks():
    return Task.objects.with_users()


def _to_dtos(queryset) -> List[TaskDTO]:
    return [task_to_dto(t) for t in queryset]


def _get_task_or_404(task_id) -> Task:
    task = _tasks().filter(id=task_id).first()
    if task is None:
        raise NotFoundError(f"Task not found with id: {task_id}")
    return task


def _resolve_assignee(assigned_to_id) -> Optional[User]:
    if assigned_to_id is None:
        return None
    assignee = User.objects.filter(id=assigned_to_id).first()
    if assignee is None:
        raise NotFoundError(f"Assigned user not found with id: {assigned_to_id}")
    return assignee


# =============================================================================
# Queries
# =============================================================================

@transaction.atomic
def list_tasks() -> List[TaskDTO]:
    return _to_dtos(_tasks())


@transaction.atomic
def list_tasks_page(page: int, size: int) -> List[TaskDTO]:
    return _to_dtos(_tasks().window(page, size))


@transaction.atomic
def get_task(task_id) -> TaskDTO:
    return task_to_dto(_get_task_or_404(task_id))


@transaction.atomic
def list_tasks_by_owner(owner_id, status: Optional[str] = None) -> List[TaskDTO]:
    """Tasks owned by a user, optionally narrowed to one status."""
    owner = get_user_or_404(owner_id)
    if status is None:
        return _to_dtos(_tasks().owned_by(owner))
    return _to_dtos(_tasks().owned_by_with_status(owner, status))


@transaction.atomic
def list_tasks_by_assignee(user_id) -> List[TaskDTO]:
    assignee = get_user_or_404(user_id)
    return _to_dtos(_tasks().assigned_to_user(assignee))


@transaction.atomic
def list_tasks_by_status(status: str) -> List[TaskDTO]:
    return _to_dtos(_tasks().with_status(status))


@transaction.atomic
def list_tasks_by_priority(priority: str) -> List[TaskDTO]:
    return _to_dtos(_tasks().with_priority(priority))


@transaction.atomic
def list_tasks_due_between(owner_id, start: datetime, end: datetime) -> List[TaskDTO]:
    """Tasks owned by a user with a due date in [start, end], both ends inclusive."""
    if start > end:
        raise ValidationFailedError("start must not be after end")
    owner = get_user_or_404(owner_id)
    return _to_dtos(_tasks().owned_by_due_between(owner, start, end))


@transaction.atomic
def search_tasks(keyword: str) -> List[TaskDTO]:
    return _to_dtos(_tasks().matching_keyword(keyword))


@transaction.atomic
def list_overdue_tasks(now: Optional[datetime] = None) -> List[TaskDTO]:
    """
    Tasks whose due date is strictly before `now`.
    `now` defaults to the current time; pass it explicitly for deterministic results.
    """
    now = now or timezone.now()
    return _to_dtos(_tasks().due_before(now))


# =============================================================================
# Mutations
# =============================================================================

@transaction.atomic
def create_task(payload: TaskIn, owner_id) -> TaskDTO:
    """
    Create a task owned by `owner_id`.
    Owner and assignee are resolved before anything is written.
    """
    owner = get_user_or_404(owner_id)
    assignee = _resolve_assignee(payload.assigned_to_id)

    task = Task.objects.create(
        title=payload.title,
        description=payload.description,
        status=payload.status,
        priority=payload.priority,
        due_date=payload.due_date,
        owner=owner,
        assigned_to=assignee,
    )
    logger.info(f"Created task {task.id} for owner {owner.id}")
    return task_to_dto(task)


@transaction.atomic
def update_task(task_id, payload: TaskIn) -> TaskDTO:
    """
    Overwrite a task's fields. The owner never changes.
    A missing assigned_to_id clears the assignment.
    """
    task = _get_task_or_404(task_id)
    assignee = _resolve_assignee(payload.assigned_to_id)

    task.title = payload.title
    task.description = payload.description
    task.status = payload.status
    task.priority = payload.priority
    task.due_date = payload.due_date
    task.assigned_to = assignee
    task.save()

    logger.info(f"Updated task {task.id}")
    return task_to_dto(task)


@transaction.atomic
def delete_task(task_id) -> None:
    deleted, _ = Task.objects.filter(id=task_id).delete()
    if not deleted:
        raise NotFoundError(f"Task not found with id: {task_id}")
    logger.info(f"Deleted task {task_id}")
