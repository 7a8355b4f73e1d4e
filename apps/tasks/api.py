"""
Tasks API endpoints.

Provides CRUD, filtered listings, keyword search, and overdue lookups.
The task owner on create is the request's caller (see CallerMiddleware).
"""
from datetime import datetime
from typing import List, Optional
from ninja import Router
from django.http import HttpRequest

from apps.core.choices import parse_choice, parse_page_window
from apps.core.exceptions import ValidationFailedError
from apps.core.timestamps import to_local_naive
from .models import TaskPriority, TaskStatus
from .schemas import TaskIn, TaskOut
from . import services

router = Router(tags=["Tasks"])


def get_caller_id(request: HttpRequest) -> int:
    """The user a request acts for. Raises 400 on a malformed X-User-ID header."""
    if getattr(request, 'caller_header_invalid', False):
        raise ValidationFailedError("X-User-ID header must be a positive integer")
    caller_id = getattr(request, 'caller_id', None)
    if caller_id is None:
        raise ValidationFailedError("No caller identity available")
    return caller_id


# =============================================================================
# Listings
# =============================================================================

@router.get("", response=List[TaskOut], by_alias=True)
def list_tasks_api(
    request: HttpRequest,
    page: Optional[int] = None,
    size: Optional[int] = None,
):
    """
    List tasks.

    Query Parameters:
    - page: zero-based page number (default 0 when size is given)
    - size: page size (default 10 when page is given)

    With neither parameter the full list is returned.
    """
    window = parse_page_window(page, size)
    if window is None:
        return services.list_tasks()
    return services.list_tasks_page(*window)


# Literal paths are registered before /{task_id}
@router.get("/search", response=List[TaskOut], by_alias=True)
def search_tasks_api(request: HttpRequest, keyword: str):
    """Tasks whose title or description contains `keyword` (case-sensitive)."""
    return services.search_tasks(keyword)


@router.get("/overdue", response=List[TaskOut], by_alias=True)
def overdue_tasks_api(request: HttpRequest):
    """Tasks whose due date has already passed."""
    return services.list_overdue_tasks()


@router.get("/user/{int:user_id}", response=List[TaskOut], by_alias=True)
def tasks_by_owner_api(request: HttpRequest, user_id: int, status: Optional[str] = None):
    """Tasks owned by a user, optionally filtered by status."""
    if status is not None:
        status = parse_choice(TaskStatus, status)
    return services.list_tasks_by_owner(user_id, status=status)


@router.get("/user/{int:user_id}/due", response=List[TaskOut], by_alias=True)
def tasks_due_between_api(request: HttpRequest, user_id: int, start: datetime, end: datetime):
    """Tasks owned by a user that fall due between start and end (inclusive)."""
    return services.list_tasks_due_between(user_id, to_local_naive(start), to_local_naive(end))


@router.get("/assignee/{int:user_id}", response=List[TaskOut], by_alias=True)
def tasks_by_assignee_api(request: HttpRequest, user_id: int):
    return services.list_tasks_by_assignee(user_id)


@router.get("/status/{status}", response=List[TaskOut], by_alias=True)
def tasks_by_status_api(request: HttpRequest, status: str):
    return services.list_tasks_by_status(parse_choice(TaskStatus, status))


@router.get("/priority/{priority}", response=List[TaskOut], by_alias=True)
def tasks_by_priority_api(request: HttpRequest, priority: str):
    return services.list_tasks_by_priority(parse_choice(TaskPriority, priority))


# =============================================================================
# Single task
# =============================================================================

@router.get("/{int:task_id}", response=TaskOut, by_alias=True)
def get_task_api(request: HttpRequest, task_id: int):
    return services.get_task(task_id)


@router.post("", response={201: TaskOut}, by_alias=True)
def create_task_api(request: HttpRequest, payload: TaskIn):
    """
    Create a task owned by the caller.

    Returns 404 when the caller or the assignee does not exist.
    """
    return 201, services.create_task(payload, owner_id=get_caller_id(request))


@router.put("/{int:task_id}", response=TaskOut, by_alias=True)
def update_task_api(request: HttpRequest, task_id: int, payload: TaskIn):
    """
    Replace a task's fields.

    Omitting assignedToId unassigns the task.
    """
    return services.update_task(task_id, payload)


@router.delete("/{int:task_id}", response={204: None})
def delete_task_api(request: HttpRequest, task_id: int):
    services.delete_task(task_id)
    return 204
