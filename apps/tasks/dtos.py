"""DTOs for Tasks app - read-only snapshots returned by the service layer."""
from dataclasses import dataclass
from typing import Optional

from apps.core.timestamps import format_timestamp
from apps.identity.dtos import UserDTO, user_to_dto
from .models import Task


@dataclass(frozen=True)
class TaskDTO:
    """Task with its owner and assignee flattened to UserDTOs (one level deep)."""
    id: int
    title: str
    description: Optional[str]
    status: str
    priority: str
    due_date: Optional[str]
    owner: UserDTO
    assigned_to: Optional[UserDTO]
    created_at: Optional[str]
    updated_at: Optional[str]


def task_to_dto(task: Task) -> TaskDTO:
    return TaskDTO(
        id=task.id,
        title=task.title,
        description=task.description,
        status=str(task.status),
        priority=str(task.priority),
        due_date=format_timestamp(task.due_date),
        owner=user_to_dto(task.owner),
        assigned_to=user_to_dto(task.assigned_to) if task.assigned_to else None,
        created_at=format_timestamp(task.created_at),
        updated_at=format_timestamp(task.updated_at),
    )
