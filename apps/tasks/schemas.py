"""API Schemas for Tasks app - request validation and response shapes."""
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from apps.core.schemas import CamelSchema
from apps.core.timestamps import to_local_naive
from apps.identity.schemas import UserOut
from .models import TaskPriority, TaskStatus


# =============================================================================
# Request Schemas
# =============================================================================

class TaskIn(CamelSchema):
    """Schema for creating/updating a task. Update replaces every field."""
    title: str = Field(max_length=200)
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None  # ISO 8601, e.g. 2025-01-31T17:00:00
    assigned_to_id: Optional[int] = None

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('Title is required')
        return value

    @field_validator('status')
    @classmethod
    def known_status(cls, value: str) -> str:
        if value not in TaskStatus.values:
            raise ValueError(f"must be one of: {', '.join(TaskStatus.values)}")
        return value

    @field_validator('priority')
    @classmethod
    def known_priority(cls, value: str) -> str:
        if value not in TaskPriority.values:
            raise ValueError(f"must be one of: {', '.join(TaskPriority.values)}")
        return value

    @field_validator('due_date')
    @classmethod
    def naive_due_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(value)


# =============================================================================
# Response Schemas
# =============================================================================

class TaskOut(CamelSchema):
    id: int
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[str] = None
    owner: UserOut
    assigned_to: Optional[UserOut] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
