"""DTOs for Identity app."""
from dataclasses import dataclass
from typing import Optional

from apps.core.timestamps import format_timestamp
from .models import User


@dataclass(frozen=True)
class UserDTO:
    id: int
    username: str
    email: str
    name: str
    role: str
    created_at: Optional[str]
    updated_at: Optional[str]


def user_to_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        username=user.username,
        email=user.email,
        name=user.name,
        role=str(user.role),
        created_at=format_timestamp(user.created_at),
        updated_at=format_timestamp(user.updated_at),
    )
