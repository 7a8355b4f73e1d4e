"""Services for Identity app."""
import logging
from typing import List, Optional

from django.contrib.auth.hashers import check_password, make_password
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from apps.core.exceptions import ConflictError, NotFoundError
from .models import User
from .dtos import UserDTO, user_to_dto
from .schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def get_user_or_404(user_id) -> User:
    """Load a user row; the other apps resolve owner/assignee references through this."""
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


def list_users() -> List[UserDTO]:
    return [user_to_dto(u) for u in User.objects.all()]


def get_user(user_id) -> UserDTO:
    return user_to_dto(get_user_or_404(user_id))


def _ensure_unique(username: Optional[str], email: Optional[str], exclude_id=None) -> None:
    """Pre-check for a readable Conflict message. None skips that field."""
    if username is not None and User.objects.username_taken(username, exclude_id=exclude_id):
        logger.warning(f"Rejected duplicate username: {username}")
        raise ConflictError(f"Username already exists: {username}")
    if email is not None and User.objects.email_taken(email, exclude_id=exclude_id):
        logger.warning(f"Rejected duplicate email: {email}")
        raise ConflictError(f"Email already exists: {email}")


def _save_unique(user: User) -> None:
    """
    Persist a user, turning a unique-constraint violation into ConflictError.
    The constraint is the source of truth when two writers race past the pre-check.
    """
    try:
        with transaction.atomic():
            user.save()
    except IntegrityError as e:
        logger.warning(f"Unique constraint rejected user {user.username}: {e}")
        raise ConflictError("Username or email already exists") from e


@transaction.atomic
def create_user(payload: UserCreate) -> UserDTO:
    _ensure_unique(payload.username, payload.email)

    user = User(
        username=payload.username,
        email=payload.email,
        password=make_password(payload.password),
        name=payload.name,
        role=payload.role,
    )
    _save_unique(user)
    logger.info(f"Created user {user.id} ({user.username})")
    return user_to_dto(user)


@transaction.atomic
def update_user(user_id, payload: UserUpdate) -> UserDTO:
    user = get_user_or_404(user_id)

    username_changed = user.username != payload.username
    email_changed = user.email != payload.email
    _ensure_unique(
        payload.username if username_changed else None,
        payload.email if email_changed else None,
        exclude_id=user.id,
    )

    user.username = payload.username
    user.email = payload.email
    if payload.password:
        user.password = make_password(payload.password)
    user.name = payload.name
    user.role = payload.role

    _save_unique(user)
    logger.info(f"Updated user {user.id}")
    return user_to_dto(user)


@transaction.atomic
def delete_user(user_id) -> None:
    """
    Delete a user.
    Tasks they own block the delete (PROTECT); tasks assigned to them are unassigned.
    """
    user = get_user_or_404(user_id)
    try:
        with transaction.atomic():
            user.delete()
    except ProtectedError as e:
        raise ConflictError(
            f"User {user_id} still owns tasks; reassign or delete them first"
        ) from e
    logger.info(f"Deleted user {user_id}")


def verify_password(user_id, raw_password: str) -> bool:
    user = get_user_or_404(user_id)
    return check_password(raw_password, user.password)
