"""
Identity API endpoints.

Provides user management (list, detail, create, update, delete).
Authentication is out of scope; every endpoint is public.
"""
from typing import List
from ninja import Router
from django.http import HttpRequest

from .schemas import UserCreate, UserUpdate, UserOut
from .services import list_users, get_user, create_user, update_user, delete_user

router = Router(tags=["Users"])


@router.get("", response=List[UserOut], by_alias=True)
def list_all_users(request: HttpRequest):
    """List all users. Password hashes are never returned."""
    return list_users()


@router.get("/{int:user_id}", response=UserOut, by_alias=True)
def get_user_api(request: HttpRequest, user_id: int):
    return get_user(user_id)


@router.post("", response={201: UserOut}, by_alias=True)
def create_user_api(request: HttpRequest, payload: UserCreate):
    """
    Create a new user.

    Role defaults to USER. Duplicate username or email returns 409.
    """
    return 201, create_user(payload)


@router.put("/{int:user_id}", response=UserOut, by_alias=True)
def update_user_api(request: HttpRequest, user_id: int, payload: UserUpdate):
    """
    Replace a user's fields.

    An empty or missing password keeps the current one. Role and name are
    always overwritten, so clients must resend the current role.
    """
    return update_user(user_id, payload)


@router.delete("/{int:user_id}", response={204: None})
def delete_user_api(request: HttpRequest, user_id: int):
    """
    Delete a user.

    Returns 409 while the user still owns tasks.
    """
    delete_user(user_id)
    return 204
