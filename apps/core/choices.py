"""Parsing helpers for values that arrive as raw URL or query text."""
import sys
from typing import Optional, Tuple, Type, TypeVar

from django.conf import settings
from django.db import models

from .exceptions import ValidationFailedError

ChoiceT = TypeVar('ChoiceT', bound=models.TextChoices)


def parse_choice(choices: Type[ChoiceT], token: str) -> ChoiceT:
    """
    Convert a path segment such as "IN_PROGRESS" into its TextChoices member.

    Matching is case-sensitive; anything outside the member set raises
    ValidationFailedError instead of falling through to a 500.
    """
    try:
        return choices(token)
    except ValueError:
        allowed = ", ".join(choices.values)
        raise ValidationFailedError(
            f"Invalid {choices.__name__} '{token}'. Expected one of: {allowed}"
        ) from None


def parse_page_window(page: Optional[int], size: Optional[int]) -> Optional[Tuple[int, int]]:
    """
    Resolve the optional page/size query pair.

    Returns None when neither was supplied (caller wants the full list),
    otherwise a (page, size) tuple with defaults page=0, size=10.
    """
    if page is None and size is None:
        return None

    page = 0 if page is None else page
    size = 10 if size is None else size

    if page < 0:
        raise ValidationFailedError("page must be zero or greater")
    if size < 1:
        raise ValidationFailedError("size must be at least 1")
    if size > settings.MAX_PAGE_SIZE:
        raise ValidationFailedError(f"size must not exceed {settings.MAX_PAGE_SIZE}")
    # LIMIT/OFFSET are signed 64-bit in the database
    if (page + 1) * size > sys.maxsize:
        raise ValidationFailedError(f"page must not exceed {sys.maxsize // size - 1} for size {size}")

    return page, size
