from django.db import models
from django.db.models.functions import StrIndex

from apps.identity.models import User


class TaskStatus(models.TextChoices):
    TODO = 'TODO', 'To Do'
    IN_PROGRESS = 'IN_PROGRESS', 'In Progress'
    DONE = 'DONE', 'Done'
    CANCELLED = 'CANCELLED', 'Cancelled'


class TaskPriority(models.TextChoices):
    LOW = 'LOW', 'Low'
    MEDIUM = 'MEDIUM', 'Medium'
    HIGH = 'HIGH', 'High'
    URGENT = 'URGENT', 'Urgent'


class TaskQuerySet(models.QuerySet):
    """Finder queries for tasks. Every method returns a lazy queryset."""

    def with_users(self):
        return self.select_related('owner', 'assigned_to')

    def window(self, page: int, size: int):
        """Zero-based page of `size` rows."""
        start = page * size
        return self[start:start + size]

    def owned_by(self, user):
        return self.filter(owner=user)

    def assigned_to_user(self, user):
        return self.filter(assigned_to=user)

    def with_status(self, status):
        return self.filter(status=status)

    def with_priority(self, priority):
        return self.filter(priority=priority)

    def owned_by_with_status(self, user, status):
        return self.filter(owner=user, status=status)

    def due_before(self, moment):
        # Strict: a task due exactly at `moment` is not included
        return self.filter(due_date__lt=moment)

    def owned_by_due_between(self, user, start, end):
        return self.filter(owner=user, due_date__range=(start, end))

    def matching_keyword(self, keyword: str):
        """
        Case-sensitive substring match on title or description.

        Uses StrIndex (INSTR / STRPOS): % and _ are literal, and case
        is respected on SQLite too.
        """
        needle = models.Value(keyword)
        return self.alias(
            title_pos=StrIndex('title', needle),
            description_pos=StrIndex('description', needle),
        ).filter(models.Q(title_pos__gt=0) | models.Q(description_pos__gt=0))


class Task(models.Model):
    """
    A unit of work owned by one user and optionally assigned to another.
    """
    title = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=TaskStatus.choices,
        default=TaskStatus.TODO,
        db_index=True
    )
    priority = models.CharField(
        max_length=20,
        choices=TaskPriority.choices,
        default=TaskPriority.MEDIUM,
        db_index=True
    )
    due_date = models.DateTimeField(null=True, blank=True, db_index=True)

    # Owners cannot be deleted while they still own tasks; assignees can
    owner = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='owned_tasks'
    )
    assigned_to = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_tasks'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TaskQuerySet.as_manager()

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"#{self.id} {self.title} ({self.status})"
