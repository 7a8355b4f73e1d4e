from django.db import models


class UserRole(models.TextChoices):
    USER = 'USER', 'User'
    ADMIN = 'ADMIN', 'Administrator'


class UserQuerySet(models.QuerySet):

    def username_taken(self, username: str, exclude_id=None) -> bool:
        queryset = self.filter(username=username)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def email_taken(self, email: str, exclude_id=None) -> bool:
        queryset = self.filter(email=email)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()


class User(models.Model):
    """
    Account that owns and works tasks.
    Password holds a Django hasher string, never the plaintext.
    """
    username = models.CharField(max_length=50, unique=True)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128)
    name = models.CharField(max_length=100)
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.USER
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserQuerySet.as_manager()

    class Meta:
        ordering = ['id']

    def __str__(self):
        return self.username
