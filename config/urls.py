"""
URL configuration for the Task Tracker project.
"""
import logging

from django.contrib import admin
from django.urls import path
from ninja import NinjaAPI
from ninja.errors import ValidationError

from apps.core.exceptions import DomainError

logger = logging.getLogger('apps.api')

api = NinjaAPI(
    title="Task Tracker API",
    version="1.0.0",
    description="Create, assign and query tasks",
    docs_url="/docs",
)


@api.exception_handler(DomainError)
def domain_error(request, exc: DomainError):
    """NotFound -> 404, Conflict -> 409, ValidationFailed -> 400."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.path}: {exc.message}")
    return api.create_response(request, {"detail": exc.message}, status=exc.status_code)


@api.exception_handler(ValidationError)
def request_validation_error(request, exc: ValidationError):
    # ninja answers 422 by default; bad payloads and query values are 400 here
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors
    ]
    return api.create_response(request, {"detail": errors}, status=400)


from apps.identity.api import router as users_router
from apps.tasks.api import router as tasks_router

api.add_router("/users", users_router)
api.add_router("/tasks", tasks_router)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api.urls),
]
