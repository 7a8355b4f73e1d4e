"""
Domain errors raised by the service layer.

Services never raise HttpError directly; config/urls.py maps each
DomainError subclass to its status code so the routers stay free of
try/except noise.
"""


class DomainError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """Referenced entity does not exist."""
    status_code = 404


class ConflictError(DomainError):
    """Unique field already taken, or the row is still referenced."""
    status_code = 409


class ValidationFailedError(DomainError):
    """Inbound value is missing or malformed."""
    status_code = 400
