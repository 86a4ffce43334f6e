"""Domain errors raised by services and the authorization gate.

Each error carries the HTTP status it maps to; the exception handlers in
``ratings_api.main`` render them as ``{"message": ...}``.
"""


class ServiceError(Exception):
    """Base class for business-rule failures."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid request"


class Unauthenticated(ServiceError):
    status_code = 401
    default_message = "Invalid or expired token"


class InvalidCredentials(Unauthenticated):
    """Login failed. Same message for unknown email and wrong password."""

    default_message = "Invalid credentials"


class Forbidden(ServiceError):
    status_code = 403
    default_message = "Forbidden: insufficient rights"


class NotFound(ServiceError):
    status_code = 404
    default_message = "Not found"


class NotFoundOrNotOwner(NotFound):
    """Store is missing or belongs to someone else; callers cannot tell which."""

    default_message = "Store not found or you are not the owner"


class Conflict(ServiceError):
    status_code = 409
    default_message = "Conflict"


class EmailInUse(Conflict):
    default_message = "Email already in use"


class DuplicateRating(ValidationError):
    default_message = "Rating already exists. Use update instead."


class HasRatings(ValidationError):
    default_message = "Cannot delete store with existing ratings. Remove ratings first."


class InvalidOwner(ValidationError):
    default_message = "Owner must have role STORE_OWNER"
