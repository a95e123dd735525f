"""Application error taxonomy.

Every error carries the HTTP status it maps to and a message that is safe to
show to the caller. Anything else raised while handling a request is an
internal failure and is reported with a generic message.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class MissingCredentialError(UnauthorizedError):
    default_message = "No token provided or invalid format"


class InvalidTokenError(UnauthorizedError):
    default_message = "Invalid or expired token"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class InvalidTransitionError(ConflictError):
    default_message = "Complaint status cannot move backwards"


class InternalError(AppError):
    pass
