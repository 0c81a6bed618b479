"""Application error taxonomy.

Services raise these; ``smanzy.main`` maps them to HTTP responses of the form
``{"detail": message, "code": code}``. Messages are safe to show to clients.
"""


class AppError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code = 500
    code = "internal_error"
    default_message = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(AppError):
    """Malformed or missing input."""

    status_code = 400
    code = "validation_error"
    default_message = "Invalid input."


class UnauthorizedError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    code = "unauthorized"
    default_message = "Not authenticated."


class InvalidCredentialsError(UnauthorizedError):
    """Login failed. Same message whether the email or the password was wrong."""

    code = "invalid_credentials"
    default_message = "Invalid email or password."


class InvalidTokenError(UnauthorizedError):
    """Bad signature, wrong algorithm, wrong token type or malformed token."""

    code = "invalid_token"
    default_message = "Invalid token."


class ExpiredTokenError(UnauthorizedError):
    """Correctly signed token past its expiry; clients may try a refresh."""

    code = "token_expired"
    default_message = "Token has expired."


class ForbiddenError(AppError):
    status_code = 403
    code = "forbidden"
    default_message = "Forbidden."


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Not found."


class ConflictError(AppError):
    status_code = 409
    code = "conflict"
    default_message = "Conflict."


class DuplicateEmailError(ConflictError):
    code = "duplicate_email"
    default_message = "Email is already registered."


class InternalError(AppError):
    """Store or filesystem failure; details go to the log, not the client."""
