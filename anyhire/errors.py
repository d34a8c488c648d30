"""Domain exceptions mapped to HTTP responses by the global error handler."""


class AppError(Exception):
    """Base class: each subclass carries an HTTP status and a stable error type."""

    status_code: int = 400
    error_type: str = "bad_request"
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = 401
    error_type = "authentication_error"
    default_message = "Not authenticated"


class TokenInvalid(Unauthenticated):
    default_message = "Invalid token"


class TokenExpired(Unauthenticated):
    default_message = "Token expired"


class TokenMismatch(Unauthenticated):
    """Refresh token is well-formed but is not the one currently stored."""

    default_message = "Invalid refresh token"


class InvalidCredentials(AppError):
    status_code = 400
    error_type = "invalid_credentials"
    default_message = "Invalid email or password"


class Forbidden(AppError):
    status_code = 403
    error_type = "forbidden"
    default_message = "Access denied"


class NotFound(AppError):
    status_code = 404
    error_type = "not_found"
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    error_type = "conflict"
    default_message = "Conflict"


class StoreUnavailable(AppError):
    status_code = 500
    error_type = "store_unavailable"
    default_message = "Session store unavailable"
