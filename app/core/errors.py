"""Error taxonomy shared by services and the HTTP layer.

Every error carries a user-facing ``message``; the exception handlers in
``app.main`` decide the status code and never add more detail than that.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BookingValidationError(AppError):
    """User-correctable input problem. Only the first violated rule is reported."""
    status_code = 422


class RemoteCallError(AppError):
    """Supabase call failed (network, authorization or query error). Detail stays in the logs."""
    status_code = 502


class AuthenticationRequired(AppError):
    status_code = 401
    default_message = "Please sign in to continue."


class StaleSessionError(AppError):
    """A session change superseded the session a fetch was started under."""
    status_code = 401
    default_message = "Your session has changed. Please sign in again."


class AdminAccessDenied(AppError):
    status_code = 403
    default_message = "Access denied. Admin privileges required."


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found."


class InvalidStatusTransitionError(AppError):
    status_code = 409

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change booking status from '{current}' to '{requested}'.")
