class ApiError(Exception):
    """Error carrying the HTTP status and message returned to the client."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code


class InvalidBodyError(ApiError):
    status_code = 400
    default_message = "Invalid body"


class UnauthorizedError(ApiError):
    status_code = 401
    default_message = "Unauthenticated"


class ForbiddenError(ApiError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ApiError):
    status_code = 409
    default_message = "Conflict"


class InvalidTransitionError(ConflictError):
    default_message = "Invalid status transition"

    def __init__(self, current, action):
        super().__init__(f"Cannot {action} a registration in status {current}")
        self.current = current
        self.action = action


class StorageError(Exception):
    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status
