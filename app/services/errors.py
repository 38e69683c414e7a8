class ServiceError(Exception):
    """Base error carrying the HTTP status and the user-facing message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InputError(ServiceError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(ServiceError):
    status_code = 401
    default_message = "Invalid token"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class UpstreamError(ServiceError):
    status_code = 502
    default_message = "Upstream service error"


class StorageError(ServiceError):
    status_code = 500
    default_message = "Storage error"
