"""Service-layer errors. Each carries a human-readable message; the API layer maps them to HTTP status codes."""


class ServiceError(Exception):
    """Base for errors raised by the yard services."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when a referenced unit, vehicle, user or movement does not exist."""


class ConflictError(ServiceError):
    """Raised when a unique value (username, plate, unit code) is already taken."""


class BusinessRuleError(ServiceError):
    """Raised when an operation violates a yard rule (e.g. exit of a vehicle that is already out)."""


class AuthenticationError(ServiceError):
    """Raised when credentials are invalid or the account is inactive."""


class PermissionDeniedError(ServiceError):
    """Raised when a user is not allowed to perform an operation."""
