"""Domain errors raised by services and mapped to HTTP responses by the API."""


class SmartCalError(Exception):
    """Base class for expected, user-facing failures."""


class ValidationFailedError(SmartCalError):
    """Input is missing or out of range."""


class AuthenticationError(SmartCalError):
    """Credentials or bearer token are missing or invalid."""


class PermissionDeniedError(SmartCalError):
    """The authenticated user may not perform the action."""


class NotFoundError(SmartCalError):
    """The record does not exist or is not owned by the caller."""


class ConflictError(SmartCalError):
    """The record collides with an existing one."""
