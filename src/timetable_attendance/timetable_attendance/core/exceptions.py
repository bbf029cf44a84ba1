class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidAssignment(ValidationError):
    """Raised when a timetable slot assignment breaks a teacher/subject rule."""


class NotConfigured(DomainError):
    """Raised when a period number is missing from the period definition table."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class InvalidTransition(DomainError):
    """Raised when a session operation is called from the wrong phase."""


class RemoteFailure(DomainError):
    """Raised when a collaborator call (database or remote API) fails.

    Never retried here; re-invoking the same operation is safe because every
    mutating call is an upsert.
    """
