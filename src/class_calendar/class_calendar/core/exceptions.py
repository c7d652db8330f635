class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable machine-readable ``kind`` and the HTTP
    status the API layer answers with.
    """

    kind = "domain_error"
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"
    status_code = 400


class AuthenticationError(DomainError):
    """Raised when a credential is missing, invalid or expired."""

    kind = "unauthenticated"
    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "forbidden"
    status_code = 403


class NotFoundError(DomainError):
    """Raised when an entity is absent or not owned by the caller."""

    kind = "not_found"
    status_code = 404


class ConflictError(DomainError):
    """Raised on an invalid state transition (e.g. re-approving)."""

    kind = "conflict"
    status_code = 409


class NotifierError(DomainError):
    """Raised when an email could not be delivered."""

    kind = "notifier_error"
    status_code = 502


class StoreError(DomainError):
    """Raised when the database rejects or fails an operation."""

    kind = "store_error"
    status_code = 500
