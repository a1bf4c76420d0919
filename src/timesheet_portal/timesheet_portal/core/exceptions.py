class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""


class EntryLockedError(DomainError):
    """Raised when a submitted time entry would be mutated."""


class AuthenticationError(DomainError):
    """Raised when no usable credentials were presented."""

    status_code = 401


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token is malformed, expired or forged."""


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class DuplicateUsernameError(DomainError):
    status_code = 409
