"""Error hierarchy for mdgate.

Error layers:
- MDGateError: Base class for all mdgate errors
- DomainError: Authentication, validation and business rule failures
- InfrastructureError: System-level failures like storage/network issues

Every error is turned into a rendered page by the presenter installed in app.py.
"""


class MDGateError(Exception):
    """Base class for all mdgate errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors
# =============================================================================


class DomainError(MDGateError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None, code: str | None = None) -> None:
        super().__init__(message, code=code or "VALIDATION_ERROR")
        self.field = field


# -- session ------------------------------------------------------------------


class AuthenticationError(DomainError):
    """Caller could not be identified."""


class MissingSessionError(AuthenticationError):
    """No session cookie on the request."""


class MalformedSessionError(AuthenticationError):
    """Session cookie present but not a valid session token."""


class ExpiredSessionError(AuthenticationError):
    """Signed session cookie older than the configured max age."""


# -- credentials --------------------------------------------------------------


class CredentialError(DomainError):
    """Credentials could not be obtained."""


class ConfigLoadError(CredentialError):
    """Realm configuration could not be loaded."""


class CacheLoadError(CredentialError):
    """Ticket cache could not be loaded."""


class LoginError(CredentialError):
    """Login handshake with the ticket service failed."""


class EmptyCredentialError(CredentialError):
    """Login reported success but produced no credentials."""


# -- records ------------------------------------------------------------------


class SchemaViolationError(ValidationError):
    """Record keys do not satisfy the attribute schema."""

    def __init__(self, message: str, keys: list[str], matched: list[str]) -> None:
        super().__init__(message, code=self.__class__.__name__)
        self.keys = keys
        self.matched = matched


class MissingMandatoryAttrsError(SchemaViolationError):
    """Record is missing at least one mandatory attribute."""


class MissingAdjustableAttrsError(SchemaViolationError):
    """Record is missing at least one adjustable attribute."""


class TypeMismatchError(ValidationError):
    """Record attribute is absent or not of the expected type."""

    def __init__(self, message: str, field: str) -> None:
        super().__init__(message, field=field, code="TypeMismatchError")


class NoFilesFoundError(NotFoundError):
    """Record path resolved to no files."""


# =============================================================================
# Infrastructure Errors
# =============================================================================


class InfrastructureError(MDGateError):
    """Base class for infrastructure/system errors."""


class StorageUnavailableError(InfrastructureError):
    """File catalogue or metadata store is unavailable or rejected a write."""


class TempFileError(InfrastructureError):
    """Temporary ticket file could not be created or written."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
