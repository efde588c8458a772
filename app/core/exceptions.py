class IdentityEngineException(Exception):
    """Base exception for the identity assignment engine"""

    pass


class UnauthorizedException(IdentityEngineException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(IdentityEngineException):
    """Raised when a user, group or role is absent in the expected scope"""

    pass


class ValidationException(IdentityEngineException):
    """Raised for business logic validation errors"""

    pass


class IncompleteContextException(ValidationException):
    """Raised in strict mode when only one of account id / account name is supplied"""

    pass


class ValidationFailedException(IdentityEngineException):
    """
    Raised when a non-empty group request resolves to no valid group at all.

    Carries the warnings collected during validation so the caller can
    explain why every reference was rejected.
    """

    def __init__(self, message: str, warnings: list | None = None):
        super().__init__(message)
        self.warnings = list(warnings or [])


class ConflictException(IdentityEngineException):
    """Raised when a write is based on a stale version or breaks a uniqueness rule"""

    pass


class StorageException(IdentityEngineException):
    """Raised when the underlying entity store fails"""

    pass
