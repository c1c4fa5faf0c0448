"""
Exception hierarchy for samlkeeper.

Every failure raised by this package derives from SamlKeeperError so callers
can map whole families of errors to a single user-facing message.
"""

from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .types import Role


class SamlKeeperError(Exception):
    """Base class for all samlkeeper errors."""


class RoleNotFoundError(SamlKeeperError):
    """
    Raised when the requested role ARN is not part of the SAML assertion.

    Attributes:
        requested_role_arn: Role ARN the caller asked for (None if no role was available at all)
        roles: Every role the assertion offered, for caller-side disambiguation
    """

    def __init__(self, requested_role_arn: Optional[str], roles: Sequence["Role"]) -> None:
        self.requested_role_arn = requested_role_arn
        self.roles = tuple(roles)
        if requested_role_arn is None:
            message = "The SAML assertion does not grant any role"
        else:
            message = (
                f"Role {requested_role_arn} not found in SAML assertion. "
                f"Available roles: {', '.join(role.role_arn for role in self.roles) or 'none'}"
            )
        super().__init__(message)


class AmbiguousRoleError(SamlKeeperError):
    """Raised when several roles are available and nothing chose between them."""

    def __init__(self, roles: Sequence["Role"]) -> None:
        self.roles = tuple(roles)
        super().__init__(
            f"{len(self.roles)} roles available, a role ARN must be selected: "
            f"{', '.join(role.role_arn for role in self.roles)}"
        )


class CredentialFileReadError(SamlKeeperError):
    """Raised when the credentials file exists but cannot be read or parsed."""

    def __init__(self, path: str, message: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message or f"Unable to read credentials file {path}")


class MalformedProfileError(CredentialFileReadError):
    """Raised when a persisted profile lacks mandatory keys."""

    def __init__(self, path: str, profile: str, missing: Sequence[str]) -> None:
        self.profile = profile
        self.missing = tuple(missing)
        super().__init__(
            path,
            f"Profile '{profile}' in {path} is missing required keys: {', '.join(self.missing)}"
        )


class CorruptCredentialsError(CredentialFileReadError):
    """Raised when a persisted session expiration is not a valid ISO-8601 timestamp."""

    def __init__(self, path: str, profile: str, value: str) -> None:
        self.profile = profile
        self.value = value
        super().__init__(
            path,
            f"Profile '{profile}' in {path} has an unparsable session expiration: {value!r}"
        )


class CredentialFileWriteError(SamlKeeperError):
    """Raised when the credentials file or its directory cannot be written."""

    def __init__(self, path: str, message: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message or f"Unable to write credentials file {path}")


class IdentityServiceError(SamlKeeperError):
    """
    Raised when an IAM or STS call fails.

    Attributes:
        operation: AWS operation name (e.g., 'AssumeRoleWithSAML')
        error_code: AWS error code when the service returned one (e.g., 'ExpiredTokenException')
    """

    def __init__(self, operation: str, error_code: Optional[str] = None, message: Optional[str] = None) -> None:
        self.operation = operation
        self.error_code = error_code
        detail = f" ({error_code})" if error_code else ""
        super().__init__(message or f"{operation} failed{detail}")


class IdentityServiceTimeoutError(IdentityServiceError):
    """Raised when an IAM or STS call times out before a response arrives."""
