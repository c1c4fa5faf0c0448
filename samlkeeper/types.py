"""
Shared data types for samlkeeper.

All records are immutable. Roles and role sets live for a single SAML
response, session credentials until they are persisted, and profiles are the
typed view of a section of the credentials file.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Mapping, Optional, Tuple

from .constants import (
    AWS_ACCESS_KEY_ID,
    AWS_SECRET_ACCESS_KEY,
    AWS_SESSION_EXPIRATION,
    AWS_SESSION_TOKEN,
    REQUIRED_PROFILE_KEYS,
)
from .errors import CorruptCredentialsError, MalformedProfileError
from .utils import format_expiration, parse_expiration, to_utc

ProfileSection = Dict[str, str]
"""Raw key/value pairs of one credentials file section."""

CredentialsMapping = Dict[str, ProfileSection]
"""Every section of a credentials file, keyed by profile name."""


@dataclass(frozen=True)
class Role:
    """
    A role granted by a SAML assertion.

    Attributes:
        role_arn: ARN of the IAM role to assume
        principal_arn: ARN of the IAM SAML provider
        session_duration: SessionDuration attribute of the assertion, if any
    """
    role_arn: str
    principal_arn: str
    session_duration: Optional[int] = None

    @property
    def name(self) -> str:
        """Role name as expected by IAM GetRole (last path segment of the ARN)."""
        return self.role_arn.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class RoleSet:
    """Roles extracted from one SAML response, plus the raw base64 assertion."""
    roles: Tuple[Role, ...]
    saml_assertion: str

    def role_arns(self) -> Tuple[str, ...]:
        return tuple(role.role_arn for role in self.roles)


@dataclass(frozen=True)
class SessionCredentials:
    """Temporary credentials returned by STS AssumeRoleWithSAML."""
    access_key_id: str
    secret_access_key: str
    session_token: str
    expires_at: datetime

    def to_profile_fields(self) -> ProfileSection:
        """
        Build the four persisted keys of a profile section.

        Returns:
            Mapping with access key, secret key, ISO-8601 expiration and session token
        """
        return {
            AWS_ACCESS_KEY_ID: self.access_key_id,
            AWS_SECRET_ACCESS_KEY: self.secret_access_key,
            AWS_SESSION_EXPIRATION: format_expiration(self.expires_at),
            AWS_SESSION_TOKEN: self.session_token,
        }


@dataclass(frozen=True)
class Profile:
    """
    Validated view of a credentials file section.

    Profiles written by other tools may hold long-term keys, so the session
    token and expiration are optional.
    """
    name: str
    access_key_id: str
    secret_access_key: str
    session_token: Optional[str] = None
    session_expiration: Optional[datetime] = None

    @classmethod
    def from_section(cls, path: str, name: str, section: Mapping[str, str]) -> "Profile":
        """
        Build a Profile from a raw section, rejecting malformed entries.

        Args:
            path: Credentials file the section was read from (for error reporting)
            name: Profile (section) name
            section: Raw key/value pairs of the section

        Returns:
            Validated Profile

        Raises:
            MalformedProfileError: If access key id or secret access key is missing or empty
            CorruptCredentialsError: If the session expiration is not an ISO-8601 timestamp
        """
        missing = [key for key in REQUIRED_PROFILE_KEYS if not section.get(key)]
        if missing:
            raise MalformedProfileError(path, name, missing)

        expiration: Optional[datetime] = None
        raw_expiration = section.get(AWS_SESSION_EXPIRATION)
        if raw_expiration:
            try:
                expiration = parse_expiration(raw_expiration)
            except ValueError as e:
                raise CorruptCredentialsError(path, name, raw_expiration) from e

        return cls(
            name=name,
            access_key_id=section[AWS_ACCESS_KEY_ID],
            secret_access_key=section[AWS_SECRET_ACCESS_KEY],
            session_token=section.get(AWS_SESSION_TOKEN) or None,
            session_expiration=expiration,
        )


@dataclass(frozen=True)
class ValidityResult:
    """
    Outcome of a session validity check.

    expires_at is the stored expiration minus the safety delta, reported even
    when the session is no longer valid.
    """
    is_valid: bool
    expires_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.expires_at is not None:
            object.__setattr__(self, "expires_at", to_utc(self.expires_at))
