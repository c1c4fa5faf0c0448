"""
SAML-for-STS credential exchange.

Drives AssumeRoleWithSAML for a resolved role, applies the session duration
policy and persists the resulting temporary credentials to a profile.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from boto3.session import Session

from .aws.iam import get_role_max_session_duration
from .aws.sessions import build_client_config, get_session
from .aws.sts import assume_role_with_saml
from .constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT, DEFAULT_SESSION_DURATION
from .profile_store import save_credentials
from .types import Role, SessionCredentials
from .utils import to_utc

logger = logging.getLogger(__name__)


class CredentialExchanger:
    """
    Exchanges SAML assertions for temporary credentials and stores them.

    Failures from IAM, STS or the credentials file propagate unchanged; no
    call is retried. Repeated exchanges for the same profile overwrite it
    (last write wins).

    Usage:
        exchanger = CredentialExchanger()
        credentials = exchanger.assume_role_with_saml(
            saml_assertion,
            "~/.aws/credentials",
            "default",
            role,
            session_duration=7200,
        )
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        log: Optional[logging.Logger] = None,
        connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: int = DEFAULT_READ_TIMEOUT,
    ):
        """
        Args:
            session: boto3 Session for IAM/STS clients (defaults to a new Session)
            log: Logger for diagnostic and warning events (defaults to the module logger)
            connect_timeout: Seconds to wait for IAM/STS connections
            read_timeout: Seconds to wait for IAM/STS responses
        """
        self.session = session or get_session()
        self.logger = log or logger
        self.client_config = build_client_config(connect_timeout, read_timeout)

    def resolve_session_duration(self, role: Role, requested_duration: Optional[int] = None) -> int:
        """
        Apply the session duration policy for a role.

        Without a requested duration the role's own default is trusted and IAM
        is not queried. A requested duration is clamped to the role's
        MaxSessionDuration, with a warning rather than an error.

        Args:
            role: Role about to be assumed
            requested_duration: Custom duration in seconds, if any

        Returns:
            Duration in seconds to request from STS

        Raises:
            IdentityServiceError: If the role's maximum cannot be looked up
        """
        if requested_duration is None:
            return role.session_duration or DEFAULT_SESSION_DURATION

        max_duration = get_role_max_session_duration(role.name, self.session, self.client_config)
        if requested_duration > max_duration:
            self.logger.warning(
                "Custom session duration %d exceeds maximum session duration of %d allowed for role. "
                "Please set session_duration: %d or $AWS_SESSION_DURATION=%d to suppress this warning",
                requested_duration,
                max_duration,
                max_duration,
                max_duration,
            )
            return max_duration

        return requested_duration

    def assume_role_with_saml(
        self,
        saml_assertion: str,
        credentials_file: Union[str, Path],
        profile: str,
        role: Role,
        session_duration: Optional[int] = None
    ) -> SessionCredentials:
        """
        Assume a role with a SAML assertion and save the credentials to a profile.

        Args:
            saml_assertion: Base64 encoded SAML assertion
            credentials_file: Path of the credentials file to update
            profile: Profile name to write
            role: Role to assume
            session_duration: Custom session duration in seconds, if any

        Returns:
            The temporary credentials that were persisted

        Raises:
            IdentityServiceError: If IAM or STS fail (IdentityServiceTimeoutError on timeouts)
            CredentialFileReadError: If the existing credentials file cannot be read
            CredentialFileWriteError: If the credentials cannot be written
        """
        duration = self.resolve_session_duration(role, session_duration)

        creds = assume_role_with_saml(
            duration,
            role.principal_arn,
            role.role_arn,
            saml_assertion,
            self.session,
            self.client_config,
        )
        credentials = SessionCredentials(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
            expires_at=to_utc(creds["Expiration"]),
        )
        self.logger.debug(
            "Role ARN '%s' has been assumed for %d seconds, credentials expire at %s",
            role.role_arn,
            duration,
            credentials.expires_at.isoformat(),
        )

        save_credentials(credentials_file, profile, credentials, self.logger)
        return credentials
