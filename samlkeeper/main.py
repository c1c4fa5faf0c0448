from typing import Optional
import logging

from .config import SamlKeeperConfig
from .errors import (
    AmbiguousRoleError,
    CredentialFileReadError,
    CredentialFileWriteError,
    IdentityServiceError,
    IdentityServiceTimeoutError,
    RoleNotFoundError,
)
from .exchange import CredentialExchanger
from .output import OutputHandler
from .parser import SamlAssertionParser
from .roles import RoleChooser, resolve_roles, select_role
from .types import SessionCredentials
from .validity import check_session_validity
from .aws.sessions import get_session

logger = logging.getLogger(__name__)


def build_exchanger(config: SamlKeeperConfig) -> CredentialExchanger:
    """Create a CredentialExchanger using the region and timeouts from config."""
    return CredentialExchanger(
        session=get_session(config.region),
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
    )


def login(
    config: SamlKeeperConfig,
    assertion_parser: SamlAssertionParser,
    saml_response: str,
    choose_role: Optional[RoleChooser] = None,
    exchanger: Optional[CredentialExchanger] = None,
    force: bool = False
) -> Optional[SessionCredentials]:
    """
    Make sure the configured profile holds usable temporary credentials.

    Stored credentials that are still valid are reused unless force is set.
    Otherwise the SAML response is parsed, the role resolved and exchanged,
    and the new credentials written to the profile.

    Args:
        config: Validated configuration
        assertion_parser: Parser turning the SAML response into a RoleSet
        saml_response: Raw SAML response from the identity provider
        choose_role: Callback used when several roles are available
        exchanger: CredentialExchanger to use (built from config if omitted)
        force: Exchange even if the stored session is still valid

    Returns:
        The new credentials, or None if the stored session was reused

    Raises:
        RoleNotFoundError: If the configured role is not granted by the assertion
        AmbiguousRoleError: If several roles are granted and none was chosen
        CredentialFileReadError: If the credentials file cannot be read
        CredentialFileWriteError: If the credentials cannot be written
        IdentityServiceError: If IAM or STS fail
    """
    if not force:
        validity = check_session_validity(
            config.credentials_path,
            config.profile,
            config.session_expiration_delta,
        )
        if validity.is_valid:
            logger.info(
                "Credentials for profile '%s' are valid until %s, skipping exchange",
                config.profile,
                validity.expires_at,
            )
            return None
        if validity.expires_at is not None:
            logger.info("Credentials for profile '%s' expired at %s", config.profile, validity.expires_at)

    role_set = assertion_parser.parse(saml_response, config.role_arn)
    resolved = resolve_roles(role_set, config.role_arn)
    role = select_role(resolved, choose_role)

    exchanger = exchanger or build_exchanger(config)
    return exchanger.assume_role_with_saml(
        resolved.saml_assertion,
        config.credentials_path,
        config.profile,
        role,
        config.session_duration,
    )


def run_login(
    config: SamlKeeperConfig,
    assertion_parser: SamlAssertionParser,
    saml_response: str,
    choose_role: Optional[RoleChooser] = None,
    exchanger: Optional[CredentialExchanger] = None,
    force: bool = False
) -> int:
    """
    Run login and report the outcome to the user.

    Returns:
        Process exit status: 0 on success, 1 on any failure
    """
    try:
        credentials = login(config, assertion_parser, saml_response, choose_role, exchanger, force)
    except RoleNotFoundError as e:
        OutputHandler.error("Role Not Found", e)
        if e.roles:
            OutputHandler.roles("Available roles", e.roles)
        return 1
    except AmbiguousRoleError as e:
        OutputHandler.error("Role Selection Required", e)
        OutputHandler.roles("Set role_arn to one of", e.roles)
        return 1
    except IdentityServiceTimeoutError as e:
        OutputHandler.error("AWS Request Timed Out", e)
        logger.error(f"Identity service timeout: {e}", exc_info=True)
        return 1
    except IdentityServiceError as e:
        OutputHandler.error(f"AWS API Error ({e.error_code or e.operation})", e)
        print("Your SAML assertion may have expired, please authenticate again.")
        logger.error(f"Identity service error: {e}", exc_info=True)
        return 1
    except (CredentialFileReadError, CredentialFileWriteError) as e:
        OutputHandler.error("Credentials File Error", e)
        logger.error(f"Credentials file error: {e}", exc_info=True)
        return 1

    if credentials is None:
        OutputHandler.success(f"Credentials for profile '{config.profile}' are still valid")
        return 0

    OutputHandler.success(
        f"Credentials saved to profile '{config.profile}'",
        {"credentials_file": str(config.credentials_path), "expires_at": credentials.expires_at},
    )
    return 0
