"""AWS integration library for samlkeeper."""

from .iam import get_role_max_session_duration
from .sessions import build_client_config, get_session, identity_service_errors
from .sts import assume_role_with_saml

__all__ = [
    "assume_role_with_saml",
    "build_client_config",
    "get_role_max_session_duration",
    "get_session",
    "identity_service_errors",
]
