"""
AWS IAM lookups used by the credential exchange.
"""

import logging

from boto3.session import Session
from botocore.config import Config
from mypy_boto3_iam.client import IAMClient
from mypy_boto3_iam.type_defs import GetRoleResponseTypeDef

from .sessions import identity_service_errors

logger = logging.getLogger(__name__)


def get_role_max_session_duration(role_name: str, session: Session, client_config: Config) -> int:
    """
    Return the maximum session duration configured on an IAM role.

    Args:
        role_name: Role name (not ARN)
        session: boto3 Session used to create the IAM client
        client_config: botocore client configuration (timeouts, retries)

    Returns:
        MaxSessionDuration of the role, in seconds

    Raises:
        IdentityServiceError: If GetRole fails
        IdentityServiceTimeoutError: If GetRole times out
    """
    iam_client: IAMClient = session.client("iam", config=client_config)
    with identity_service_errors("GetRole"):
        response: GetRoleResponseTypeDef = iam_client.get_role(RoleName=role_name)

    max_duration = response["Role"]["MaxSessionDuration"]
    logger.debug("Role %s allows sessions of up to %d seconds", role_name, max_duration)
    return max_duration
