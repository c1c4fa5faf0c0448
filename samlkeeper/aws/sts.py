"""
AWS STS federation calls.
"""

from boto3.session import Session
from botocore.config import Config
from mypy_boto3_sts.client import STSClient
from mypy_boto3_sts.type_defs import AssumeRoleWithSAMLResponseTypeDef, CredentialsTypeDef

from .sessions import identity_service_errors


def assume_role_with_saml(
    duration_seconds: int,
    principal_arn: str,
    role_arn: str,
    saml_assertion: str,
    session: Session,
    client_config: Config
) -> CredentialsTypeDef:
    """
    Exchange a SAML assertion for temporary credentials.

    Args:
        duration_seconds: Requested session duration
        principal_arn: ARN of the IAM SAML provider
        role_arn: ARN of the role to assume
        saml_assertion: Base64 encoded SAML assertion
        session: boto3 Session used to create the STS client
        client_config: botocore client configuration (timeouts, retries)

    Returns:
        The Credentials block of the STS response

    Raises:
        IdentityServiceError: If STS rejects the exchange (expired assertion, access denied, ...)
        IdentityServiceTimeoutError: If the call times out
    """
    sts: STSClient = session.client("sts", config=client_config)
    with identity_service_errors("AssumeRoleWithSAML"):
        resp: AssumeRoleWithSAMLResponseTypeDef = sts.assume_role_with_saml(
            DurationSeconds=duration_seconds,
            PrincipalArn=principal_arn,
            RoleArn=role_arn,
            SAMLAssertion=saml_assertion,
        )
    return resp["Credentials"]
