"""AWS session and client configuration utilities."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from boto3.session import Session
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from ..constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT
from ..errors import IdentityServiceError, IdentityServiceTimeoutError

logger = logging.getLogger(__name__)


def build_client_config(
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: int = DEFAULT_READ_TIMEOUT
) -> Config:
    """
    Build the botocore client configuration for IAM and STS calls.

    Retries are disabled: a rejected SAML assertion never succeeds on a second
    attempt, and network retry policy belongs to the caller.

    Args:
        connect_timeout: Seconds to wait for a connection
        read_timeout: Seconds to wait for a response

    Returns:
        botocore Config with timeouts set and a single attempt per call
    """
    return Config(
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )


def get_session(region: Optional[str] = None) -> Session:
    """
    Return a boto3 session for the identity service calls.

    AssumeRoleWithSAML is an unsigned call, so no base credentials are needed
    for STS; IAM GetRole uses whatever the default credential chain provides.
    """
    if region:
        return Session(region_name=region)
    return Session()


@contextmanager
def identity_service_errors(operation: str) -> Iterator[None]:
    """
    Translate botocore failures raised inside the block into samlkeeper errors.

    Args:
        operation: AWS operation name, reported on the raised error

    Raises:
        IdentityServiceTimeoutError: If the call timed out connecting or reading
        IdentityServiceError: For any other AWS service or transport failure
    """
    try:
        yield
    except (ConnectTimeoutError, ReadTimeoutError) as e:
        logger.error("%s timed out: %s", operation, e)
        raise IdentityServiceTimeoutError(operation, message=f"{operation} timed out: {e}") from e
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        logger.error("%s failed with %s: %s", operation, error_code, e)
        raise IdentityServiceError(operation, error_code, f"{operation} failed ({error_code}): {e}") from e
    except BotoCoreError as e:
        logger.error("%s failed: %s", operation, e)
        raise IdentityServiceError(operation, message=f"{operation} failed: {e}") from e
