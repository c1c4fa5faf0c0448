"""
Constants shared across samlkeeper.

Key names follow the AWS shared credentials file format so other tools
(AWS CLI, SDKs) can read the profiles written here.
"""

# Safety buffer (seconds) subtracted from the stored expiration so requests
# issued in the final seconds of a session are not rejected
SESSION_EXPIRATION_DELTA = 30

# STS AssumeRoleWithSAML default when the assertion carries no SessionDuration
DEFAULT_SESSION_DURATION = 3600

DEFAULT_CREDENTIALS_FILE = "~/.aws/credentials"
DEFAULT_PROFILE = "default"

# Network timeouts (seconds) for IAM/STS calls
DEFAULT_CONNECT_TIMEOUT = 10
DEFAULT_READ_TIMEOUT = 30

# Persisted profile keys
AWS_ACCESS_KEY_ID = "aws_access_key_id"
AWS_SECRET_ACCESS_KEY = "aws_secret_access_key"
AWS_SESSION_EXPIRATION = "aws_session_expiration"
AWS_SESSION_TOKEN = "aws_session_token"

REQUIRED_PROFILE_KEYS = (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)

# Suffix of the advisory lock file guarding read-merge-write of the credentials file
LOCK_FILE_SUFFIX = ".lock"
