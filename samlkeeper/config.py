from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_CREDENTIALS_FILE,
    DEFAULT_PROFILE,
    DEFAULT_READ_TIMEOUT,
    SESSION_EXPIRATION_DELTA,
)


class SamlKeeperConfig(BaseModel):
    # Shared credentials file updated with the temporary credentials
    credentials_file: str = DEFAULT_CREDENTIALS_FILE
    profile: str = DEFAULT_PROFILE
    # Role to assume; when unset every role in the assertion is offered
    role_arn: Optional[str] = None
    # Custom session duration in seconds, clamped to the role's maximum
    session_duration: Optional[int] = Field(default=None, gt=0)
    # Seconds subtracted from the stored expiration when checking validity
    session_expiration_delta: int = Field(default=SESSION_EXPIRATION_DELTA, ge=0)
    region: Optional[str] = None
    connect_timeout: int = Field(default=DEFAULT_CONNECT_TIMEOUT, gt=0)
    read_timeout: int = Field(default=DEFAULT_READ_TIMEOUT, gt=0)

    @property
    def credentials_path(self) -> Path:
        return Path(self.credentials_file).expanduser()
