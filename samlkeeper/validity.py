"""
Session validity evaluation for stored credentials.
"""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Union

from .constants import AWS_SESSION_EXPIRATION, REQUIRED_PROFILE_KEYS, SESSION_EXPIRATION_DELTA
from .errors import CorruptCredentialsError
from .profile_store import load_credentials
from .types import ValidityResult
from .utils import parse_expiration, to_utc

logger = logging.getLogger(__name__)


def check_session_validity(
    path: Union[str, Path],
    profile: str,
    safety_delta_seconds: int = SESSION_EXPIRATION_DELTA,
    now: Optional[datetime] = None,
    log: Optional[logging.Logger] = None
) -> ValidityResult:
    """
    Decide whether a stored profile's session credentials are still usable.

    The safety delta is subtracted from the stored expiration so requests do
    not fail at the exact instant of expiry. A session is valid only while the
    adjusted expiration is strictly in the future.

    Args:
        path: Credentials file path
        profile: Profile name to evaluate
        safety_delta_seconds: Seconds subtracted from the stored expiration
        now: Reference time (defaults to the current UTC time)
        log: Logger for diagnostic events (defaults to the module logger)

    Returns:
        ValidityResult with the adjusted expiration, or no expiration when the
        profile or its expiration field is absent. Sections lacking access
        keys are reported invalid.

    Raises:
        CredentialFileReadError: If the file cannot be read
        CorruptCredentialsError: If the stored expiration cannot be parsed
    """
    log = log or logger
    log.debug("Attempting to retrieve session expiration for profile '%s'", profile)

    section = load_credentials(path, profile)
    if section is None:
        return ValidityResult(is_valid=False, expires_at=None)

    if not section.get(AWS_SESSION_EXPIRATION):
        log.debug("Session expiration date not found for profile '%s'", profile)
        return ValidityResult(is_valid=False, expires_at=None)

    raw_expiration = section[AWS_SESSION_EXPIRATION]
    try:
        expiration = parse_expiration(raw_expiration)
    except ValueError as e:
        raise CorruptCredentialsError(str(path), profile, raw_expiration) from e
    adjusted = expiration - timedelta(seconds=safety_delta_seconds)

    # A section without access keys is reported expired; the next save rewrites it
    missing = [key for key in REQUIRED_PROFILE_KEYS if not section.get(key)]
    if missing:
        log.warning(
            "Profile '%s' is missing %s, treating its session as expired",
            profile,
            ", ".join(missing),
        )
        return ValidityResult(is_valid=False, expires_at=adjusted)

    reference = to_utc(now) if now is not None else datetime.now(timezone.utc)

    if adjusted > reference:
        log.debug(
            "Session is expected to be valid until %s minus expiration delta of %d seconds",
            section[AWS_SESSION_EXPIRATION],
            safety_delta_seconds,
        )
        return ValidityResult(is_valid=True, expires_at=adjusted)

    log.debug("Session has expired on %s", section[AWS_SESSION_EXPIRATION])
    return ValidityResult(is_valid=False, expires_at=adjusted)
