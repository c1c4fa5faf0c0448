"""
Credentials file storage.

Reads and writes the INI-style AWS shared credentials file. A save never
erases unrelated profiles: the whole file is loaded, one section replaced and
the result written back. That read-merge-write runs under an exclusive
advisory lock and finishes with an atomic rename, so concurrent writers do not
lose each other's updates and readers never observe a partially written file.
"""

import configparser
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union, overload

from .constants import LOCK_FILE_SUFFIX
from .errors import CredentialFileReadError, CredentialFileWriteError
from .types import CredentialsMapping, Profile, ProfileSection, SessionCredentials

if os.name == "nt":
    import msvcrt
else:
    import fcntl

# Set up logging
logger = logging.getLogger(__name__)


def _new_parser() -> configparser.ConfigParser:
    # Session tokens may contain '%', key case must survive a rewrite and
    # hand-edited files may repeat a section or key (the last value wins)
    parser = configparser.ConfigParser(interpolation=None, default_section="\x00", strict=False)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


def _expand(path: Union[str, Path]) -> Path:
    return Path(path).expanduser()


def _read_mapping(path: Path) -> Optional[CredentialsMapping]:
    """
    Parse the credentials file into an ordered mapping of sections.

    Returns:
        Mapping of profile name to section, or None if the file does not exist

    Raises:
        CredentialFileReadError: If the file exists but cannot be read or parsed
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("Credentials file does not exist at %s", path)
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise CredentialFileReadError(str(path), f"Unable to read credentials file {path}: {e}") from e

    parser = _new_parser()
    try:
        parser.read_string(content, source=str(path))
    except configparser.Error as e:
        raise CredentialFileReadError(str(path), f"Unable to parse credentials file {path}: {e}") from e

    return {section: dict(parser.items(section)) for section in parser.sections()}


@overload
def load_credentials(path: Union[str, Path]) -> Optional[CredentialsMapping]: ...


@overload
def load_credentials(path: Union[str, Path], profile: str) -> Optional[ProfileSection]: ...


def load_credentials(
    path: Union[str, Path],
    profile: Optional[str] = None
) -> Union[CredentialsMapping, ProfileSection, None]:
    """
    Load credentials from an AWS shared credentials file.

    A missing file is not an error: it means no credentials were stored yet.

    Args:
        path: Path to the credentials file ('~' is expanded)
        profile: Profile (section) to return; if omitted the whole file is returned

    Returns:
        The profile's section, the full mapping when no profile is given,
        or None when the file or the profile does not exist

    Raises:
        CredentialFileReadError: On any read failure other than a missing file
    """
    mapping = _read_mapping(_expand(path))
    if mapping is None:
        return None
    if profile is None:
        return mapping
    return mapping.get(profile)


def load_profile(path: Union[str, Path], profile: str) -> Optional[Profile]:
    """
    Load and validate a single profile.

    Returns:
        Validated Profile, or None if the file or the profile does not exist

    Raises:
        CredentialFileReadError: If the file cannot be read
        MalformedProfileError: If the profile lacks its access key id or secret access key
        CorruptCredentialsError: If the stored expiration cannot be parsed
    """
    section = load_credentials(path, profile)
    if section is None:
        return None
    return Profile.from_section(str(path), profile, section)


@contextmanager
def _locked(path: Path) -> Iterator[None]:
    """Hold an exclusive advisory lock on the sidecar lock file of path."""
    lock_path = path.with_name(path.name + LOCK_FILE_SUFFIX)
    with open(lock_path, "a+") as lock_file:
        if os.name == "nt":
            # LK_LOCK locks the first byte, retrying for about ten seconds
            lock_file.seek(0)
            msvcrt.locking(lock_file.fileno(), msvcrt.LK_LOCK, 1)
            try:
                yield
            finally:
                lock_file.seek(0)
                msvcrt.locking(lock_file.fileno(), msvcrt.LK_UNLCK, 1)
            return

        fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)


def _write_atomically(path: Path, mapping: CredentialsMapping) -> None:
    """Serialize mapping to a temporary file beside path and rename it over path."""
    parser = _new_parser()
    parser.read_dict(mapping)

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            parser.write(f)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(temp_path, 0o600)
        os.replace(temp_path, path)
    except BaseException:
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
        raise


def save_credentials(
    path: Union[str, Path],
    profile: str,
    credentials: SessionCredentials,
    log: Optional[logging.Logger] = None
) -> None:
    """
    Save session credentials into a profile section of the credentials file.

    Other profiles in the file are preserved; only the target section is
    replaced. Missing parent directories are created. A symlinked path is
    written through to the file it points at.

    Args:
        path: Path to the credentials file ('~' is expanded)
        profile: Profile (section) name to write
        credentials: Temporary credentials to persist
        log: Logger for diagnostic events (defaults to the module logger)

    Raises:
        CredentialFileReadError: If the existing file cannot be read
        CredentialFileWriteError: If the directory or file cannot be written
    """
    log = log or logger
    # Follow a symlinked credentials file so the rename replaces its target, not the link
    target = _expand(path).resolve()

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CredentialFileWriteError(str(target), f"Unable to create directory {target.parent}: {e}") from e

    try:
        with _locked(target):
            mapping = _read_mapping(target) or {}
            mapping[profile] = credentials.to_profile_fields()
            _write_atomically(target, mapping)
    except OSError as e:
        raise CredentialFileWriteError(str(target), f"Unable to write credentials file {target}: {e}") from e

    log.debug(
        "The credentials have been stored in '%s' under AWS profile '%s' (profiles in file: %s)",
        target,
        profile,
        ", ".join(mapping),
    )
