"""Tests for samlkeeper.main orchestration."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from samlkeeper.config import SamlKeeperConfig
from samlkeeper.errors import (
    CredentialFileWriteError,
    IdentityServiceError,
    IdentityServiceTimeoutError,
)
from samlkeeper.main import build_exchanger, login, run_login
from samlkeeper.profile_store import save_credentials
from samlkeeper.types import Role, RoleSet, SessionCredentials

ROLE_A = Role("arn:role/A", "arn:idp/X")
ROLE_B = Role("arn:role/B", "arn:idp/X")
NEW_CREDENTIALS = SessionCredentials(
    "ASIANEW", "secret", "token", datetime.now(timezone.utc) + timedelta(hours=1)
)


@pytest.fixture
def config(tmp_path: Path) -> SamlKeeperConfig:
    return SamlKeeperConfig(credentials_file=str(tmp_path / "credentials"), profile="work")


@pytest.fixture
def parser() -> MagicMock:
    mock_parser = MagicMock()
    mock_parser.parse.return_value = RoleSet((ROLE_A, ROLE_B), "PHNhbWw+")
    return mock_parser


@pytest.fixture
def exchanger() -> MagicMock:
    mock_exchanger = MagicMock()
    mock_exchanger.assume_role_with_saml.return_value = NEW_CREDENTIALS
    return mock_exchanger


class TestLogin:
    """Test login function."""

    def test_valid_session_skips_exchange(
        self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock
    ) -> None:
        save_credentials(
            config.credentials_path,
            "work",
            SessionCredentials("ASIA", "s", "t", datetime.now(timezone.utc) + timedelta(hours=1)),
        )

        assert login(config, parser, "response", exchanger=exchanger) is None
        parser.parse.assert_not_called()
        exchanger.assume_role_with_saml.assert_not_called()

    def test_force_exchanges_despite_valid_session(
        self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock
    ) -> None:
        save_credentials(
            config.credentials_path,
            "work",
            SessionCredentials("ASIA", "s", "t", datetime.now(timezone.utc) + timedelta(hours=1)),
        )
        config = config.model_copy(update={"role_arn": "arn:role/A"})

        assert login(config, parser, "response", exchanger=exchanger, force=True) is NEW_CREDENTIALS

    def test_exchanges_configured_role(
        self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock
    ) -> None:
        config = config.model_copy(update={"role_arn": "arn:role/B", "session_duration": 7200})

        result = login(config, parser, "response", exchanger=exchanger)

        assert result is NEW_CREDENTIALS
        parser.parse.assert_called_once_with("response", "arn:role/B")
        exchanger.assume_role_with_saml.assert_called_once_with(
            "PHNhbWw+", config.credentials_path, "work", ROLE_B, 7200
        )

    def test_expired_session_triggers_exchange(
        self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock
    ) -> None:
        save_credentials(
            config.credentials_path,
            "work",
            SessionCredentials("ASIA", "s", "t", datetime.now(timezone.utc) + timedelta(seconds=10)),
        )

        result = login(config, parser, "response", choose_role=lambda roles: roles[0], exchanger=exchanger)

        assert result is NEW_CREDENTIALS
        assert exchanger.assume_role_with_saml.call_args[0][3] == ROLE_A

    def test_builds_exchanger_from_config(self, config: SamlKeeperConfig, parser: MagicMock) -> None:
        config = config.model_copy(update={"role_arn": "arn:role/A"})
        with patch("samlkeeper.main.build_exchanger") as mock_build:
            login(config, parser, "response")
        mock_build.assert_called_once_with(config)
        mock_build.return_value.assume_role_with_saml.assert_called_once()


class TestBuildExchanger:
    """Test build_exchanger function."""

    def test_uses_region_and_timeouts(self) -> None:
        config = SamlKeeperConfig(region="eu-west-1", connect_timeout=2, read_timeout=4)
        with patch("samlkeeper.main.get_session") as mock_get_session:
            exchanger = build_exchanger(config)

        mock_get_session.assert_called_once_with("eu-west-1")
        assert exchanger.session is mock_get_session.return_value
        assert exchanger.client_config.connect_timeout == 2
        assert exchanger.client_config.read_timeout == 4


class TestRunLogin:
    """Test run_login error reporting."""

    def test_success(self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock) -> None:
        config = config.model_copy(update={"role_arn": "arn:role/A"})
        with patch("samlkeeper.main.OutputHandler") as mock_output:
            assert run_login(config, parser, "response", exchanger=exchanger) == 0
        mock_output.success.assert_called_once()
        assert "work" in mock_output.success.call_args[0][0]

    def test_still_valid(self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock) -> None:
        save_credentials(
            config.credentials_path,
            "work",
            SessionCredentials("ASIA", "s", "t", datetime.now(timezone.utc) + timedelta(hours=1)),
        )
        with patch("samlkeeper.main.OutputHandler") as mock_output:
            assert run_login(config, parser, "response", exchanger=exchanger) == 0
        mock_output.success.assert_called_once_with("Credentials for profile 'work' are still valid")

    def test_role_not_found_lists_roles(
        self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock
    ) -> None:
        config = config.model_copy(update={"role_arn": "arn:role/C"})
        with patch("samlkeeper.main.OutputHandler") as mock_output:
            assert run_login(config, parser, "response", exchanger=exchanger) == 1
        assert mock_output.error.call_args[0][0] == "Role Not Found"
        mock_output.roles.assert_called_once_with("Available roles", (ROLE_A, ROLE_B))
        exchanger.assume_role_with_saml.assert_not_called()

    def test_ambiguous_roles(self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock) -> None:
        with patch("samlkeeper.main.OutputHandler") as mock_output:
            assert run_login(config, parser, "response", exchanger=exchanger) == 1
        assert mock_output.error.call_args[0][0] == "Role Selection Required"
        mock_output.roles.assert_called_once_with("Set role_arn to one of", (ROLE_A, ROLE_B))

    def test_identity_service_error(
        self,
        config: SamlKeeperConfig,
        parser: MagicMock,
        exchanger: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        config = config.model_copy(update={"role_arn": "arn:role/A"})
        exchanger.assume_role_with_saml.side_effect = IdentityServiceError(
            "AssumeRoleWithSAML", "ExpiredTokenException"
        )
        with patch("samlkeeper.main.OutputHandler") as mock_output:
            assert run_login(config, parser, "response", exchanger=exchanger) == 1
        assert mock_output.error.call_args[0][0] == "AWS API Error (ExpiredTokenException)"
        assert "Your SAML assertion may have expired, please authenticate again." in capsys.readouterr().out

    def test_identity_service_timeout(
        self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock
    ) -> None:
        config = config.model_copy(update={"role_arn": "arn:role/A"})
        exchanger.assume_role_with_saml.side_effect = IdentityServiceTimeoutError("AssumeRoleWithSAML")
        with patch("samlkeeper.main.OutputHandler") as mock_output:
            assert run_login(config, parser, "response", exchanger=exchanger) == 1
        assert mock_output.error.call_args[0][0] == "AWS Request Timed Out"

    def test_credentials_file_error(
        self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock
    ) -> None:
        config = config.model_copy(update={"role_arn": "arn:role/A"})
        exchanger.assume_role_with_saml.side_effect = CredentialFileWriteError("creds")
        with patch("samlkeeper.main.OutputHandler") as mock_output:
            assert run_login(config, parser, "response", exchanger=exchanger) == 1
        assert mock_output.error.call_args[0][0] == "Credentials File Error"

    def test_corrupt_credentials_file(
        self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock
    ) -> None:
        config.credentials_path.write_text(
            "[work]\naws_access_key_id = A\naws_secret_access_key = s\naws_session_expiration = ???\n"
        )
        with patch("samlkeeper.main.OutputHandler") as mock_output:
            assert run_login(config, parser, "response", exchanger=exchanger) == 1
        assert mock_output.error.call_args[0][0] == "Credentials File Error"
        parser.parse.assert_not_called()

    def test_undecodable_credentials_file(
        self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock
    ) -> None:
        config.credentials_path.write_bytes(b"[work]\naws_access_key_id = \xff\xfe\n")
        with patch("samlkeeper.main.OutputHandler") as mock_output:
            assert run_login(config, parser, "response", exchanger=exchanger) == 1
        assert mock_output.error.call_args[0][0] == "Credentials File Error"
        exchanger.assume_role_with_saml.assert_not_called()

    def test_profile_missing_keys_is_repaired_by_exchange(
        self, config: SamlKeeperConfig, parser: MagicMock, exchanger: MagicMock
    ) -> None:
        expiration = datetime.now(timezone.utc) + timedelta(hours=1)
        config.credentials_path.write_text(
            f"[work]\naws_session_expiration = {expiration.isoformat()}\n"
        )
        config = config.model_copy(update={"role_arn": "arn:role/A"})
        with patch("samlkeeper.main.OutputHandler"):
            assert run_login(config, parser, "response", exchanger=exchanger) == 0
        exchanger.assume_role_with_saml.assert_called_once()
