from collections.abc import Iterable
from pathlib import Path
from typing import Final
from unittest import mock

import pytest
from typer.testing import CliRunner

from freesoundkit.application.services.credentials import CredentialManager
from freesoundkit.domain.entities.freesound import AuthorizationState
from freesoundkit.domain.entities.freesound import FreesoundTokenPayload
from freesoundkit.domain.exceptions import ApiError
from freesoundkit.domain.exceptions import AuthorizationFailed
from freesoundkit.domain.exceptions import ConfigurationError
from freesoundkit.domain.exceptions import RefreshFailed
from freesoundkit.domain.exceptions import Unauthenticated
from freesoundkit.infrastructure.entrypoints.cli.commands.auth.connect import connect_logic
from freesoundkit.infrastructure.entrypoints.cli.commands.auth.status import AuthStatus
from freesoundkit.infrastructure.entrypoints.cli.commands.auth.status import status_logic
from freesoundkit.infrastructure.entrypoints.cli.commands.auth.tokens import logout_logic
from freesoundkit.infrastructure.entrypoints.cli.commands.auth.tokens import refresh_logic
from freesoundkit.infrastructure.entrypoints.cli.main import app

from tests.unit.conftest import InMemoryCredentialStore
from tests.unit.infrastructure.entrypoints.cli.conftest import TextCleaner


class TestAuthConnectCommand:
    @pytest.fixture(autouse=True)
    def mock_connect_logic(self) -> Iterable[mock.AsyncMock]:
        target_path = "freesoundkit.infrastructure.entrypoints.cli.commands.auth.connect_logic"
        with mock.patch(target_path, new_callable=mock.AsyncMock) as patched:
            yield patched

    def test__nominal(
        self,
        mock_connect_logic: mock.AsyncMock,
        runner: CliRunner,
        clean_typer_text: TextCleaner,
    ) -> None:
        result = runner.invoke(app, ["auth", "connect"])
        assert result.exit_code == 0

        output = clean_typer_text(result.stdout)
        assert "Authorization successful!" in output

        mock_connect_logic.assert_awaited_once_with(logout_first=False, open_browser=True)

    def test__options(self, mock_connect_logic: mock.AsyncMock, runner: CliRunner) -> None:
        result = runner.invoke(app, ["auth", "connect", "--logout-first", "--no-browser"])
        assert result.exit_code == 0

        mock_connect_logic.assert_awaited_once_with(logout_first=True, open_browser=False)

    def test__authorization_failed(
        self,
        mock_connect_logic: mock.AsyncMock,
        runner: CliRunner,
        clean_typer_text: TextCleaner,
    ) -> None:
        mock_connect_logic.side_effect = AuthorizationFailed("Authorization code must not be empty.")

        result = runner.invoke(app, ["auth", "connect"])
        assert result.exit_code == 1

        output = clean_typer_text(result.stderr)
        assert "Authorization failed: Authorization code must not be empty." in output

    def test__not_configured(
        self,
        mock_connect_logic: mock.AsyncMock,
        runner: CliRunner,
        clean_typer_text: TextCleaner,
    ) -> None:
        mock_connect_logic.side_effect = ConfigurationError("Freesound client ID and client secret must not be empty.")

        result = runner.invoke(app, ["auth", "connect"])
        assert result.exit_code == 1

        output = clean_typer_text(result.stderr)
        assert "Set FREESOUND_CLIENT_ID and FREESOUND_CLIENT_SECRET" in output

    def test__exception(
        self,
        mock_connect_logic: mock.AsyncMock,
        runner: CliRunner,
        clean_typer_text: TextCleaner,
    ) -> None:
        mock_connect_logic.side_effect = Exception("Boom")

        result = runner.invoke(app, ["auth", "connect"])
        assert result.exit_code == 1

        output = clean_typer_text(result.stderr)
        assert "Error: Boom" in output


class TestAuthRefreshCommand:
    @pytest.fixture(autouse=True)
    def mock_refresh_logic(self) -> Iterable[mock.AsyncMock]:
        target_path = "freesoundkit.infrastructure.entrypoints.cli.commands.auth.refresh_logic"
        with mock.patch(target_path, new_callable=mock.AsyncMock) as patched:
            yield patched

    def test__nominal(self, runner: CliRunner, clean_typer_text: TextCleaner) -> None:
        result = runner.invoke(app, ["auth", "refresh"])
        assert result.exit_code == 0

        assert "Access token refreshed!" in clean_typer_text(result.stdout)

    @pytest.mark.parametrize(
        "exception",
        [
            pytest.param(Unauthenticated("No refresh token available."), id="unauthenticated"),
            pytest.param(RefreshFailed("Refresh token rejected."), id="refresh_failed"),
        ],
    )
    def test__authorization_required(
        self,
        mock_refresh_logic: mock.AsyncMock,
        runner: CliRunner,
        clean_typer_text: TextCleaner,
        exception: Exception,
    ) -> None:
        mock_refresh_logic.side_effect = exception

        result = runner.invoke(app, ["auth", "refresh"])
        assert result.exit_code == 1

        output = clean_typer_text(result.stderr)
        assert f"{exception} Run 'freesoundkit auth connect'." in output

    def test__transient_failure(
        self,
        mock_refresh_logic: mock.AsyncMock,
        runner: CliRunner,
        clean_typer_text: TextCleaner,
    ) -> None:
        mock_refresh_logic.side_effect = ApiError(503, "Service Unavailable")

        result = runner.invoke(app, ["auth", "refresh"])
        assert result.exit_code == 1

        assert "Error: Freesound API error 503: Service Unavailable" in clean_typer_text(result.stderr)


class TestAuthLogoutCommand:
    @pytest.fixture(autouse=True)
    def mock_logout_logic(self) -> Iterable[mock.AsyncMock]:
        target_path = "freesoundkit.infrastructure.entrypoints.cli.commands.auth.logout_logic"
        with mock.patch(target_path, new_callable=mock.AsyncMock) as patched:
            yield patched

    def test__nominal(self, mock_logout_logic: mock.AsyncMock, runner: CliRunner) -> None:
        result = runner.invoke(app, ["auth", "logout"])
        assert result.exit_code == 0
        assert "Logged out." in result.stdout

        mock_logout_logic.assert_awaited_once_with()

    def test__exception(
        self,
        mock_logout_logic: mock.AsyncMock,
        runner: CliRunner,
        clean_typer_text: TextCleaner,
    ) -> None:
        mock_logout_logic.side_effect = OSError("Read-only file system")

        result = runner.invoke(app, ["auth", "logout"])
        assert result.exit_code == 1
        assert "Error: Read-only file system" in clean_typer_text(result.stderr)


class TestAuthStatusCommand:
    @pytest.fixture(autouse=True)
    def mock_status_logic(self) -> Iterable[mock.AsyncMock]:
        target_path = "freesoundkit.infrastructure.entrypoints.cli.commands.auth.status_logic"
        with mock.patch(target_path, new_callable=mock.AsyncMock) as patched:
            patched.return_value = AuthStatus(
                is_configured=True,
                state=AuthorizationState.AUTHORIZED,
                has_refresh_token=True,
                credentials_path=Path("/tmp/credentials.json"),
            )
            yield patched

    def test__nominal(self, runner: CliRunner, clean_typer_text: TextCleaner) -> None:
        result = runner.invoke(app, ["auth", "status"])
        assert result.exit_code == 0

        output = clean_typer_text(result.stdout)
        assert "Freesound Authorization" in output
        assert "Client configured yes" in output
        assert "State authorized" in output
        assert "Refresh token yes" in output


class TestAuthLogic:
    TARGET_PATH: Final[str] = "freesoundkit.infrastructure.entrypoints.cli.commands.auth.connect"

    @pytest.fixture(autouse=True)
    def mock_typer(self) -> Iterable[tuple[mock.Mock, mock.Mock]]:
        with (
            mock.patch(f"{self.TARGET_PATH}.typer.launch") as launch,
            mock.patch(f"{self.TARGET_PATH}.typer.prompt", return_value="dummy-code") as prompt,
        ):
            yield launch, prompt

    @pytest.mark.usefixtures("patch_cli_dependencies")
    @pytest.mark.parametrize("open_browser", [True, False])
    async def test__connect(
        self,
        mock_typer: tuple[mock.Mock, mock.Mock],
        mock_freesound_client: mock.AsyncMock,
        token_payload: FreesoundTokenPayload,
        open_browser: bool,
    ) -> None:
        launch, prompt = mock_typer

        credentials = await connect_logic(logout_first=True, open_browser=open_browser)

        assert credentials.access_token == token_payload.access_token
        mock_freesound_client.exchange_code_for_token.assert_awaited_once_with(mock.ANY, "dummy-code")
        prompt.assert_called_once()
        if open_browser:
            launch.assert_called_once()
            assert "client_id=dummy-client-id" in launch.call_args.args[0]
        else:
            launch.assert_not_called()


class TestAuthTokensLogic:
    TARGET_PATH: Final[str] = "freesoundkit.infrastructure.entrypoints.cli.commands.auth.tokens"

    @pytest.mark.usefixtures("patch_cli_dependencies")
    async def test__refresh(
        self,
        mock_freesound_client: mock.AsyncMock,
        token_payload: FreesoundTokenPayload,
    ) -> None:
        credentials = await refresh_logic()

        assert credentials.access_token == token_payload.access_token
        mock_freesound_client.refresh_access_token.assert_awaited_once()

    @pytest.mark.usefixtures("patch_cli_dependencies")
    async def test__logout(
        self,
        credential_manager: CredentialManager,
        credential_store: InMemoryCredentialStore,
    ) -> None:
        await logout_logic()

        assert credential_manager.state == AuthorizationState.UNAUTHENTICATED
        assert credential_store.data["is_authorized"] is False


class TestAuthStatusLogic:
    TARGET_PATH: Final[str] = "freesoundkit.infrastructure.entrypoints.cli.commands.auth.status"

    @pytest.mark.usefixtures("patch_cli_dependencies")
    async def test__status(self) -> None:
        auth_status = await status_logic()

        assert auth_status.state == AuthorizationState.AUTHORIZED
        assert auth_status.has_refresh_token is True
