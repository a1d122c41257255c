import re
from collections.abc import AsyncGenerator
from collections.abc import Callable
from collections.abc import Iterable
from contextlib import asynccontextmanager
from unittest import mock

import pytest
from typer.testing import CliRunner

from freesoundkit.application.services.credentials import CredentialManager
from freesoundkit.domain.ports.clients.freesound import FreesoundClientPort

type TextCleaner = Callable[[str], str]

ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
BOX_PATTERN = re.compile(r"[─-╿]")
WHITESPACE_PATTERN = re.compile(r"\s+")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def block_cli_configure_loggers() -> Iterable[mock.Mock]:
    target_path = "freesoundkit.infrastructure.entrypoints.cli.main.configure_loggers"
    with mock.patch(target_path) as patched:
        yield patched


@pytest.fixture
def clean_typer_text() -> TextCleaner:
    """Strip colors and rich panel borders, then collapse the wrapped lines."""

    def _clean(text: str) -> str:
        text = ANSI_PATTERN.sub("", text)
        text = BOX_PATTERN.sub(" ", text)
        return WHITESPACE_PATTERN.sub(" ", text).strip()

    return _clean


@pytest.fixture
def patch_cli_dependencies(
    request: pytest.FixtureRequest,
    mock_freesound_client: mock.AsyncMock,
    credential_manager: CredentialManager,
) -> Iterable[mock.AsyncMock]:
    """Point the ``*_logic`` functions of the test class TARGET_PATH module at the unit test doubles."""
    module_path = request.cls.TARGET_PATH

    @asynccontextmanager
    async def mock_dependency() -> AsyncGenerator[FreesoundClientPort]:
        yield mock_freesound_client

    with (
        mock.patch(f"{module_path}.get_freesound_client", side_effect=mock_dependency),
        mock.patch(f"{module_path}.get_credential_manager", return_value=credential_manager),
    ):
        yield mock_freesound_client
