from pathlib import Path
from unittest import mock

import pytest

from freesoundkit.application.services.credentials import CredentialManager
from freesoundkit.application.services.dispatcher import RequestDispatcher
from freesoundkit.domain.entities.endpoints import FreesoundRoute
from freesoundkit.domain.entities.freesound import Credentials
from freesoundkit.domain.entities.freesound import RequestSpec
from freesoundkit.domain.exceptions import Unauthenticated

from tests.unit.conftest import BASE_URL


class TestRequestDispatcher:
    @pytest.fixture
    def dispatcher(
        self,
        credential_manager: CredentialManager,
        mock_freesound_client: mock.AsyncMock,
    ) -> RequestDispatcher:
        return RequestDispatcher(
            credential_manager=credential_manager,
            freesound_client=mock_freesound_client,
        )

    async def test__dispatch__nominal(
        self,
        dispatcher: RequestDispatcher,
        credentials: Credentials,
        mock_freesound_client: mock.AsyncMock,
    ) -> None:
        mock_freesound_client.make_api_call.return_value = {"id": 1}
        spec = RequestSpec(route=FreesoundRoute.SOUND, bindings={"sound_id": 1})

        response_data = await dispatcher.dispatch(spec)

        assert response_data == {"id": 1}
        mock_freesound_client.make_api_call.assert_awaited_once_with(spec, f"Bearer {credentials.access_token}")

    @pytest.mark.parametrize(
        "credentials",
        [{"access_token": None, "refresh_token": None, "authorized": False}],
        indirect=True,
    )
    async def test__unauthenticated__no_network(
        self,
        dispatcher: RequestDispatcher,
        mock_freesound_client: mock.AsyncMock,
        tmp_path: Path,
    ) -> None:
        spec = RequestSpec(route=FreesoundRoute.ME)

        with pytest.raises(Unauthenticated):
            await dispatcher.dispatch(spec)
        with pytest.raises(Unauthenticated):
            await dispatcher.download(spec, tmp_path / "file")
        with pytest.raises(Unauthenticated):
            await dispatcher.download("https://cdn.freesound.test/preview.mp3", tmp_path / "file", authenticated=False)
        with pytest.raises(Unauthenticated):
            await dispatcher.upload(RequestSpec(route=FreesoundRoute.UPLOAD, method="POST"), tmp_path / "file")

        mock_freesound_client.make_api_call.assert_not_called()
        mock_freesound_client.download.assert_not_called()
        mock_freesound_client.upload.assert_not_called()

    async def test__download__spec(
        self,
        dispatcher: RequestDispatcher,
        credentials: Credentials,
        mock_freesound_client: mock.AsyncMock,
        tmp_path: Path,
    ) -> None:
        destination = tmp_path / "sound.wav"
        mock_freesound_client.download.return_value = destination
        spec = RequestSpec(route=FreesoundRoute.DOWNLOAD, bindings={"sound_id": 42}, timeout=12.0)

        path = await dispatcher.download(spec, destination)

        assert path == destination
        mock_freesound_client.download.assert_awaited_once_with(
            f"{BASE_URL}/sounds/42/download/",
            destination,
            auth_header=f"Bearer {credentials.access_token}",
            timeout=12.0,
        )

    async def test__download__public_url(
        self,
        dispatcher: RequestDispatcher,
        mock_freesound_client: mock.AsyncMock,
        tmp_path: Path,
    ) -> None:
        destination = tmp_path / "preview.mp3"

        await dispatcher.download("https://cdn.freesound.test/preview.mp3", destination, authenticated=False)

        mock_freesound_client.download.assert_awaited_once_with(
            "https://cdn.freesound.test/preview.mp3",
            destination,
            auth_header=None,
            timeout=None,
        )

    async def test__upload(
        self,
        dispatcher: RequestDispatcher,
        credentials: Credentials,
        mock_freesound_client: mock.AsyncMock,
        tmp_path: Path,
    ) -> None:
        spec = RequestSpec(route=FreesoundRoute.UPLOAD, method="POST", params={"name": "Rain"})
        source = tmp_path / "rain.wav"

        await dispatcher.upload(spec, source)

        mock_freesound_client.upload.assert_awaited_once_with(spec, f"Bearer {credentials.access_token}", source)
