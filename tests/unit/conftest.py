from collections.abc import Mapping
from typing import Any
from unittest import mock

import pytest

from pydantic import HttpUrl

from freesoundkit.application.services.credentials import KEY_ACCESS_TOKEN
from freesoundkit.application.services.credentials import KEY_AUTHORIZED
from freesoundkit.application.services.credentials import KEY_REFRESH_TOKEN
from freesoundkit.application.services.credentials import CredentialManager
from freesoundkit.domain.entities.freesound import Credentials
from freesoundkit.domain.entities.freesound import FreesoundTokenPayload
from freesoundkit.domain.ports.clients.freesound import FreesoundClientPort
from freesoundkit.domain.ports.storage.credentials import CredentialStorePort

from tests.unit.factories.freesound import CredentialsFactory
from tests.unit.factories.freesound import FreesoundTokenPayloadFactory

BASE_URL = "https://freesound.test/apiv2"


class InMemoryCredentialStore(CredentialStorePort):
    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.writes: int = 0

    def get(self, key: str) -> Any | None:
        return self.data.get(key)

    def set(self, key: str, value: Any | None) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, Any | None]) -> None:
        self.writes += 1
        self.data.update(values)


# --- Entity Mocks ---


@pytest.fixture
def credentials(request: pytest.FixtureRequest) -> Credentials:
    return CredentialsFactory.build(**getattr(request, "param", {}))


@pytest.fixture
def token_payload(request: pytest.FixtureRequest) -> FreesoundTokenPayload:
    return FreesoundTokenPayloadFactory.build(**getattr(request, "param", {}))


# --- Storage Mocks ---


@pytest.fixture
def credential_store(credentials: Credentials) -> InMemoryCredentialStore:
    return InMemoryCredentialStore(
        {
            KEY_ACCESS_TOKEN: credentials.access_token,
            KEY_REFRESH_TOKEN: credentials.refresh_token,
            KEY_AUTHORIZED: credentials.authorized,
        }
    )


# --- Client Mocks ---


@pytest.fixture
def mock_freesound_client(token_payload: FreesoundTokenPayload) -> mock.AsyncMock:
    freesound_client = mock.AsyncMock(
        spec=FreesoundClientPort,
        exchange_code_for_token=mock.AsyncMock(return_value=token_payload),
        refresh_access_token=mock.AsyncMock(return_value=token_payload),
    )
    freesound_client.base_url = HttpUrl(BASE_URL)
    freesound_client.get_authorization_url = mock.Mock(
        side_effect=lambda client_id, state, logout_first=False: HttpUrl(
            f"{BASE_URL}/oauth2/authorize/?client_id={client_id}&response_type=code&state={state}"
        )
    )
    return freesound_client


# --- Service Mocks ---


@pytest.fixture
def credential_manager(
    credential_store: InMemoryCredentialStore,
    mock_freesound_client: mock.AsyncMock,
) -> CredentialManager:
    credential_manager = CredentialManager(
        credential_store=credential_store,
        freesound_client=mock_freesound_client,
    )
    credential_manager.configure(client_id="dummy-client-id", client_secret="dummy-client-secret")
    return credential_manager
