from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from freesoundkit.application.services.credentials import CredentialManager
from freesoundkit.application.services.freesound import FreesoundSessionFactory
from freesoundkit.domain.ports.clients.freesound import FreesoundClientPort
from freesoundkit.domain.ports.storage.credentials import CredentialStorePort
from freesoundkit.infrastructure.adapters.clients.freesound import FreesoundClientAdapter
from freesoundkit.infrastructure.adapters.storage.json_file import JsonFileCredentialStore
from freesoundkit.infrastructure.config.settings.freesound import freesound_settings


@asynccontextmanager
async def get_freesound_client() -> AsyncGenerator[FreesoundClientPort]:
    async with FreesoundClientAdapter(
        base_url=freesound_settings.BASE_URL,
        timeout=freesound_settings.HTTP_TIMEOUT,
    ) as client:
        yield client


def get_credential_store() -> CredentialStorePort:
    return JsonFileCredentialStore(freesound_settings.CREDENTIALS_PATH)


def get_credential_manager(freesound_client: FreesoundClientPort, configure: bool = True) -> CredentialManager:
    credential_manager = CredentialManager(
        credential_store=get_credential_store(),
        freesound_client=freesound_client,
        authorization_state=freesound_settings.AUTHORIZATION_STATE,
    )
    if configure:
        credential_manager.configure(
            client_id=freesound_settings.CLIENT_ID,
            client_secret=freesound_settings.CLIENT_SECRET,
        )

    return credential_manager


def get_freesound_session_factory(
    credential_manager: CredentialManager,
    freesound_client: FreesoundClientPort,
) -> FreesoundSessionFactory:
    return FreesoundSessionFactory(
        credential_manager=credential_manager,
        freesound_client=freesound_client,
    )
