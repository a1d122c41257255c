from freesoundkit.domain.entities.freesound import Credentials
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_credential_manager
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_freesound_client


async def refresh_logic() -> Credentials:
    async with get_freesound_client() as freesound_client:
        credential_manager = get_credential_manager(freesound_client)
        return await credential_manager.refresh()


async def logout_logic() -> None:
    async with get_freesound_client() as freesound_client:
        credential_manager = get_credential_manager(freesound_client)
        await credential_manager.logout()
