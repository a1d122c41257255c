from pathlib import Path

from freesoundkit.domain.entities.freesound import PreviewQuality
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_credential_manager
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_freesound_client
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_freesound_session_factory


async def download_logic(sound_id: int, destination: Path) -> Path:
    async with get_freesound_client() as freesound_client:
        credential_manager = get_credential_manager(freesound_client)
        session = get_freesound_session_factory(credential_manager, freesound_client).create()
        return await session.download_sound(sound_id, destination)


async def preview_logic(sound_id: int, destination: Path, quality: PreviewQuality) -> Path:
    async with get_freesound_client() as freesound_client:
        credential_manager = get_credential_manager(freesound_client)
        session = get_freesound_session_factory(credential_manager, freesound_client).create()
        return await session.get_preview(sound_id, destination, quality=quality)
