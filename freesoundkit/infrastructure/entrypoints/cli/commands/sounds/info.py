from typing import Any

from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_credential_manager
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_freesound_client
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_freesound_session_factory


async def info_logic(sound_id: int) -> dict[str, Any]:
    async with get_freesound_client() as freesound_client:
        credential_manager = get_credential_manager(freesound_client)
        session = get_freesound_session_factory(credential_manager, freesound_client).create()
        return await session.get_sound(sound_id)
