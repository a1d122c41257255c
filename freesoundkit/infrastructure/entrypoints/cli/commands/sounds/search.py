from contextlib import aclosing
from typing import Any
from typing import Final

from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_credential_manager
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_freesound_client
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_freesound_session_factory

SEARCH_FIELDS: Final[list[str]] = ["id", "name", "username", "license", "tags"]


async def search_logic(
    query: str,
    filter: str | None,
    sort: str | None,
    page_size: int,
    limit: int,
) -> list[dict[str, Any]]:
    sounds: list[dict[str, Any]] = []

    async with get_freesound_client() as freesound_client:
        credential_manager = get_credential_manager(freesound_client)
        session = get_freesound_session_factory(credential_manager, freesound_client).create()

        query_pages = session.search(query, filter=filter, sort=sort, fields=SEARCH_FIELDS, page_size=page_size)
        async with aclosing(query_pages.items()) as items:
            async for sound in items:
                sounds.append(sound)
                if len(sounds) >= limit:
                    break

    return sounds
