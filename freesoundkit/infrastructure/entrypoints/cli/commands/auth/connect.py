import typer

from pydantic import HttpUrl

from freesoundkit.application.use_cases.freesound_authorize import freesound_authorize
from freesoundkit.domain.entities.freesound import Credentials
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_credential_manager
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_freesound_client


async def connect_logic(logout_first: bool, open_browser: bool) -> Credentials:
    async def _request_code(authorization_url: HttpUrl) -> str:
        typer.echo(f"Authorize the application at: {authorization_url}")
        if open_browser:
            typer.launch(str(authorization_url))

        return typer.prompt("Paste the authorization code")

    async with get_freesound_client() as freesound_client:
        credential_manager = get_credential_manager(freesound_client)

        return await freesound_authorize(
            credential_manager=credential_manager,
            request_code=_request_code,
            logout_first=logout_first,
        )
