from dataclasses import dataclass
from pathlib import Path

from freesoundkit.domain.entities.freesound import AuthorizationState
from freesoundkit.infrastructure.config.settings.freesound import freesound_settings
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_credential_manager
from freesoundkit.infrastructure.entrypoints.cli.dependencies import get_freesound_client


@dataclass(frozen=True, kw_only=True)
class AuthStatus:
    is_configured: bool
    state: AuthorizationState
    has_refresh_token: bool
    credentials_path: Path


async def status_logic() -> AuthStatus:
    async with get_freesound_client() as freesound_client:
        # Read only: no client identity needed to inspect the stored credentials.
        credential_manager = get_credential_manager(freesound_client, configure=False)

        return AuthStatus(
            is_configured=bool(freesound_settings.CLIENT_ID and freesound_settings.CLIENT_SECRET),
            state=credential_manager.state,
            has_refresh_token=credential_manager.credentials.refresh_token is not None,
            credentials_path=freesound_settings.CREDENTIALS_PATH,
        )
