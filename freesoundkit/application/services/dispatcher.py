from pathlib import Path
from typing import Any

from freesoundkit.application.services.credentials import CredentialManager
from freesoundkit.domain.entities.freesound import RequestSpec
from freesoundkit.domain.exceptions import Unauthenticated
from freesoundkit.domain.ports.clients.freesound import FreesoundClientPort


class RequestDispatcher:
    """Attach the current bearer header to a request and hand it to the transport."""

    def __init__(
        self,
        credential_manager: CredentialManager,
        freesound_client: FreesoundClientPort,
    ) -> None:
        self.credential_manager = credential_manager
        self.freesound_client = freesound_client

    async def dispatch(self, spec: RequestSpec) -> Any:
        auth_header = self._require_auth_header()
        return await self.freesound_client.make_api_call(spec, auth_header)

    async def download(
        self,
        target: RequestSpec | str,
        destination: Path,
        authenticated: bool = True,
        timeout: float | None = None,
    ) -> Path:
        # Checked even for public URLs: no transfer happens without a session.
        auth_header = self._require_auth_header()

        if isinstance(target, RequestSpec):
            url = target.url(str(self.freesound_client.base_url))
            timeout = timeout if timeout is not None else target.timeout
        else:
            url = target

        return await self.freesound_client.download(
            url,
            destination,
            auth_header=auth_header if authenticated else None,
            timeout=timeout,
        )

    async def upload(self, spec: RequestSpec, source: Path) -> Any:
        auth_header = self._require_auth_header()
        return await self.freesound_client.upload(spec, auth_header, source)

    def _require_auth_header(self) -> str:
        auth_header = self.credential_manager.current_auth_header()
        if auth_header is None:
            raise Unauthenticated("Not authorized, run the authorization flow first.")
        return auth_header
