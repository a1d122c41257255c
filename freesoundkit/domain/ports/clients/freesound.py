from abc import ABC
from abc import abstractmethod
from pathlib import Path
from typing import Any

from pydantic import HttpUrl

from freesoundkit.domain.entities.freesound import ClientIdentity
from freesoundkit.domain.entities.freesound import FreesoundTokenPayload
from freesoundkit.domain.entities.freesound import RequestSpec


class FreesoundClientPort(ABC):
    """Port interface for the Freesound API transport."""

    @property
    @abstractmethod
    def base_url(self) -> HttpUrl: ...

    @abstractmethod
    def get_authorization_url(self, client_id: str, state: str, logout_first: bool = False) -> HttpUrl:
        """Generate OAuth authorization URL."""
        ...

    @abstractmethod
    async def exchange_code_for_token(self, identity: ClientIdentity, code: str) -> FreesoundTokenPayload:
        """Exchange authorization code for an access/refresh token pair."""
        ...

    @abstractmethod
    async def refresh_access_token(self, identity: ClientIdentity, refresh_token: str) -> FreesoundTokenPayload:
        """Exchange a refresh token for a new access/refresh token pair."""
        ...

    @abstractmethod
    async def make_api_call(self, spec: RequestSpec, auth_header: str) -> Any:
        """
        Perform one authenticated API call and decode its JSON body.

        Args:
            spec: The request to perform
            auth_header: The value of the Authorization header

        Returns:
            The decoded JSON value ({} on a 204)

        Raises:
            TransportError: on network failure or timeout
            Unauthorized: on a 401
            ApiError: on any other non-2xx status
        """
        ...

    @abstractmethod
    async def download(
        self,
        url: str,
        destination: Path,
        auth_header: str | None = None,
        timeout: float | None = None,
    ) -> Path:
        """Stream a remote binary resource into destination and return its final location."""
        ...

    @abstractmethod
    async def upload(self, spec: RequestSpec, auth_header: str, source: Path) -> Any:
        """Stream a local file to the endpoint as multipart and decode the JSON confirmation."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the client and cleanup resources."""
        ...
