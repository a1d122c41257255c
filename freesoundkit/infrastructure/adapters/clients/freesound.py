import logging
import os
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import Any
from typing import Final
from urllib.parse import urlencode

import httpx
from httpx import codes

from pydantic import HttpUrl
from pydantic import ValidationError

from freesoundkit.domain.entities.endpoints import FreesoundRoute
from freesoundkit.domain.entities.freesound import ClientIdentity
from freesoundkit.domain.entities.freesound import FreesoundTokenPayload
from freesoundkit.domain.entities.freesound import RequestSpec
from freesoundkit.domain.exceptions import ApiError
from freesoundkit.domain.exceptions import ResponseValidationError
from freesoundkit.domain.exceptions import TransferError
from freesoundkit.domain.exceptions import TransportError
from freesoundkit.domain.exceptions import Unauthorized
from freesoundkit.domain.ports.clients.freesound import FreesoundClientPort

logger = logging.getLogger(__name__)

DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return

    body = _response_body(response)
    if response.status_code == codes.UNAUTHORIZED:
        raise Unauthorized(response.status_code, body)
    raise ApiError(response.status_code, body)


def _decode_json(response: httpx.Response) -> Any:
    if response.status_code == codes.NO_CONTENT or not response.content:
        return {}

    try:
        return response.json()
    except ValueError as e:
        raise ResponseValidationError(f"Invalid JSON body from {response.request.url}: {e}") from e


class FreesoundClientAdapter(FreesoundClientPort):
    """Async Freesound API v2 client: OAuth2 token grants and bearer-authenticated calls."""

    BASE_URL: Final[HttpUrl] = HttpUrl("https://freesound.org/apiv2")

    def __init__(
        self,
        base_url: HttpUrl | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._base_url = base_url or self.BASE_URL

        self._client: httpx.AsyncClient = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
        )

    @property
    def base_url(self) -> HttpUrl:
        return self._base_url

    @property
    def token_endpoint(self) -> str:
        return FreesoundRoute.ACCESS_TOKEN.resolve(base_url=str(self.base_url))

    def build_url(self, spec: RequestSpec) -> str:
        return spec.url(str(self.base_url))

    def get_authorization_url(self, client_id: str, state: str, logout_first: bool = False) -> HttpUrl:
        route = FreesoundRoute.LOGOUT_AUTHORIZE if logout_first else FreesoundRoute.AUTHORIZE
        params = {
            "client_id": client_id,
            "response_type": "code",
            "state": state,
        }

        return HttpUrl(f"{route.resolve(base_url=str(self.base_url))}?{urlencode(params)}")

    async def exchange_code_for_token(self, identity: ClientIdentity, code: str) -> FreesoundTokenPayload:
        return await self._request_token(
            identity,
            {
                "grant_type": "authorization_code",
                "code": code,
            },
        )

    async def refresh_access_token(self, identity: ClientIdentity, refresh_token: str) -> FreesoundTokenPayload:
        return await self._request_token(
            identity,
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            },
        )

    async def _request_token(self, identity: ClientIdentity, grant: dict[str, str]) -> FreesoundTokenPayload:
        try:
            response = await self._client.post(
                self.token_endpoint,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                data={
                    "client_id": identity.client_id,
                    "client_secret": identity.client_secret,
                    **grant,
                },
            )
        except httpx.RequestError as e:
            raise TransportError(f"Token request failed: {e!r}") from e

        _raise_for_status(response)

        try:
            return FreesoundTokenPayload.model_validate(_decode_json(response))
        except ValidationError as e:
            raise ResponseValidationError(f"Malformed token response: {e}") from e

    async def make_api_call(self, spec: RequestSpec, auth_header: str) -> Any:
        url = self.build_url(spec)
        params = spec.present_params()

        logger.debug(f"{spec.method} {url}")
        try:
            response = await self._client.request(
                method=spec.method,
                url=url,
                headers={"Authorization": auth_header},
                params=params if spec.method == "GET" else None,
                data=params if spec.method == "POST" else None,
                timeout=self._timeout(spec.timeout),
            )
        except httpx.RequestError as e:
            raise TransportError(f"{spec.method} {url} failed: {e!r}") from e

        _raise_for_status(response)
        return _decode_json(response)

    async def download(
        self,
        url: str,
        destination: Path,
        auth_header: str | None = None,
        timeout: float | None = None,
    ) -> Path:
        destination = Path(destination)
        headers = {"Authorization": auth_header} if auth_header else {}

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}.", suffix=".part", dir=destination.parent)
        except OSError as e:
            raise TransferError(f"Cannot write into {destination.parent}: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                async with self._client.stream("GET", url, headers=headers, timeout=self._timeout(timeout)) as response:
                    if not response.is_success:
                        await response.aread()
                        _raise_for_status(response)

                    async for chunk in response.aiter_bytes(DOWNLOAD_CHUNK_SIZE):
                        fh.write(chunk)

            # Overwrite any previous file at the destination.
            os.replace(tmp_path, destination)
        except httpx.RequestError as e:
            raise TransportError(f"Download of {url} failed: {e!r}") from e
        except OSError as e:
            raise TransferError(f"Cannot write {destination}: {e}") from e
        finally:
            # Partial file left behind on error or cancellation.
            with suppress(FileNotFoundError):
                tmp_path.unlink()

        logger.info(f"Downloaded {url} to {destination}")
        return destination

    async def upload(self, spec: RequestSpec, auth_header: str, source: Path) -> Any:
        url = self.build_url(spec)
        source = Path(source)

        try:
            fh = source.open("rb")
        except OSError as e:
            raise TransferError(f"Cannot read {source}: {e}") from e

        with fh:
            try:
                response = await self._client.post(
                    url,
                    headers={"Authorization": auth_header},
                    data={key: str(value) for key, value in spec.present_params().items()},
                    files={"audiofile": (source.name, fh)},
                    timeout=self._timeout(spec.timeout),
                )
            except httpx.RequestError as e:
                raise TransportError(f"Upload of {source} to {url} failed: {e!r}") from e

        _raise_for_status(response)
        return _decode_json(response)

    def _timeout(self, timeout: float | None) -> float | httpx.Timeout:
        return timeout if timeout is not None else self._client.timeout

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "FreesoundClientAdapter":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
