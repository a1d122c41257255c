import logging
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import HttpUrl
from pydantic import ValidationError
from tenacity import AsyncRetrying
from tenacity import retry_if_exception_type
from tenacity import stop_after_attempt

from freesoundkit.application.services.credentials import CredentialManager
from freesoundkit.application.services.dispatcher import RequestDispatcher
from freesoundkit.application.services.pagination import PaginatedQuery
from freesoundkit.domain.entities.descriptors import Descriptor
from freesoundkit.domain.entities.endpoints import EndpointTemplate
from freesoundkit.domain.entities.endpoints import FreesoundRoute
from freesoundkit.domain.entities.endpoints import format_tags
from freesoundkit.domain.entities.freesound import FreesoundLicense
from freesoundkit.domain.entities.freesound import HttpMethod
from freesoundkit.domain.entities.freesound import PreviewQuality
from freesoundkit.domain.entities.freesound import RequestSpec
from freesoundkit.domain.exceptions import ResponseValidationError
from freesoundkit.domain.exceptions import Unauthorized
from freesoundkit.domain.ports.clients.freesound import FreesoundClientPort

logger = logging.getLogger(__name__)

type SoundTarget = int | str | Mapping[Descriptor | str, Any]

MIN_RATING = 0
MAX_RATING = 5


class FreesoundSessionFactory:
    """Wire a session onto the process-wide credential manager."""

    def __init__(
        self,
        credential_manager: CredentialManager,
        freesound_client: FreesoundClientPort,
    ) -> None:
        self.credential_manager = credential_manager
        self.freesound_client = freesound_client

    def create(self, request_timeout: float | None = None) -> "FreesoundSession":
        return FreesoundSession(
            credential_manager=self.credential_manager,
            dispatcher=RequestDispatcher(
                credential_manager=self.credential_manager,
                freesound_client=self.freesound_client,
            ),
            request_timeout=request_timeout,
        )


class FreesoundSession:
    """
    Typed operations of the Freesound API v2.

    Every request goes through the same executor: a request rejected with a 401
    triggers one token refresh on the shared credential manager, then is
    retried exactly once. List endpoints return a lazy ``PaginatedQuery``.
    """

    def __init__(
        self,
        credential_manager: CredentialManager,
        dispatcher: RequestDispatcher,
        request_timeout: float | None = None,
    ) -> None:
        self.credential_manager = credential_manager
        self.dispatcher = dispatcher
        self.request_timeout = request_timeout

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(
        self,
        query: str,
        filter: str | None = None,
        sort: str | None = None,
        fields: Iterable[str] | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PaginatedQuery:
        return self._paginate(
            FreesoundRoute.TEXT_SEARCH,
            params={
                "query": query,
                "filter": filter,
                "sort": sort,
                "fields": _join(fields),
            },
            page=page,
            page_size=page_size,
            prefix_log="[TextSearch]",
        )

    def content_search(
        self,
        target: SoundTarget,
        descriptors_filter: str | None = None,
        fields: Iterable[str] | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PaginatedQuery:
        return self._paginate(
            FreesoundRoute.CONTENT_SEARCH,
            params={
                "target": _format_target(target),
                "descriptors_filter": descriptors_filter,
                "fields": _join(fields),
            },
            page=page,
            page_size=page_size,
            prefix_log="[ContentSearch]",
        )

    def combined_search(
        self,
        query: str | None = None,
        filter: str | None = None,
        target: SoundTarget | None = None,
        descriptors_filter: str | None = None,
        sort: str | None = None,
        fields: Iterable[str] | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PaginatedQuery:
        return self._paginate(
            FreesoundRoute.COMBINED_SEARCH,
            params={
                "query": query,
                "filter": filter,
                "target": _format_target(target) if target is not None else None,
                "descriptors_filter": descriptors_filter,
                "sort": sort,
                "fields": _join(fields),
            },
            page=page,
            page_size=page_size,
            prefix_log="[CombinedSearch]",
        )

    # -------------------------------------------------------------------------
    # Sounds
    # -------------------------------------------------------------------------

    async def get_sound(self, sound_id: int | str, fields: Iterable[str] | None = None) -> dict[str, Any]:
        return await self._request(
            FreesoundRoute.SOUND,
            bindings={"sound_id": sound_id},
            params={"fields": _join(fields)},
        )

    async def get_analysis(
        self,
        sound_id: int | str,
        descriptors: Iterable[Descriptor | str] | None = None,
        normalized: bool = False,
    ) -> dict[str, Any]:
        return await self._request(
            FreesoundRoute.SOUND_ANALYSIS,
            bindings={"sound_id": sound_id},
            params={
                "descriptors": _join(descriptors),
                "normalized": 1 if normalized else None,
            },
        )

    def get_similar_sounds(
        self,
        sound_id: int | str,
        descriptors_filter: str | None = None,
        fields: Iterable[str] | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PaginatedQuery:
        return self._paginate(
            FreesoundRoute.SIMILAR_SOUNDS,
            bindings={"sound_id": sound_id},
            params={
                "descriptors_filter": descriptors_filter,
                "fields": _join(fields),
            },
            page=page,
            page_size=page_size,
            prefix_log=f"[SimilarSounds({sound_id})]",
        )

    def get_comments(
        self,
        sound_id: int | str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PaginatedQuery:
        return self._paginate(
            FreesoundRoute.COMMENTS,
            bindings={"sound_id": sound_id},
            page=page,
            page_size=page_size,
            prefix_log=f"[Comments({sound_id})]",
        )

    async def bookmark_sound(
        self,
        sound_id: int | str,
        name: str | None = None,
        category: str | None = None,
    ) -> dict[str, Any]:
        return await self._request(
            FreesoundRoute.BOOKMARK,
            method="POST",
            bindings={"sound_id": sound_id},
            params={"name": name, "category": category},
        )

    async def rate_sound(self, sound_id: int | str, rating: int) -> dict[str, Any]:
        return await self._request(
            FreesoundRoute.RATE,
            method="POST",
            bindings={"sound_id": sound_id},
            params={"rating": max(MIN_RATING, min(MAX_RATING, rating))},
        )

    async def comment_sound(self, sound_id: int | str, comment: str) -> dict[str, Any]:
        return await self._request(
            FreesoundRoute.COMMENT,
            method="POST",
            bindings={"sound_id": sound_id},
            params={"comment": comment},
        )

    async def get_preview_url(self, sound_id: int | str, quality: PreviewQuality = PreviewQuality.HIGH) -> HttpUrl:
        sound = await self.get_sound(sound_id, fields=["previews"])

        previews = sound.get("previews") if isinstance(sound, dict) else None
        try:
            return HttpUrl((previews or {})[quality.value])
        except (KeyError, TypeError, ValidationError) as e:
            raise ResponseValidationError(f"Sound {sound_id} has no usable {quality.value} preview") from e

    async def get_preview(
        self,
        sound_id: int | str,
        destination: Path,
        quality: PreviewQuality = PreviewQuality.HIGH,
    ) -> Path:
        url = await self.get_preview_url(sound_id, quality)

        # Previews live on a public CDN: the bearer token is not sent there.
        return await self._execute(
            lambda: self.dispatcher.download(
                str(url),
                destination,
                authenticated=False,
                timeout=self.request_timeout,
            )
        )

    async def download_sound(self, sound_id: int | str, destination: Path) -> Path:
        spec = self._spec(FreesoundRoute.DOWNLOAD, bindings={"sound_id": sound_id})
        return await self._execute(lambda: self.dispatcher.download(spec, destination))

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    async def upload_sound(
        self,
        source: Path,
        license: FreesoundLicense | None = None,
        name: str | None = None,
        description: str | None = None,
        tags: Iterable[str] | None = None,
        pack: str | None = None,
        geotag: str | None = None,
    ) -> dict[str, Any]:
        spec = self._spec(
            FreesoundRoute.UPLOAD,
            method="POST",
            params=_description_params(
                name=name,
                description=description,
                license=license,
                tags=tags,
                pack=pack,
                geotag=geotag,
            ),
        )
        return await self._execute(lambda: self.dispatcher.upload(spec, source))

    async def describe_sound(
        self,
        upload_filename: str,
        description: str,
        license: FreesoundLicense,
        tags: Iterable[str],
        name: str | None = None,
        pack: str | None = None,
        geotag: str | None = None,
    ) -> dict[str, Any]:
        return await self._request(
            FreesoundRoute.DESCRIBE,
            method="POST",
            params={
                "upload_filename": upload_filename,
                **_description_params(
                    name=name,
                    description=description,
                    license=license,
                    tags=tags,
                    pack=pack,
                    geotag=geotag,
                ),
            },
        )

    async def edit_sound_description(
        self,
        sound_id: int | str,
        name: str | None = None,
        description: str | None = None,
        license: FreesoundLicense | None = None,
        tags: Iterable[str] | None = None,
        pack: str | None = None,
        geotag: str | None = None,
    ) -> dict[str, Any]:
        return await self._request(
            FreesoundRoute.EDIT_DESCRIPTION,
            method="POST",
            bindings={"sound_id": sound_id},
            params=_description_params(
                name=name,
                description=description,
                license=license,
                tags=tags,
                pack=pack,
                geotag=geotag,
            ),
        )

    async def get_pending_uploads(self) -> dict[str, Any]:
        return await self._request(FreesoundRoute.PENDING_UPLOADS)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def get_me(self) -> dict[str, Any]:
        return await self._request(FreesoundRoute.ME)

    async def get_user(self, username: str) -> dict[str, Any]:
        return await self._request(FreesoundRoute.USER, bindings={"username": username})

    def get_user_sounds(
        self,
        username: str,
        fields: Iterable[str] | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PaginatedQuery:
        return self._paginate(
            FreesoundRoute.USER_SOUNDS,
            bindings={"username": username},
            params={"fields": _join(fields)},
            page=page,
            page_size=page_size,
            prefix_log=f"[UserSounds({username})]",
        )

    def get_user_packs(
        self,
        username: str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PaginatedQuery:
        return self._paginate(
            FreesoundRoute.USER_PACKS,
            bindings={"username": username},
            page=page,
            page_size=page_size,
            prefix_log=f"[UserPacks({username})]",
        )

    def get_user_bookmark_categories(
        self,
        username: str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PaginatedQuery:
        return self._paginate(
            FreesoundRoute.USER_BOOKMARK_CATEGORIES,
            bindings={"username": username},
            page=page,
            page_size=page_size,
            prefix_log=f"[BookmarkCategories({username})]",
        )

    def get_user_bookmark_category_sounds(
        self,
        username: str,
        category_id: int | str,
        fields: Iterable[str] | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PaginatedQuery:
        return self._paginate(
            FreesoundRoute.USER_BOOKMARK_CATEGORY_SOUNDS,
            bindings={"username": username, "bookmark_category_id": category_id},
            params={"fields": _join(fields)},
            page=page,
            page_size=page_size,
            prefix_log=f"[BookmarkCategorySounds({username}, {category_id})]",
        )

    # -------------------------------------------------------------------------
    # Packs
    # -------------------------------------------------------------------------

    async def get_pack(self, pack_id: int | str) -> dict[str, Any]:
        return await self._request(FreesoundRoute.PACK, bindings={"pack_id": pack_id})

    def get_pack_sounds(
        self,
        pack_id: int | str,
        fields: Iterable[str] | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> PaginatedQuery:
        return self._paginate(
            FreesoundRoute.PACK_SOUNDS,
            bindings={"pack_id": pack_id},
            params={"fields": _join(fields)},
            page=page,
            page_size=page_size,
            prefix_log=f"[PackSounds({pack_id})]",
        )

    async def download_pack(self, pack_id: int | str, destination: Path) -> Path:
        spec = self._spec(FreesoundRoute.PACK_DOWNLOAD, bindings={"pack_id": pack_id})
        return await self._execute(lambda: self.dispatcher.download(spec, destination))

    # -------------------------------------------------------------------------
    # Core Logic
    # -------------------------------------------------------------------------

    async def _execute[T](self, operation: Callable[[], Awaitable[T]]) -> T:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(Unauthorized),
            stop=stop_after_attempt(2),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.info("Access token rejected, refreshing before a single retry")
                    await self.credential_manager.refresh()

                result = await operation()

        return result

    async def _request(
        self,
        route: EndpointTemplate,
        method: HttpMethod = "GET",
        bindings: Mapping[str, str | int] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        spec = self._spec(route, method=method, bindings=bindings, params=params)
        return await self._fetch(spec)

    async def _fetch(self, spec: RequestSpec) -> Any:
        return await self._execute(lambda: self.dispatcher.dispatch(spec))

    def _paginate(
        self,
        route: EndpointTemplate,
        bindings: Mapping[str, str | int] | None = None,
        params: Mapping[str, Any] | None = None,
        page: int | None = None,
        page_size: int | None = None,
        prefix_log: str = "",
    ) -> PaginatedQuery:
        return PaginatedQuery(
            fetch=self._fetch,
            spec=self._spec(route, bindings=bindings, params=params),
            start_page=page,
            page_size=page_size,
            prefix_log=prefix_log,
        )

    def _spec(
        self,
        route: EndpointTemplate,
        method: HttpMethod = "GET",
        bindings: Mapping[str, str | int] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> RequestSpec:
        return RequestSpec(
            route=route,
            method=method,
            bindings=dict(bindings or {}),
            params=dict(params or {}),
            timeout=self.request_timeout,
        )


def _join(values: Iterable[Any] | None, separator: str = ",") -> str | None:
    if values is None:
        return None
    return separator.join(str(value) for value in values) or None


def _format_target(target: SoundTarget) -> str:
    if isinstance(target, Mapping):
        return " ".join(f"{descriptor}:{value}" for descriptor, value in target.items())
    return str(target)


def _description_params(
    name: str | None,
    description: str | None,
    license: FreesoundLicense | None,
    tags: Iterable[str] | None,
    pack: str | None,
    geotag: str | None,
) -> dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "license": license.value if license is not None else None,
        "tags": format_tags(tags),
        "pack": pack,
        "geotag": geotag,
    }
