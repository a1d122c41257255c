from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import StrEnum
from typing import Annotated
from typing import Any
from typing import Literal
from typing import Self

from pydantic import BaseModel
from pydantic import Field
from pydantic import HttpUrl
from pydantic import model_validator

from freesoundkit.domain.entities.base import BaseEntity
from freesoundkit.domain.entities.endpoints import EndpointTemplate

HttpMethod = Literal["GET", "POST"]


class AuthorizationState(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHORIZATION_PENDING = "authorization_pending"
    AUTHORIZED = "authorized"
    REFRESHING = "refreshing"


class FreesoundLicense(StrEnum):
    ATTRIBUTION = "Attribution"
    ATTRIBUTION_NONCOMMERCIAL = "Attribution Noncommercial"
    CREATIVE_COMMONS_0 = "Creative Commons 0"


class PreviewQuality(StrEnum):
    LOW = "preview-lq-mp3"
    HIGH = "preview-hq-mp3"


class ClientIdentity(BaseEntity):
    client_id: str = Field(..., min_length=1)
    client_secret: str = Field(..., min_length=1, repr=False)


class Credentials(BaseEntity):
    """Access/refresh token pair as persisted in the credential store."""

    access_token: str | None = Field(None, repr=False)
    refresh_token: str | None = Field(None, repr=False)
    authorized: bool = False

    @model_validator(mode="after")
    def validate_authorized_has_token(self) -> Self:
        if self.authorized and not self.access_token:
            raise ValueError("Authorized credentials must carry an access token")
        return self

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @property
    def auth_header(self) -> str | None:
        if not self.access_token:
            return None
        return f"Bearer {self.access_token}"


class FreesoundTokenPayload(BaseModel):
    """Token endpoint response of the Freesound OAuth2 server."""

    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
    token_type: str = "Bearer"
    expires_in: int | None = None
    scope: str | None = None

    def to_credentials(self) -> Credentials:
        return Credentials(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            authorized=True,
        )


class FreesoundPage(BaseModel):
    """One chunk of a paginated list endpoint."""

    count: Annotated[int, Field(ge=0)]
    next: HttpUrl | None = None
    previous: HttpUrl | None = None
    results: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def has_next(self) -> bool:
        return self.next is not None


@dataclass(frozen=True, kw_only=True)
class RequestSpec:
    """
    A logical request: a route template, its bindings and its parameters.

    :param route: The route template to resolve
    :param method: GET (parameters in the query string) or POST (form body)
    :param bindings: Values for the route placeholders
    :param params: Request parameters, ``None`` values are never sent
    :param timeout: Optional timeout in seconds for this request only
    """

    route: EndpointTemplate
    method: HttpMethod = "GET"
    bindings: Mapping[str, str | int] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    timeout: float | None = None

    def url(self, base_url: str) -> str:
        return self.route.resolve(self.bindings, base_url=base_url)

    def present_params(self) -> dict[str, Any]:
        return {key: value for key, value in self.params.items() if value is not None}

    def with_params(self, **params: Any) -> "RequestSpec":
        return RequestSpec(
            route=self.route,
            method=self.method,
            bindings=self.bindings,
            params={**self.params, **params},
            timeout=self.timeout,
        )
