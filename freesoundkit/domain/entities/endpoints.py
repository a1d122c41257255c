import re
from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final
from urllib.parse import quote

from freesoundkit.domain.exceptions import EncodingError

PLACEHOLDER_PATTERN: Final[re.Pattern[str]] = re.compile(r"<(?P<name>[A-Za-z_][A-Za-z0-9_]*)>")

_WHITESPACE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class EndpointTemplate:
    """
    A route path containing zero or more ``<name>`` placeholders.

    Resolution is pure: every placeholder must be bound, every bound value is
    percent-encoded as a single path segment, and the result is joined to the
    given base URL.
    """

    path: str

    @property
    def placeholders(self) -> frozenset[str]:
        return frozenset(match.group("name") for match in PLACEHOLDER_PATTERN.finditer(self.path))

    def resolve(self, bindings: Mapping[str, str | int] | None = None, base_url: str = "") -> str:
        bindings = bindings or {}

        missing = self.placeholders - bindings.keys()
        if missing:
            raise EncodingError(f"Unresolved placeholder(s) {sorted(missing)} in route {self.path!r}")

        unknown = bindings.keys() - self.placeholders
        if unknown:
            raise EncodingError(f"Unknown binding(s) {sorted(unknown)} for route {self.path!r}")

        def _substitute(match: re.Match[str]) -> str:
            return _encode_segment(match.group("name"), bindings[match.group("name")])

        return f"{base_url.rstrip('/')}{PLACEHOLDER_PATTERN.sub(_substitute, self.path)}"

    def __str__(self) -> str:
        return self.path


def _encode_segment(name: str, value: str | int) -> str:
    if isinstance(value, bool) or not isinstance(value, str | int):
        raise EncodingError(f"Binding {name!r} must be a string or an integer, got {type(value).__name__}")

    segment = str(value)
    if not segment:
        raise EncodingError(f"Binding {name!r} must not be empty")

    try:
        # Nothing is safe: only the unreserved set survives, "/" included.
        return quote(segment, safe="", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Binding {name!r} cannot be encoded: {e}") from e


def format_tags(tags: Iterable[str] | None) -> str | None:
    """
    Canonical encoding of a tag list: whitespace inside a tag becomes a single
    hyphen, tags are separated by a single space.
    """
    if tags is None:
        return None

    cleaned = [_WHITESPACE_PATTERN.sub("-", tag.strip()) for tag in tags]
    return " ".join(tag for tag in cleaned if tag) or None


class FreesoundRoute:
    """Freesound API v2 routes, relative to the API base URL."""

    TEXT_SEARCH: Final = EndpointTemplate("/search/text/")
    CONTENT_SEARCH: Final = EndpointTemplate("/search/content/")
    COMBINED_SEARCH: Final = EndpointTemplate("/search/combined/")

    SOUND: Final = EndpointTemplate("/sounds/<sound_id>/")
    SOUND_ANALYSIS: Final = EndpointTemplate("/sounds/<sound_id>/analysis/")
    SIMILAR_SOUNDS: Final = EndpointTemplate("/sounds/<sound_id>/similar/")
    COMMENTS: Final = EndpointTemplate("/sounds/<sound_id>/comments/")
    DOWNLOAD: Final = EndpointTemplate("/sounds/<sound_id>/download/")
    BOOKMARK: Final = EndpointTemplate("/sounds/<sound_id>/bookmark/")
    RATE: Final = EndpointTemplate("/sounds/<sound_id>/rate/")
    COMMENT: Final = EndpointTemplate("/sounds/<sound_id>/comment/")
    EDIT_DESCRIPTION: Final = EndpointTemplate("/sounds/<sound_id>/edit/")

    UPLOAD: Final = EndpointTemplate("/sounds/upload/")
    DESCRIBE: Final = EndpointTemplate("/sounds/describe/")
    PENDING_UPLOADS: Final = EndpointTemplate("/sounds/pending_uploads/")

    ME: Final = EndpointTemplate("/me/")
    USER: Final = EndpointTemplate("/users/<username>/")
    USER_SOUNDS: Final = EndpointTemplate("/users/<username>/sounds/")
    USER_PACKS: Final = EndpointTemplate("/users/<username>/packs/")
    USER_BOOKMARK_CATEGORIES: Final = EndpointTemplate("/users/<username>/bookmark_categories/")
    USER_BOOKMARK_CATEGORY_SOUNDS: Final = EndpointTemplate(
        "/users/<username>/bookmark_categories/<bookmark_category_id>/sounds/"
    )

    PACK: Final = EndpointTemplate("/packs/<pack_id>/")
    PACK_SOUNDS: Final = EndpointTemplate("/packs/<pack_id>/sounds/")
    PACK_DOWNLOAD: Final = EndpointTemplate("/packs/<pack_id>/download/")

    AUTHORIZE: Final = EndpointTemplate("/oauth2/authorize/")
    LOGOUT_AUTHORIZE: Final = EndpointTemplate("/oauth2/logout_and_authorize/")
    ACCESS_TOKEN: Final = EndpointTemplate("/oauth2/access_token/")
