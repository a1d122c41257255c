from typing import Any


class FreesoundError(Exception):
    """Base class of every error raised by freesoundkit."""

    pass


class ConfigurationError(FreesoundError):
    """Raised when the client identity is missing or inconsistent."""

    pass


class Unauthenticated(FreesoundError):
    """Raised when no usable credential is available for a request."""

    pass


class AuthorizationFailed(FreesoundError):
    pass


class RefreshFailed(FreesoundError):
    """Raised when the refresh token was rejected and the full flow must be run again."""

    pass


class TransportError(FreesoundError):
    pass


class ApiError(FreesoundError):
    def __init__(self, status_code: int, body: Any = None) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Freesound API error {status_code}: {body}")


class Unauthorized(ApiError):
    """Raised on a 401: the caller should refresh and retry once."""

    pass


class EncodingError(FreesoundError):
    pass


class TransferError(FreesoundError):
    pass


class ResponseValidationError(FreesoundError):
    pass
