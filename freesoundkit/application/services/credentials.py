import asyncio
import logging
from typing import Final

from pydantic import HttpUrl
from pydantic import ValidationError

from freesoundkit.domain.entities.freesound import AuthorizationState
from freesoundkit.domain.entities.freesound import ClientIdentity
from freesoundkit.domain.entities.freesound import Credentials
from freesoundkit.domain.exceptions import ApiError
from freesoundkit.domain.exceptions import AuthorizationFailed
from freesoundkit.domain.exceptions import ConfigurationError
from freesoundkit.domain.exceptions import FreesoundError
from freesoundkit.domain.exceptions import RefreshFailed
from freesoundkit.domain.exceptions import ResponseValidationError
from freesoundkit.domain.exceptions import TransportError
from freesoundkit.domain.exceptions import Unauthenticated
from freesoundkit.domain.ports.clients.freesound import FreesoundClientPort
from freesoundkit.domain.ports.storage.credentials import CredentialStorePort

logger = logging.getLogger(__name__)

KEY_ACCESS_TOKEN: Final[str] = "access_token"
KEY_REFRESH_TOKEN: Final[str] = "refresh_token"
KEY_AUTHORIZED: Final[str] = "is_authorized"

# invalid_grant and invalid_client: any other status leaves the refresh token usable.
REVOKING_STATUS_CODES: Final[frozenset[int]] = frozenset({400, 401})


class CredentialManager:
    """
    Single authority over the OAuth2 credentials of the process.

    Every token mutation goes through this object: the in-memory snapshot is
    an immutable ``Credentials`` replaced as a whole under a lock, and it is
    persisted in the credential store before being published. At most one
    refresh grant is in flight at any time, concurrent callers share its
    outcome.
    """

    def __init__(
        self,
        credential_store: CredentialStorePort,
        freesound_client: FreesoundClientPort,
        authorization_state: str = "freesoundkit",
    ) -> None:
        self.credential_store = credential_store
        self.freesound_client = freesound_client
        self.authorization_state = authorization_state

        self._identity: ClientIdentity | None = None
        self._credentials: Credentials = self._load()
        self._state: AuthorizationState = (
            AuthorizationState.AUTHORIZED if self._credentials.authorized else AuthorizationState.UNAUTHENTICATED
        )

        self._lock: asyncio.Lock = asyncio.Lock()
        self._refresh_task: asyncio.Task[Credentials] | None = None

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> AuthorizationState:
        return self._state

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def is_configured(self) -> bool:
        return self._identity is not None

    @property
    def is_authorized(self) -> bool:
        return self._credentials.authorized

    def current_auth_header(self) -> str | None:
        credentials = self._credentials
        if not credentials.authorized:
            return None
        return credentials.auth_header

    # -------------------------------------------------------------------------
    # Authorization flow
    # -------------------------------------------------------------------------

    def configure(self, client_id: str, client_secret: str) -> None:
        try:
            identity = ClientIdentity(client_id=client_id, client_secret=client_secret)
        except ValidationError as e:
            raise ConfigurationError("Freesound client ID and client secret must not be empty.") from e

        if self._identity is not None and self._identity != identity:
            raise ConfigurationError("Freesound client identity is already configured.")

        self._identity = identity

    def begin_authorization(self, logout_first: bool = False) -> HttpUrl:
        identity = self._require_identity()

        url = self.freesound_client.get_authorization_url(
            client_id=identity.client_id,
            state=self.authorization_state,
            logout_first=logout_first,
        )
        self._state = AuthorizationState.AUTHORIZATION_PENDING
        logger.info("Authorization requested, waiting for the user code")

        return url

    async def complete_authorization(self, code: str) -> Credentials:
        identity = self._require_identity()
        if not code or not code.strip():
            raise AuthorizationFailed("Authorization code must not be empty.")

        try:
            payload = await self.freesound_client.exchange_code_for_token(identity, code.strip())
        except FreesoundError as e:
            logger.warning(f"Authorization code exchange failed: {e}")
            raise AuthorizationFailed(f"Unable to exchange the authorization code: {e}") from e

        credentials = payload.to_credentials()
        async with self._lock:
            try:
                self._commit(credentials)
            except OSError as e:
                raise AuthorizationFailed(f"Unable to persist credentials: {e}") from e
            self._state = AuthorizationState.AUTHORIZED

        logger.info("Authorization completed")
        return credentials

    async def refresh(self) -> Credentials:
        identity = self._require_identity()

        async with self._lock:
            if self._refresh_task is None:
                refresh_token = self._credentials.refresh_token
                if not refresh_token:
                    raise Unauthenticated("No refresh token available, authorization is required.")

                previous_state = self._state
                self._state = AuthorizationState.REFRESHING
                self._refresh_task = asyncio.create_task(self._refresh(identity, refresh_token, previous_state))

            task = self._refresh_task

        # A cancelled caller must not abort the refresh other callers wait on.
        return await asyncio.shield(task)

    async def logout(self) -> None:
        self._require_identity()

        async with self._lock:
            self._commit(Credentials.empty())
            self._state = AuthorizationState.UNAUTHENTICATED

        logger.info("Credentials cleared")

    # -------------------------------------------------------------------------
    # Core Logic
    # -------------------------------------------------------------------------

    async def _refresh(
        self,
        identity: ClientIdentity,
        refresh_token: str,
        previous_state: AuthorizationState,
    ) -> Credentials:
        try:
            payload = await self.freesound_client.refresh_access_token(identity, refresh_token)

        except TransportError:
            logger.warning("Token refresh failed on transport, credentials kept")
            self._state = previous_state
            raise

        except ApiError as e:
            if e.status_code not in REVOKING_STATUS_CODES:
                logger.warning(f"Token refresh failed with status {e.status_code}, credentials kept")
                self._state = previous_state
                raise

            await self._revoke()
            raise RefreshFailed(f"Refresh token rejected ({e.status_code}), authorization is required.") from e

        except ResponseValidationError as e:
            await self._revoke()
            raise RefreshFailed("Malformed refresh response, authorization is required.") from e

        except BaseException:
            self._state = previous_state
            raise

        else:
            credentials = payload.to_credentials()
            async with self._lock:
                try:
                    self._commit(credentials)
                except OSError:
                    self._state = previous_state
                    raise
                self._state = AuthorizationState.AUTHORIZED

            logger.info("Access token refreshed")
            return credentials

        finally:
            self._refresh_task = None

    async def _revoke(self) -> None:
        logger.warning("Refresh token revoked, clearing stored credentials")
        async with self._lock:
            try:
                self._commit(Credentials.empty())
            except OSError as e:
                raise RefreshFailed(f"Refresh token rejected, unable to clear stored credentials: {e}") from e
            finally:
                # The rejected tokens are dead whether or not the store was cleared.
                self._credentials = Credentials.empty()
                self._state = AuthorizationState.UNAUTHENTICATED

    def _commit(self, credentials: Credentials) -> None:
        # Persist first: the in-memory snapshot never runs ahead of the store.
        self.credential_store.set_many(
            {
                KEY_ACCESS_TOKEN: credentials.access_token,
                KEY_REFRESH_TOKEN: credentials.refresh_token,
                KEY_AUTHORIZED: credentials.authorized,
            }
        )
        self._credentials = credentials

    def _load(self) -> Credentials:
        access_token = self.credential_store.get(KEY_ACCESS_TOKEN)
        refresh_token = self.credential_store.get(KEY_REFRESH_TOKEN)
        authorized = self.credential_store.get(KEY_AUTHORIZED)

        if authorized is not True:
            return Credentials.empty()

        try:
            return Credentials(
                access_token=access_token if isinstance(access_token, str) else None,
                refresh_token=refresh_token if isinstance(refresh_token, str) else None,
                authorized=True,
            )
        except ValidationError:
            logger.warning("Stored credentials are inconsistent, starting unauthenticated")
            return Credentials.empty()

    def _require_identity(self) -> ClientIdentity:
        if self._identity is None:
            raise ConfigurationError("CredentialManager.configure() must be called first.")
        return self._identity
