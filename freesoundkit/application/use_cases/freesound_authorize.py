import logging
from collections.abc import Awaitable
from collections.abc import Callable

from pydantic import HttpUrl

from freesoundkit.application.services.credentials import CredentialManager
from freesoundkit.domain.entities.freesound import Credentials

logger = logging.getLogger(__name__)

type CodeRequester = Callable[[HttpUrl], Awaitable[str]]


async def freesound_authorize(
    credential_manager: CredentialManager,
    request_code: CodeRequester,
    logout_first: bool = False,
) -> Credentials:
    """
    Run the authorization-code flow end to end.

    :param credential_manager: A configured credential manager
    :param request_code: Collaborator letting the user approve the access at the given
        authorization URL and returning the one-time code
    :param logout_first: Whether to log out the current Freesound user before
        authorizing (allows to switch account)
    """
    authorization_url = credential_manager.begin_authorization(logout_first=logout_first)

    code = await request_code(authorization_url)

    credentials = await credential_manager.complete_authorization(code)
    logger.info("Freesound account connected")
    return credentials
