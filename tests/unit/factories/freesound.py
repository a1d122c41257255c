from polyfactory.factories.pydantic_factory import ModelFactory

from freesoundkit.domain.entities.freesound import Credentials
from freesoundkit.domain.entities.freesound import FreesoundTokenPayload


class FreesoundTokenPayloadFactory(ModelFactory[FreesoundTokenPayload]):
    token_type = "Bearer"
    expires_in = 86399
    scope = "read write"

    @classmethod
    def access_token(cls) -> str:
        return cls.__faker__.sha256()

    @classmethod
    def refresh_token(cls) -> str:
        return cls.__faker__.sha256()


class CredentialsFactory(ModelFactory[Credentials]):
    authorized = True

    @classmethod
    def access_token(cls) -> str:
        return cls.__faker__.sha256()

    @classmethod
    def refresh_token(cls) -> str:
        return cls.__faker__.sha256()
