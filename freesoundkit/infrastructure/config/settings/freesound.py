from pathlib import Path

from pydantic import Field
from pydantic import HttpUrl
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from freesoundkit import BASE_DIR


class FreesoundSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FREESOUND_",
        env_file=[BASE_DIR / ".env"],
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Left empty, the credential manager refuses to run any operation.
    CLIENT_ID: str = ""
    CLIENT_SECRET: str = ""

    BASE_URL: HttpUrl = HttpUrl("https://freesound.org/apiv2")
    HTTP_TIMEOUT: float = Field(default=30.0, gt=0)

    CREDENTIALS_PATH: Path = Path.home() / ".config" / "freesoundkit" / "credentials.json"

    AUTHORIZATION_STATE: str = "freesoundkit"


freesound_settings = FreesoundSettings()
