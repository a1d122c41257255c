from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from freesoundkit import BASE_DIR
from freesoundkit.infrastructure.types import LogHandler
from freesoundkit.infrastructure.types import LogLevel


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FREESOUNDKIT_",
        env_file=[BASE_DIR / ".env"],
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    LOG_LEVEL_CLI: LogLevel = "WARNING"
    LOG_HANDLERS_CLI: list[LogHandler] = ["cli", "cli_alert"]


app_settings = AppSettings()
