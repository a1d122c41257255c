from typing import cast

import typer

from freesoundkit import __version__
from freesoundkit.infrastructure.config.loggers import configure_loggers
from freesoundkit.infrastructure.config.settings.app import app_settings
from freesoundkit.infrastructure.entrypoints.cli.commands import auth
from freesoundkit.infrastructure.entrypoints.cli.commands import sounds
from freesoundkit.infrastructure.entrypoints.cli.parsers import parse_log_handlers
from freesoundkit.infrastructure.types import LogHandler
from freesoundkit.infrastructure.types import LogLevel

app = typer.Typer(
    name="freesoundkit",
    help="CLI for the Freesound API v2.",
    no_args_is_help=True,
)

app.add_typer(auth.app, name="auth", help="Freesound OAuth2 authorization commands")
app.add_typer(sounds.app, name="sounds", help="Freesound sounds commands")


def version_callback(show_version: bool) -> None:
    if show_version:
        typer.echo(f"freesoundkit Version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    log_level: LogLevel = typer.Option(
        app_settings.LOG_LEVEL_CLI,
        "--log-level",
        "-l",
        case_sensitive=False,
        help="Set the logging level.",
    ),
    log_handlers: list[str] = typer.Option(
        app_settings.LOG_HANDLERS_CLI,
        "--log-handler",
        case_sensitive=True,
        callback=parse_log_handlers,
        help="Set the logging handlers.",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the application's version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    configure_loggers(level=log_level, handlers=cast(list[LogHandler], log_handlers))


if __name__ == "__main__":
    app()
