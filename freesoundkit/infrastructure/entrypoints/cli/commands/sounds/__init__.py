import asyncio
from pathlib import Path
from typing import Literal

import typer
from rich.console import Console
from rich.table import Table

from freesoundkit.domain.entities.freesound import PreviewQuality
from freesoundkit.domain.exceptions import ApiError
from freesoundkit.domain.exceptions import ConfigurationError
from freesoundkit.domain.exceptions import RefreshFailed
from freesoundkit.domain.exceptions import Unauthenticated
from freesoundkit.infrastructure.entrypoints.cli.commands.sounds.download import download_logic
from freesoundkit.infrastructure.entrypoints.cli.commands.sounds.download import preview_logic
from freesoundkit.infrastructure.entrypoints.cli.commands.sounds.info import info_logic
from freesoundkit.infrastructure.entrypoints.cli.commands.sounds.search import search_logic
from freesoundkit.infrastructure.entrypoints.cli.parsers import parse_destination
from freesoundkit.infrastructure.entrypoints.cli.parsers import parse_sound_id

Quality = Literal["low", "high"]

INFO_FIELDS = ["id", "name", "username", "license", "duration", "filesize", "type", "num_downloads", "url"]

console = Console()
app = typer.Typer()


def _exit_with_error(e: Exception) -> typer.Exit:
    if isinstance(e, (Unauthenticated, RefreshFailed)):
        message = f"{e} Run 'freesoundkit auth connect'."
    elif isinstance(e, ConfigurationError):
        message = f"Error: {e} Set FREESOUND_CLIENT_ID and FREESOUND_CLIENT_SECRET."
    elif isinstance(e, ApiError):
        message = f"Freesound rejected the request ({e.status_code}): {e.body}"
    else:
        message = f"Error: {e}"

    typer.secho(message, fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


@app.command("search", help="Search sounds by text.")
def search(
    query: str = typer.Argument(..., help="Text query"),
    filter: str | None = typer.Option(None, "--filter", help="Solr filter, e.g. 'duration:[1 TO 5]'"),
    sort: str | None = typer.Option(None, "--sort", help="Sort order, e.g. 'rating_desc'"),
    page_size: int = typer.Option(15, "--page-size", help="How many sounds to fetch per page", min=1, max=150),
    limit: int = typer.Option(15, "--limit", help="Maximum number of sounds to display", min=1),
) -> None:
    try:
        sounds = asyncio.run(search_logic(query, filter=filter, sort=sort, page_size=page_size, limit=limit))
    except Exception as e:
        raise _exit_with_error(e) from e

    if not sounds:
        typer.secho(f"No sound found for '{query}'.", fg=typer.colors.YELLOW)
        return

    table = Table(title=f"Sounds for '{query}'")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name", style="magenta")
    table.add_column("User")
    table.add_column("License")
    table.add_column("Tags", overflow="fold")

    for sound in sounds:
        table.add_row(
            str(sound.get("id", "")),
            str(sound.get("name", "")),
            str(sound.get("username", "")),
            str(sound.get("license", "")),
            " ".join(sound.get("tags") or []),
        )

    console.print(table)


@app.command("info", help="Show the details of a sound.")
def info(
    sound_id: int = typer.Argument(..., help="Sound ID", parser=parse_sound_id),
) -> None:
    try:
        sound = asyncio.run(info_logic(sound_id))
    except Exception as e:
        raise _exit_with_error(e) from e

    table = Table(title=f"Sound {sound_id}")
    table.add_column("Label", style="cyan")
    table.add_column("Value", style="magenta", overflow="fold")

    for field in INFO_FIELDS:
        if field in sound:
            table.add_row(field, str(sound[field]))
    table.add_row("tags", " ".join(sound.get("tags") or []))

    console.print(table)


@app.command("download", help="Download the original file of a sound.")
def download(
    sound_id: int = typer.Argument(..., help="Sound ID", parser=parse_sound_id),
    output: Path = typer.Option(..., "--output", "-o", help="Destination file", parser=parse_destination),
) -> None:
    try:
        path = asyncio.run(download_logic(sound_id, output))
    except Exception as e:
        raise _exit_with_error(e) from e

    typer.secho(f"Sound {sound_id} downloaded to {path}", fg=typer.colors.GREEN)


@app.command("preview", help="Download the MP3 preview of a sound.")
def preview(
    sound_id: int = typer.Argument(..., help="Sound ID", parser=parse_sound_id),
    output: Path = typer.Option(..., "--output", "-o", help="Destination file", parser=parse_destination),
    quality: Quality = typer.Option("high", "--quality", help="Preview quality"),
) -> None:
    preview_quality = PreviewQuality.HIGH if quality == "high" else PreviewQuality.LOW

    try:
        path = asyncio.run(preview_logic(sound_id, output, preview_quality))
    except Exception as e:
        raise _exit_with_error(e) from e

    typer.secho(f"Preview of sound {sound_id} downloaded to {path}", fg=typer.colors.GREEN)
