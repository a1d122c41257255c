from pathlib import Path
from typing import get_args

import typer

from freesoundkit.infrastructure.types import LogHandler


def parse_log_handlers(values: list[str]) -> list[str]:
    for value in values:
        if value not in get_args(LogHandler):
            raise typer.BadParameter(f"Invalid handler: '{value}'. Allowed: {', '.join(get_args(LogHandler))}")

    return values


def parse_sound_id(value: str) -> int:
    try:
        sound_id = int(value)
    except ValueError as e:
        raise typer.BadParameter(f"Sound ID must be an integer, got '{value}'") from e

    if sound_id <= 0:
        raise typer.BadParameter(f"Sound ID must be positive, got {sound_id}")

    return sound_id


def parse_destination(value: str) -> Path:
    path = Path(value).expanduser()
    if path.is_dir():
        raise typer.BadParameter(f"Destination is a directory: {path}")

    return path
