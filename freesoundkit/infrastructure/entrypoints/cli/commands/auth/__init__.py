import asyncio

import typer
from rich.console import Console
from rich.table import Table

from freesoundkit.domain.exceptions import AuthorizationFailed
from freesoundkit.domain.exceptions import ConfigurationError
from freesoundkit.domain.exceptions import RefreshFailed
from freesoundkit.domain.exceptions import Unauthenticated
from freesoundkit.infrastructure.entrypoints.cli.commands.auth.connect import connect_logic
from freesoundkit.infrastructure.entrypoints.cli.commands.auth.status import status_logic
from freesoundkit.infrastructure.entrypoints.cli.commands.auth.tokens import logout_logic
from freesoundkit.infrastructure.entrypoints.cli.commands.auth.tokens import refresh_logic

console = Console()
app = typer.Typer()

CONFIGURATION_HINT = "Set FREESOUND_CLIENT_ID and FREESOUND_CLIENT_SECRET (environment or .env file)."


@app.command("connect", help="Connect a Freesound account via OAuth2.")
def connect(
    logout_first: bool = typer.Option(
        False,
        "--logout-first/--no-logout-first",
        help="Whether to log out the current Freesound user first (to switch account)",
    ),
    open_browser: bool = typer.Option(
        True,
        "--browser/--no-browser",
        help="Whether to open the authorization page in a browser",
    ),
) -> None:
    """
    Runs the authorization-code flow: the user approves the access on Freesound,
    then pastes back the code displayed by Freesound.
    """
    try:
        asyncio.run(connect_logic(logout_first=logout_first, open_browser=open_browser))
    except ConfigurationError as e:
        typer.secho(f"Error: {e} {CONFIGURATION_HINT}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    except AuthorizationFailed as e:
        typer.secho(f"Authorization failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    except Exception as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e

    typer.secho("\nAuthorization successful! ✅", fg=typer.colors.GREEN)


@app.command("refresh", help="Exchange the stored refresh token for a new token pair.")
def refresh() -> None:
    try:
        asyncio.run(refresh_logic())
    except (Unauthenticated, RefreshFailed) as e:
        typer.secho(f"{e} Run 'freesoundkit auth connect'.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    except ConfigurationError as e:
        typer.secho(f"Error: {e} {CONFIGURATION_HINT}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    except Exception as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e

    typer.secho("Access token refreshed!", fg=typer.colors.GREEN)


@app.command("logout", help="Clear the stored Freesound credentials.")
def logout() -> None:
    try:
        asyncio.run(logout_logic())
    except ConfigurationError as e:
        typer.secho(f"Error: {e} {CONFIGURATION_HINT}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    except Exception as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e

    typer.secho("Logged out.", fg=typer.colors.GREEN)


@app.command("status", help="Show the authorization status.")
def status() -> None:
    try:
        auth_status = asyncio.run(status_logic())
    except Exception as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e

    table = Table(title="Freesound Authorization")
    table.add_column("Label", style="cyan")
    table.add_column("Value", justify="right", style="magenta")

    table.add_row("Client configured", "yes" if auth_status.is_configured else "no")
    table.add_row("State", auth_status.state.value)
    table.add_row("Refresh token", "yes" if auth_status.has_refresh_token else "no")
    table.add_row("Credentials file", str(auth_status.credentials_path))

    console.print(table)
