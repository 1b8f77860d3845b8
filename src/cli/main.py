"""CLI principal (Typer).

Comandos:
- `serve`: levanta la API HTTP (uvicorn).
- `gamepasses`: ejecuta el agregador una vez y muestra el resultado.
- `games`: lista las experiencias de un username.
- `doctor`: diagnósticos de entorno.
"""

from __future__ import annotations

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console

from adapters.http_client import build_async_client
from api.app import serve as serve_api
from cli import doctor
from cli.ui_components import build_games_table, build_gamepasses_table, print_banner
from core.config import AppSettings
from core.domain.errors import GamepassFetcherError
from core.log_setup import configure_logging
from core.services.gamepass_pipeline import aggregate_gamepasses, list_games, parse_user_id

app = typer.Typer(no_args_is_help=True, help="Roblox gamepass fetcher: API server and one-shot queries.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Interfaz de escucha (por defecto 0.0.0.0)."),
    port: Optional[int] = typer.Option(None, help="Puerto (por defecto $PORT o 5000)."),
) -> None:
    """Run the HTTP API."""

    settings = AppSettings()
    overrides = {k: v for k, v in {"host": host, "port": port}.items() if v is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)
    configure_logging(settings)
    serve_api(settings)


@app.command()
def gamepasses(
    user: str = typer.Argument(..., help="User id numérico, o username con --username."),
    username: bool = typer.Option(False, "--username", "-u", help="Interpretar USER como username."),
    as_json: bool = typer.Option(False, "--json", help="Imprimir JSON en vez de tabla."),
) -> None:
    """Aggregate the gamepasses of a user's latest experiences."""

    settings = AppSettings()
    configure_logging(settings)

    try:
        identity: int | str = user if username else parse_user_id(user)
        result = asyncio.run(_aggregate(settings, identity))
    except GamepassFetcherError as exc:
        _console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
        return

    print_banner(_console)
    if result.message:
        _console.print(f"[yellow]{result.message}[/yellow]")
        return
    _console.print(build_gamepasses_table(result))


@app.command()
def games(
    username: str = typer.Argument(..., help="Username de Roblox."),
    as_json: bool = typer.Option(False, "--json", help="Imprimir JSON en vez de tabla."),
) -> None:
    """List the latest experiences of a username."""

    settings = AppSettings()
    configure_logging(settings)

    try:
        result = asyncio.run(_games(settings, username))
    except GamepassFetcherError as exc:
        _console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
        return
    _console.print(build_games_table(result))


async def _aggregate(settings: AppSettings, identity: int | str):
    async with build_async_client(settings) as client:
        return await aggregate_gamepasses(client=client, settings=settings, identity=identity)


async def _games(settings: AppSettings, username: str):
    async with build_async_client(settings) as client:
        return await list_games(client=client, settings=settings, identity=username)


def run() -> None:
    app()
