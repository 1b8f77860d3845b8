"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import AggregateResult, GamesResult


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modo interactivo)."""

    title = Text("Gamepass Fetcher", style="bold cyan")
    subtitle = Text("Usuarios • Experiencias • Game-passes", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_gamepasses_table(result: AggregateResult) -> Table:
    table = Table(
        title=f"Gamepasses of user {result.user_id}",
        caption=f"{result.total_experiences} experiences • {result.total_gamepasses} gamepasses",
    )
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Image asset", style="magenta")
    table.add_column("Place", style="dim")

    for gp in result.gamepasses:
        table.add_row(
            str(gp.id),
            gp.name,
            str(gp.price),
            str(gp.image_asset_id) if gp.image_asset_id is not None else "-",
            str(gp.place_id) if gp.place_id is not None else "-",
        )
    return table


def build_games_table(result: GamesResult) -> Table:
    table = Table(title=f"Games of user {result.user_id}")
    table.add_column("Name", style="white")
    table.add_column("Universe", style="cyan", no_wrap=True)
    table.add_column("Place", style="magenta")
    for game in result.games:
        table.add_row(
            game.name,
            str(game.universe_id),
            str(game.place_id) if game.place_id is not None else "-",
        )
    return table
