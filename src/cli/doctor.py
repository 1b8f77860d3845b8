"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client, describe_http_error
from core.config import AppSettings

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, describe_http_error(exc)


async def _check_all(settings: AppSettings) -> list[tuple[str, bool, str]]:
    targets = [
        ("Users API", settings.users_api_base),
        ("Games API", settings.games_api_base),
        ("Game-passes API", settings.apis_base),
    ]
    results = await asyncio.gather(*(_check_http(settings, url) for _, url in targets))
    return [(name, ok, detail) for (name, _), (ok, detail) in zip(targets, results)]


@app.command()
def run() -> None:
    """Show effective configuration and check upstream connectivity."""

    settings = AppSettings()

    table = Table(title="Gamepass Fetcher Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Bind", "OK", f"{settings.host}:{settings.port}")
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row(
        "Limits",
        "OK",
        f"experiences={settings.experience_limit} pages<={settings.max_gamepass_pages} "
        f"detail_concurrency={settings.detail_max_concurrency}",
    )

    # Connectivity (best-effort)
    for name, ok, detail in asyncio.run(_check_all(settings)):
        table.add_row(name, "OK" if ok else "FAIL", detail)

    _console.print(table)
