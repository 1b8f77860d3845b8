"""Logging del proceso.

Se configura una sola vez al arrancar (CLI `serve` o comandos de consulta).
Los módulos solo hacen `logging.getLogger(__name__)`.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from core.config import AppSettings


def configure_logging(settings: AppSettings | None = None, *, console: Console | None = None) -> None:
    settings = settings or AppSettings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=False,
        show_path=False,
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx loguea cada request a INFO; lo dejamos para DEBUG.
    if level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
