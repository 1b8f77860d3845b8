"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y User-Agent para todas las llamadas a Roblox.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

from typing import Callable

import httpx

from core.config import AppSettings

ClientFactory = Callable[[], httpx.AsyncClient]


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los endpoints se comporten igual.
    - El timeout es por llamada; ninguna request upstream queda colgada.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def client_factory_for(
    settings: AppSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ClientFactory:
    """Devuelve una factory que abre un cliente nuevo por request."""

    def factory() -> httpx.AsyncClient:
        return build_async_client(settings, transport=transport)

    return factory


def describe_http_error(exc: Exception) -> str:
    """Texto corto y sin traceback para logs y cuerpos de error."""

    if isinstance(exc, httpx.HTTPStatusError):
        return f"Request failed with status code {exc.response.status_code}"
    text = str(exc).strip()
    return text or exc.__class__.__name__
