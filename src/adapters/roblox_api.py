"""Endpoints de Roblox usados por el agregador.

Estos helpers están en adapters porque son I/O puro (HTTP). Cada uno aplica su
propia política de fallo:
- username -> id: `None` si falla (la API lo traduce a 404).
- experiencias: fatal, lanza `ListingFailure`.
- paginación de game-passes: corta y devuelve lo acumulado.
- product-info: `None` si falla; el item se degrada a precio 0 / sin imagen.

Nada se reintenta.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from adapters.http_client import describe_http_error
from core.config import AppSettings
from core.domain.errors import ListingFailure
from core.domain.models import Experience, GamepassDetail, GamepassSummary

logger = logging.getLogger(__name__)


def _data_list(payload: Any) -> list[Any]:
    if not isinstance(payload, dict):
        raise ValueError("unexpected payload shape")
    data = payload.get("data")
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError("`data` is not a list")
    return data


async def resolve_user_id(
    *,
    client: httpx.AsyncClient,
    settings: AppSettings,
    username: str,
) -> int | None:
    """Resuelve un username a su id numérico (primer resultado)."""

    url = f"{settings.users_api_base}/v1/usernames/users"
    body = {"usernames": [username], "excludeBannedUsers": True}
    try:
        resp = await client.post(url, json=body)
        resp.raise_for_status()
        users = _data_list(resp.json())
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Failed to fetch userId for %s: %s", username, describe_http_error(exc))
        return None

    if not users or not isinstance(users[0], dict):
        logger.info("No Roblox user matches %r", username)
        return None

    user_id = users[0].get("id")
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
        return None
    return user_id


async def list_experiences(
    *,
    client: httpx.AsyncClient,
    settings: AppSettings,
    user_id: int,
    limit: int | None = None,
) -> list[Experience]:
    """Experiencias más recientes del usuario, truncadas a `limit` en cliente.

    A upstream siempre se le pide `experience_page_size` (10); el recorte es local.
    """

    limit = settings.experience_limit if limit is None else limit
    url = f"{settings.games_api_base}/v2/users/{user_id}/games"
    params = {"limit": settings.experience_page_size, "sortOrder": "Desc"}
    try:
        resp = await client.get(url, params=params)
        resp.raise_for_status()
        raw = _data_list(resp.json())
    except (httpx.HTTPError, ValueError) as exc:
        message = describe_http_error(exc)
        logger.warning("Failed to fetch experiences for user %s: %s", user_id, message)
        raise ListingFailure(user_id, message) from exc

    experiences: list[Experience] = []
    for item in raw:
        if not isinstance(item, dict):
            logger.warning("Skipping non-object experience entry for user %s: %r", user_id, item)
            continue
        try:
            experiences.append(Experience.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed experience entry for user %s: %r", user_id, item)

    return experiences[: max(0, limit)]


async def enumerate_gamepasses(
    *,
    client: httpx.AsyncClient,
    settings: AppSettings,
    universe_id: int,
) -> list[GamepassSummary]:
    """Todos los game-passes de un universo siguiendo `nextPageToken`.

    Las páginas van en serie (cada cursor depende de la anterior). Si una página
    falla se devuelve lo acumulado hasta ese punto, posiblemente vacío.
    """

    url = f"{settings.apis_base}/game-passes/v1/universes/{universe_id}/game-passes"
    collected: list[GamepassSummary] = []
    seen_tokens: set[str] = set()
    page_token = ""

    for page in range(settings.max_gamepass_pages):
        params = {
            "passView": "Full",
            "pageSize": settings.gamepass_page_size,
            "pageToken": page_token,
        }
        try:
            resp = await client.get(url, params=params)
            resp.raise_for_status()
            payload = resp.json()
            items = _data_list(payload)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "Error fetching paginated gamepasses for universe %s (page %d): %s",
                universe_id,
                page + 1,
                describe_http_error(exc),
            )
            return collected

        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                collected.append(GamepassSummary.model_validate(item))
            except ValidationError:
                logger.debug("Skipping malformed gamepass entry in universe %s: %r", universe_id, item)

        next_token = payload.get("nextPageToken")
        if not next_token or not isinstance(next_token, str):
            return collected
        if next_token in seen_tokens:
            logger.warning(
                "Universe %s repeated page token %r; stopping pagination",
                universe_id,
                next_token,
            )
            return collected
        seen_tokens.add(next_token)
        page_token = next_token

    logger.warning(
        "Universe %s exceeded %d gamepass pages; returning partial list",
        universe_id,
        settings.max_gamepass_pages,
    )
    return collected


async def fetch_gamepass_detail(
    *,
    client: httpx.AsyncClient,
    settings: AppSettings,
    gamepass_id: int,
) -> GamepassDetail | None:
    url = f"{settings.apis_base}/game-passes/v1/game-passes/{gamepass_id}/product-info"
    try:
        resp = await client.get(url)
        resp.raise_for_status()
        return GamepassDetail.model_validate(resp.json())
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Error fetching details for gamepass %s: %s", gamepass_id, describe_http_error(exc))
        return None
