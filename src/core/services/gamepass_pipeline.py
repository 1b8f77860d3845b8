"""Gamepass aggregation orchestration.

This module owns the request-level flow shared by every entry-point (HTTP
routes, CLI commands, tests): resolve the identity, list experiences,
enumerate each experience's gamepasses and join them with their product
details. Routes never call each other; they all land here.

Ordering contract: output is grouped by experience in listing order, and
within an experience follows enumeration order, no matter in which order the
concurrent detail fetches complete.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from adapters.roblox_api import (
    enumerate_gamepasses,
    fetch_gamepass_detail,
    list_experiences,
    resolve_user_id,
)
from core.config import AppSettings
from core.domain.errors import InvalidUserId, ResolutionFailure
from core.domain.models import (
    AggregatedGamepass,
    AggregateResult,
    Experience,
    GamesResult,
    GameSummary,
)

logger = logging.getLogger(__name__)

NO_EXPERIENCES_MESSAGE = "No experiences found for this user"


def parse_user_id(raw: str) -> int:
    """Validate a path parameter as a positive base-10 integer."""

    value = (raw or "").strip()
    if not value.isascii() or not value.isdigit():
        raise InvalidUserId(raw)
    user_id = int(value)
    if user_id <= 0:
        raise InvalidUserId(raw)
    return user_id


async def resolve_identity(
    *,
    client: httpx.AsyncClient,
    settings: AppSettings,
    identity: int | str,
) -> int:
    """Return a numeric user id; strings are always treated as usernames."""

    if isinstance(identity, int):
        return identity

    if not identity.strip():
        raise ResolutionFailure(identity)
    user_id = await resolve_user_id(client=client, settings=settings, username=identity)
    if user_id is None:
        raise ResolutionFailure(identity)
    return user_id


async def _collect_experience(
    *,
    client: httpx.AsyncClient,
    settings: AppSettings,
    experience: Experience,
    semaphore: asyncio.Semaphore,
) -> list[AggregatedGamepass]:
    summaries = await enumerate_gamepasses(
        client=client,
        settings=settings,
        universe_id=experience.universe_id,
    )
    logger.debug(
        "Universe %s (%s): %d gamepasses",
        experience.universe_id,
        experience.name,
        len(summaries),
    )

    async def detail_for(gamepass_id: int):
        async with semaphore:
            return await fetch_gamepass_detail(
                client=client,
                settings=settings,
                gamepass_id=gamepass_id,
            )

    # gather devuelve en el orden de entrada.
    details = await asyncio.gather(*(detail_for(s.id) for s in summaries))
    return [
        AggregatedGamepass.join(summary, detail, place_id=experience.place_id)
        for summary, detail in zip(summaries, details)
    ]


async def aggregate_gamepasses(
    *,
    client: httpx.AsyncClient,
    settings: AppSettings,
    identity: int | str,
    limit: int | None = None,
) -> AggregateResult:
    """Full pipeline for one user.

    Raises `ResolutionFailure` when a username does not resolve and
    `ListingFailure` when the experience listing fails. Enumeration and
    detail failures only shrink or degrade the result.
    """

    user_id = await resolve_identity(client=client, settings=settings, identity=identity)
    experiences = await list_experiences(
        client=client,
        settings=settings,
        user_id=user_id,
        limit=settings.experience_limit if limit is None else limit,
    )

    if not experiences:
        logger.info("User %s has no experiences", user_id)
        return AggregateResult(user_id=str(user_id), message=NO_EXPERIENCES_MESSAGE)

    semaphore = asyncio.Semaphore(settings.detail_max_concurrency)
    gamepasses: list[AggregatedGamepass] = []
    for experience in experiences:
        gamepasses.extend(
            await _collect_experience(
                client=client,
                settings=settings,
                experience=experience,
                semaphore=semaphore,
            )
        )

    logger.info(
        "User %s: %d experiences, %d gamepasses",
        user_id,
        len(experiences),
        len(gamepasses),
    )
    return AggregateResult(
        user_id=str(user_id),
        total_experiences=len(experiences),
        total_gamepasses=len(gamepasses),
        gamepasses=gamepasses,
    )


async def list_games(
    *,
    client: httpx.AsyncClient,
    settings: AppSettings,
    identity: int | str,
) -> GamesResult:
    """Experiences of a user without gamepass enumeration (one listing page)."""

    user_id = await resolve_identity(client=client, settings=settings, identity=identity)
    experiences = await list_experiences(
        client=client,
        settings=settings,
        user_id=user_id,
        limit=settings.experience_page_size,
    )
    games = [GameSummary.from_experience(e) for e in experiences]
    return GamesResult(user_id=str(user_id), total_games=len(games), games=games)
