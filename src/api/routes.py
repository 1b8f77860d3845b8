"""
Public read-only endpoints.

No auth. Every handler opens its own upstream client and delegates to
`core.services.gamepass_pipeline`; the username route calls the pipeline
directly with the resolved id, never another route.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from adapters.http_client import ClientFactory
from core.config import AppSettings
from core.domain.errors import InvalidUserId, ListingFailure, ResolutionFailure
from core.services.gamepass_pipeline import aggregate_gamepasses, list_games, parse_user_id

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_USER_ID_BODY = {"error": "Invalid userId. Must be a number."}
USER_NOT_FOUND_BODY = {"error": "User not found or Roblox API failed"}


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_client_factory(request: Request) -> ClientFactory:
    return request.app.state.client_factory


def _listing_failed(action: str, exc: ListingFailure) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": f"Failed to fetch {action}", "message": str(exc)})


async def _gamepasses_response(
    identity: Any,
    settings: AppSettings,
    client_factory: ClientFactory,
) -> JSONResponse:
    try:
        async with client_factory() as client:
            result = await aggregate_gamepasses(client=client, settings=settings, identity=identity)
    except ResolutionFailure:
        return JSONResponse(status_code=404, content=USER_NOT_FOUND_BODY)
    except ListingFailure as exc:
        return _listing_failed("gamepasses", exc)
    return JSONResponse(content=result.to_payload())


@router.get("/gamepasses/username/{username}")
async def gamepasses_by_username(
    username: str,
    settings: AppSettings = Depends(get_settings),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    """Resolve a username, then aggregate its gamepasses."""
    return await _gamepasses_response(username, settings, client_factory)


@router.get("/gamepasses/{user_id}")
async def gamepasses_by_user_id(
    user_id: str,
    settings: AppSettings = Depends(get_settings),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    """Aggregate gamepasses for a numeric user id."""
    try:
        numeric_id = parse_user_id(user_id)
    except InvalidUserId:
        return JSONResponse(status_code=400, content=INVALID_USER_ID_BODY)
    return await _gamepasses_response(numeric_id, settings, client_factory)


@router.get("/games/username/{username}")
async def games_by_username(
    username: str,
    settings: AppSettings = Depends(get_settings),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    try:
        async with client_factory() as client:
            result = await list_games(client=client, settings=settings, identity=username)
    except ResolutionFailure:
        return JSONResponse(status_code=404, content=USER_NOT_FOUND_BODY)
    except ListingFailure as exc:
        return _listing_failed("games", exc)
    return JSONResponse(content=result.to_payload())


@router.get("/")
def usage() -> dict[str, str]:
    return {
        "message": "Roblox Gamepass Fetcher API",
        "usage": "GET /gamepasses/:userId, /gamepasses/username/:username or /games/username/:username",
        "example_userId": "/gamepasses/360475870",
        "example_username": "/gamepasses/username/Inspacto",
        "example_games": "/games/username/Inspacto",
    }


@router.get("/health", response_class=PlainTextResponse)
def health() -> str:
    return "OK"
