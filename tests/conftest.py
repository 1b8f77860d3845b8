from __future__ import annotations

import asyncio
import json
import re
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from adapters.http_client import build_async_client, client_factory_for
from api.app import create_app
from core.config import AppSettings

_GAMES_PATH = re.compile(r"^/v2/users/(\d+)/games$")
_PAGES_PATH = re.compile(r"^/game-passes/v1/universes/(\d+)/game-passes$")
_DETAIL_PATH = re.compile(r"^/game-passes/v1/game-passes/(\d+)/product-info$")


class FakeRoblox:
    """In-memory stand-in for the four Roblox endpoints.

    Every request is recorded in `calls` so tests can assert which upstream
    endpoints were (or were not) hit.
    """

    def __init__(self) -> None:
        self.users: dict[str, int] = {}
        self.users_status = 200
        self.experiences: dict[int, list[dict[str, Any]]] = {}
        self.experiences_status = 200
        # universe -> {page_token: payload}
        self.pages: dict[int, dict[str, dict[str, Any]]] = {}
        self.failing_pages: set[tuple[int, str]] = set()
        self.details: dict[int, dict[str, Any]] = {}
        self.failing_details: set[int] = set()
        self.detail_delays: dict[int, float] = {}
        self.calls: list[httpx.Request] = []

    # -- helpers -----------------------------------------------------------

    def add_experience(self, user_id: int, universe_id: int, place_id: int | None, name: str = "") -> None:
        entry: dict[str, Any] = {"id": universe_id, "name": name or f"Game {universe_id}"}
        if place_id is not None:
            entry["rootPlace"] = {"id": place_id, "type": "Place"}
        self.experiences.setdefault(user_id, []).append(entry)

    def add_page(self, universe_id: int, items: list[dict[str, Any]], token: str = "", next_token: str | None = None) -> None:
        payload: dict[str, Any] = {"data": items}
        if next_token is not None:
            payload["nextPageToken"] = next_token
        self.pages.setdefault(universe_id, {})[token] = payload

    def paths(self, fragment: str) -> list[str]:
        return [str(r.url) for r in self.calls if fragment in r.url.path]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    # -- routing -----------------------------------------------------------

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        host = request.url.host
        path = request.url.path

        if host == "users.roblox.com" and path == "/v1/usernames/users":
            if self.users_status != 200:
                return httpx.Response(self.users_status, json={"errors": []})
            body = json.loads(request.content)
            data = [
                {"requestedUsername": name, "id": self.users[name], "name": name}
                for name in body.get("usernames", [])
                if name in self.users
            ]
            return httpx.Response(200, json={"data": data})

        match = _GAMES_PATH.match(path)
        if host == "games.roblox.com" and match:
            if self.experiences_status != 200:
                return httpx.Response(self.experiences_status, json={"errors": [{"message": "boom"}]})
            data = self.experiences.get(int(match.group(1)), [])
            return httpx.Response(200, json={"data": data, "nextPageCursor": None})

        match = _PAGES_PATH.match(path)
        if host == "apis.roblox.com" and match:
            universe_id = int(match.group(1))
            token = request.url.params.get("pageToken", "")
            if (universe_id, token) in self.failing_pages:
                return httpx.Response(503, json={"errors": []})
            payload = self.pages.get(universe_id, {}).get(token, {"data": []})
            return httpx.Response(200, json=payload)

        match = _DETAIL_PATH.match(path)
        if host == "apis.roblox.com" and match:
            gamepass_id = int(match.group(1))
            delay = self.detail_delays.get(gamepass_id)
            if delay:
                await asyncio.sleep(delay)
            if gamepass_id in self.failing_details:
                return httpx.Response(500, json={"errors": []})
            return httpx.Response(200, json=self.details.get(gamepass_id, {}))

        return httpx.Response(404, json={"errors": [{"message": "not found"}]})


@pytest.fixture(name="settings")
def settings_fixture() -> AppSettings:
    return AppSettings(_env_file=None, http_timeout_seconds=5)


@pytest.fixture(name="fake")
def fake_fixture() -> FakeRoblox:
    return FakeRoblox()


@pytest.fixture(name="run")
def run_fixture(fake: FakeRoblox, settings: AppSettings):
    """Run a coroutine factory `fn(client)` against the fake upstream."""

    def runner(fn):
        async def main():
            async with build_async_client(settings, transport=fake.transport) as client:
                return await fn(client)

        return asyncio.run(main())

    return runner


@pytest.fixture(name="client")
def client_fixture(fake: FakeRoblox, settings: AppSettings):
    app = create_app(settings, client_factory=client_factory_for(settings, transport=fake.transport))
    with TestClient(app) as client:
        yield client
