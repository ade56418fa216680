"""
Pytest configuration and shared fixtures.

Provides an in-memory fake of the GitHub gist API (served through
httpx.MockTransport), a fixed clock, test configuration, and an engine
factory wired to all of them.
"""

import asyncio
import json
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest

from hidesync.core.config import HideSyncConfig, clear_cache
from hidesync.core.gist import GistClient
from hidesync.core.storage import MemoryStore
from hidesync.core.sync import SyncEngine

GOOD_TOKEN = "good-token"
FILENAME = "hide-sync.json"


# ==============================================================================
# Fake GitHub API
# ==============================================================================


class FakeGistApi:
    """
    Just enough of the GitHub REST API for the sync engine.

    Attributes:
        tokens: Tokens accepted by every endpoint
        gists: Stored gists by id, each {"description", "public", "files"}
        requests: Every request received, in order
        failures: Forced status codes keyed by (method, path)
        offline: When True every request fails with a connection error
        gates: Per-method events that matching requests wait on before being served
    """

    def __init__(self, tokens: tuple[str, ...] = (GOOD_TOKEN,)) -> None:
        self.tokens = set(tokens)
        self.gists: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.failures: dict[tuple[str, str], int] = {}
        self.offline = False
        self.gates: dict[str, asyncio.Event] = {}
        self._next_id = 1

    def add_gist(self, content: str | None = None, filename: str = FILENAME) -> str:
        """Create a gist directly, optionally holding the sync file."""
        gist_id = f"gist{self._next_id}"
        self._next_id += 1
        files = {} if content is None else {filename: {"filename": filename, "content": content}}
        self.gists[gist_id] = {"description": "", "public": False, "files": files}
        return gist_id

    def content(self, gist_id: str, filename: str = FILENAME) -> str | None:
        file = self.gists[gist_id]["files"].get(filename)
        return file["content"] if file else None

    def calls(self, method: str | None = None) -> list[tuple[str, str]]:
        """(method, path) of received requests, optionally filtered by method."""
        return [
            (r.method, r.url.path)
            for r in self.requests
            if method is None or r.method == method
        ]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)

        method, path = request.method, request.url.path
        if (gate := self.gates.get(method)) is not None:
            await gate.wait()
        if (status := self.failures.get((method, path))) is not None:
            return httpx.Response(status, json={"message": "forced failure"})

        token = request.headers.get("Authorization", "").removeprefix("token ")
        if token not in self.tokens:
            return httpx.Response(401, json={"message": "Bad credentials"})

        if method == "GET" and path == "/user":
            return httpx.Response(200, json={"login": "tester"})

        if method == "POST" and path == "/gists":
            body = json.loads(request.content)
            gist_id = f"gist{self._next_id}"
            self._next_id += 1
            self.gists[gist_id] = {
                "description": body["description"],
                "public": body["public"],
                "files": {
                    name: {"filename": name, "content": f["content"]}
                    for name, f in body["files"].items()
                },
            }
            return httpx.Response(201, json={"id": gist_id, **self.gists[gist_id]})

        if path.startswith("/gists/"):
            gist_id = path.removeprefix("/gists/")
            gist = self.gists.get(gist_id)
            if gist is None:
                return httpx.Response(404, json={"message": "Not Found"})
            if method == "GET":
                return httpx.Response(200, json={"id": gist_id, **gist})
            if method == "PATCH":
                body = json.loads(request.content)
                for name, f in body["files"].items():
                    gist["files"][name] = {"filename": name, "content": f["content"]}
                return httpx.Response(200, json={"id": gist_id, **gist})

        return httpx.Response(404, json={"message": "Not Found"})


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


# ==============================================================================
# Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def _reset_config_cache():
    """Make sure no test sees configuration cached by another."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def fake_api() -> FakeGistApi:
    """Provide a fresh fake gist API."""
    return FakeGistApi()


@pytest.fixture
def gist_client(fake_api: FakeGistApi) -> GistClient:
    """Provide a GistClient talking to the fake API."""
    return GistClient(transport=httpx.MockTransport(fake_api.handler))


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def config(tmp_path) -> HideSyncConfig:
    """Provide a config with a short debounce and a temp state file."""
    return HideSyncConfig(debounce_seconds=0.01, state_path=tmp_path / "state.json")


@pytest.fixture
def storage() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_engine(gist_client: GistClient, config: HideSyncConfig, clock: StepClock):
    """
    Factory building engines that share the fake API.

    Example:
        engine = make_engine()                      # fresh MemoryStore
        engine = make_engine(storage, board_limit=3)
    """

    def _make(store: MemoryStore | None = None, **overrides: Any) -> SyncEngine:
        engine_config = config.model_copy(update=overrides) if overrides else config
        return SyncEngine(
            store if store is not None else MemoryStore(),
            gist_client,
            engine_config,
            clock=clock,
        )

    return _make
