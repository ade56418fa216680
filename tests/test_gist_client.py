"""Tests for GistClient against a fake GitHub API."""

import json

import httpx
import pytest
from conftest import GOOD_TOKEN, FakeGistApi

from hidesync.core.exceptions import RemoteError, RemoteNetworkError, RemoteStatusError
from hidesync.core.gist import GistClient


class TestRequests:
    """Tests for the shape of outgoing requests."""

    @pytest.mark.asyncio
    async def test_auth_headers(self, fake_api: FakeGistApi, gist_client: GistClient) -> None:
        await gist_client.get_user(GOOD_TOKEN)

        request = fake_api.requests[0]
        assert request.url == httpx.URL("https://api.github.com/user")
        assert request.headers["Authorization"] == f"token {GOOD_TOKEN}"
        assert request.headers["Accept"] == "application/vnd.github+json"

    @pytest.mark.asyncio
    async def test_create_gist_body(self, fake_api: FakeGistApi, gist_client: GistClient) -> None:
        gist_id = await gist_client.create_gist(GOOD_TOKEN, '{"version": 1}')

        body = json.loads(fake_api.requests[0].content)
        assert body == {
            "description": "Hide Sync storage",
            "public": False,
            "files": {"hide-sync.json": {"content": '{"version": 1}'}},
        }
        assert fake_api.content(gist_id) == '{"version": 1}'

    @pytest.mark.asyncio
    async def test_update_file_patches(self, fake_api: FakeGistApi, gist_client: GistClient) -> None:
        gist_id = fake_api.add_gist("old")

        await gist_client.update_file(GOOD_TOKEN, gist_id, "new")

        assert fake_api.calls() == [("PATCH", f"/gists/{gist_id}")]
        assert fake_api.content(gist_id) == "new"

    @pytest.mark.asyncio
    async def test_custom_filename_and_base_url(self, fake_api: FakeGistApi) -> None:
        client = GistClient(
            "https://api.github.com/",
            filename="custom.json",
            transport=httpx.MockTransport(fake_api.handler),
        )
        gist_id = await client.create_gist(GOOD_TOKEN, "x")

        assert client.base_url == "https://api.github.com"
        assert fake_api.content(gist_id, "custom.json") == "x"


class TestFetchFile:
    """Tests for fetch_file()."""

    @pytest.mark.asyncio
    async def test_returns_content(self, fake_api: FakeGistApi, gist_client: GistClient) -> None:
        gist_id = fake_api.add_gist('{"version": 1}')
        assert await gist_client.fetch_file(GOOD_TOKEN, gist_id) == '{"version": 1}'

    @pytest.mark.asyncio
    async def test_missing_file_is_none(self, fake_api: FakeGistApi, gist_client: GistClient) -> None:
        gist_id = fake_api.add_gist(None)
        assert await gist_client.fetch_file(GOOD_TOKEN, gist_id) is None

    @pytest.mark.asyncio
    async def test_empty_file_is_none(self, fake_api: FakeGistApi, gist_client: GistClient) -> None:
        gist_id = fake_api.add_gist("")
        assert await gist_client.fetch_file(GOOD_TOKEN, gist_id) is None

    @pytest.mark.asyncio
    async def test_other_files_ignored(self, fake_api: FakeGistApi, gist_client: GistClient) -> None:
        gist_id = fake_api.add_gist("notes", filename="README.md")
        assert await gist_client.fetch_file(GOOD_TOKEN, gist_id) is None


class TestErrors:
    """Tests for error mapping."""

    @pytest.mark.asyncio
    async def test_rejected_token(self, gist_client: GistClient) -> None:
        with pytest.raises(RemoteStatusError) as exc_info:
            await gist_client.get_user("bad-token")

        assert exc_info.value.status_code == 401
        assert str(exc_info.value) == "Token rejected: 401"

    @pytest.mark.asyncio
    async def test_missing_gist(self, gist_client: GistClient) -> None:
        with pytest.raises(RemoteStatusError, match="Failed to load gist: 404"):
            await gist_client.fetch_file(GOOD_TOKEN, "nope")

    @pytest.mark.asyncio
    async def test_update_failure(self, fake_api: FakeGistApi, gist_client: GistClient) -> None:
        gist_id = fake_api.add_gist("x")
        fake_api.failures[("PATCH", f"/gists/{gist_id}")] = 500

        with pytest.raises(RemoteStatusError, match="Failed to update gist: 500"):
            await gist_client.update_file(GOOD_TOKEN, gist_id, "y")

    @pytest.mark.asyncio
    async def test_network_failure(self, fake_api: FakeGistApi, gist_client: GistClient) -> None:
        fake_api.offline = True

        with pytest.raises(RemoteNetworkError, match="Failed to create gist") as exc_info:
            await gist_client.create_gist(GOOD_TOKEN, "x")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_create_without_id(self) -> None:
        client = GistClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(201, json={}))
        )
        with pytest.raises(RemoteError, match="response has no id"):
            await client.create_gist(GOOD_TOKEN, "x")

    @pytest.mark.asyncio
    async def test_non_json_response(self) -> None:
        client = GistClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        )
        with pytest.raises(RemoteError, match="response is not JSON"):
            await client.get_user(GOOD_TOKEN)

    @pytest.mark.asyncio
    async def test_files_not_a_mapping(
        self, fake_api: FakeGistApi, gist_client: GistClient
    ) -> None:
        gist_id = fake_api.add_gist(None)
        fake_api.gists[gist_id]["files"] = ["not", "a", "dict"]

        with pytest.raises(RemoteError, match="unexpected files listing") as exc_info:
            await gist_client.fetch_file(GOOD_TOKEN, gist_id)

        assert exc_info.value.context == {"gist_id": gist_id}

    @pytest.mark.asyncio
    async def test_content_not_text(self, fake_api: FakeGistApi, gist_client: GistClient) -> None:
        gist_id = fake_api.add_gist("x")
        fake_api.gists[gist_id]["files"]["hide-sync.json"]["content"] = 5

        with pytest.raises(RemoteError, match="file content is not text"):
            await gist_client.fetch_file(GOOD_TOKEN, gist_id)
