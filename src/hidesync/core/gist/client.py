"""
Async client for the GitHub gist API.

The client is stateless: the bearer token is passed on every call, so a
token change never requires rebuilding the client. Each call opens a
short-lived httpx.AsyncClient; an optional transport can be injected
(tests use httpx.MockTransport).

API Endpoints:
- Identity check: GET /user
- Create: POST /gists
- Read: GET /gists/{id}
- Update: PATCH /gists/{id}

Example:
    >>> client = GistClient()
    >>> await client.get_user(token)
    >>> gist_id = await client.create_gist(token, document.to_json())
    >>> text = await client.fetch_file(token, gist_id)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from hidesync.core.exceptions import RemoteError, RemoteNetworkError, RemoteStatusError

logger = logging.getLogger(__name__)


class GistClient:
    """
    Client for the subset of the GitHub REST API used for syncing.

    Raises RemoteStatusError for non-2xx responses and RemoteNetworkError
    when no response was received. Callers decide whether those errors are
    fatal (connection validation) or only recorded (background sync).
    """

    API_BASE_URL = "https://api.github.com"
    ACCEPT = "application/vnd.github+json"

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        filename: str = "hide-sync.json",
        description: str = "Hide Sync storage",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API root (no trailing slash needed)
            filename: Gist file holding the serialized document
            description: Description used for newly created gists
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport override
        """
        self.base_url = base_url.rstrip("/")
        self.filename = filename
        self.description = description
        self.timeout = timeout
        self._transport = transport

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"token {token}",
            "Accept": self.ACCEPT,
        }

    async def _request(
        self,
        method: str,
        path: str,
        token: str,
        *,
        action: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Send one authenticated request.

        Args:
            method: HTTP method
            path: Path relative to the API root, with leading slash
            token: Bearer token
            action: Human-readable description used in error messages
            json: Optional JSON body

        Returns:
            The successful response

        Raises:
            RemoteStatusError: If the response status is not 2xx
            RemoteNetworkError: If the request failed without a response
        """
        logger.debug("%s %s", method, path)
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, path, headers=self._headers(token), json=json
                )
        except httpx.HTTPError as e:
            raise RemoteNetworkError(f"{action}: {e}", method=method, path=path) from e

        if not response.is_success:
            raise RemoteStatusError(
                f"{action}: {response.status_code}",
                status_code=response.status_code,
                method=method,
                path=path,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response, action: str) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise RemoteError(f"{action}: response is not JSON") from e
        if not isinstance(body, dict):
            raise RemoteError(f"{action}: unexpected response shape")
        return body

    async def get_user(self, token: str) -> dict[str, Any]:
        """
        Call the identity endpoint to check that a token is accepted.

        Returns:
            The authenticated user's profile
        """
        response = await self._request("GET", "/user", token, action="Token rejected")
        return self._json(response, "Token rejected")

    async def create_gist(self, token: str, content: str) -> str:
        """
        Create a private gist seeded with the given content.

        Args:
            token: Bearer token
            content: Initial content of the sync file

        Returns:
            The new gist's id
        """
        action = "Failed to create gist"
        response = await self._request(
            "POST",
            "/gists",
            token,
            action=action,
            json={
                "description": self.description,
                "public": False,
                "files": {self.filename: {"content": content}},
            },
        )
        gist_id = self._json(response, action).get("id")
        if not gist_id:
            raise RemoteError(f"{action}: response has no id")
        logger.info("Created gist %s", gist_id)
        return str(gist_id)

    async def fetch_file(self, token: str, gist_id: str) -> str | None:
        """
        Read the sync file's content from a gist.

        Returns:
            The file content, or None if the gist has no (or an empty) sync file

        Raises:
            RemoteError: If the gist listing or the file content is malformed
        """
        action = "Failed to load gist"
        response = await self._request("GET", f"/gists/{gist_id}", token, action=action)
        files = self._json(response, action).get("files") or {}
        if not isinstance(files, dict):
            raise RemoteError(f"{action}: unexpected files listing", gist_id=gist_id)
        file = files.get(self.filename)
        if not isinstance(file, dict):
            return None
        content = file.get("content")
        if content is not None and not isinstance(content, str):
            raise RemoteError(f"{action}: file content is not text", gist_id=gist_id)
        return content or None

    async def update_file(self, token: str, gist_id: str, content: str) -> None:
        """Overwrite the sync file in an existing gist."""
        await self._request(
            "PATCH",
            f"/gists/{gist_id}",
            token,
            action="Failed to update gist",
            json={"files": {self.filename: {"content": content}}},
        )
