"""
Notion REST API Client.

Thin async wrapper around the public Notion API, limited to what the sync
needs: paginated database queries authenticated with an integration token.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from notion_blog_sync.config import NotionOptions, Settings


logger = logging.getLogger(__name__)


class NotionAPIError(Exception):
    """Raised when a Notion API request fails."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status = status


@dataclass
class QueryPage:
    """One page of database query results."""

    results: list[dict[str, Any]] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


class NotionClient:
    """
    Notion REST API client.

    Example:
        async with NotionClient(token="secret_...") as notion:
            page = await notion.query_database("8f3c...")
            while page.has_more:
                page = await notion.query_database("8f3c...", page.next_cursor)
    """

    def __init__(
        self,
        token: str,
        options: NotionOptions | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Notion client.

        Args:
            token: Integration token
            options: API options (optional, uses defaults)
            transport: Custom httpx transport (used by tests)
        """
        self.token = token
        self.options = options or NotionOptions()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        """Get request headers with authentication."""
        return {
            "Authorization": f"Bearer {self.token}",
            "Notion-Version": self.options.api_version,
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.options.api_url.rstrip("/") + "/",
                headers=self._get_headers(),
                timeout=self.options.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """
        Make an API request and decode the JSON body.

        Failures are not retried; they surface as NotionAPIError.
        """
        client = await self._get_client()
        try:
            response = await client.request(method, path.lstrip("/"), **kwargs)
        except httpx.TransportError as e:
            raise NotionAPIError(f"Connection error: {e}") from e

        if response.is_error:
            code = None
            message = response.text
            try:
                data = response.json()
                code = data.get("code")
                message = data.get("message", message)
            except ValueError:
                pass
            raise NotionAPIError(
                f"Notion API {method} {path} failed ({response.status_code}): {message}",
                code,
                response.status_code,
            )

        return response.json()

    async def query_database(
        self,
        database_id: str,
        start_cursor: str | None = None,
    ) -> QueryPage:
        """
        Query one page of a database.

        Args:
            database_id: Notion database ID
            start_cursor: Cursor returned by the previous page (None for the first)

        Returns:
            QueryPage with the raw page objects and the next cursor
        """
        body: dict[str, Any] = {"page_size": self.options.page_size}
        if start_cursor:
            body["start_cursor"] = start_cursor

        data = await self._request("POST", f"databases/{database_id}/query", json=body)
        return QueryPage(
            results=data.get("results", []),
            next_cursor=data.get("next_cursor"),
            has_more=bool(data.get("has_more", False)),
        )


def create_notion_client(settings: Settings) -> NotionClient:
    """Create a NotionClient from settings."""
    return NotionClient(
        token=settings.notion_integration_token.get_secret_value(),
        options=settings.notion,
    )
