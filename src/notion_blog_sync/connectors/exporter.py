"""
Notion Page Exporter.

Exports a single page as zipped markdown through the export workflow of the
notion.so web app (the same one used by its "Export" menu):
1. Enqueue an exportBlock task for the page
2. Poll the task until Notion reports the download URL
3. Download the zip and read its members into an ExportBundle

Authentication uses the token_v2 session cookie of a logged in browser.
"""

from __future__ import annotations

import asyncio
import io
import logging
import re
import time
import zipfile
from enum import Enum
from typing import Any

import httpx

from notion_blog_sync.config import ExportOptions, Settings
from notion_blog_sync.core.models import BundleFile, ExportBundle


logger = logging.getLogger(__name__)

UUID_RE = re.compile(r"([0-9a-f]{8})-?([0-9a-f]{4})-?([0-9a-f]{4})-?([0-9a-f]{4})-?([0-9a-f]{12})", re.IGNORECASE)


class ExportError(Exception):
    """Raised when a page export fails or times out."""

    def __init__(self, message: str, task_id: str | None = None) -> None:
        super().__init__(message)
        self.task_id = task_id


class TaskState(str, Enum):
    """State of a Notion export task."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILURE = "failure"


def format_block_id(block_id: str) -> str:
    """Normalize a page ID (dashed or not) to dashed UUID form."""
    match = UUID_RE.search(block_id)
    if not match:
        raise ExportError(f"Not a Notion page ID: {block_id}")
    return "-".join(match.groups()).lower()


def read_bundle(entry_id: str, archive: bytes) -> ExportBundle:
    """Read the members of an export zip into an ExportBundle."""
    try:
        zf = zipfile.ZipFile(io.BytesIO(archive))
    except zipfile.BadZipFile as e:
        raise ExportError(f"Export of {entry_id} is not a zip archive") from e

    bundle = ExportBundle(entry_id=entry_id)
    with zf:
        for info in zf.infolist():
            if info.is_dir():
                continue
            bundle.files.append(BundleFile(path=info.filename, content=zf.read(info)))
    return bundle


class NotionExporter:
    """
    Exporter for single Notion pages.

    Example:
        async with NotionExporter(token_v2="v02%3Auser_token...") as exporter:
            bundle = await exporter.export_entry("761668d0e209475595a4da1bbfea1178")
            print(bundle.markdown)
    """

    def __init__(
        self,
        token_v2: str,
        options: ExportOptions | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize exporter.

        Args:
            token_v2: Session cookie of a logged in notion.so session
            options: Export options (optional, uses defaults)
            transport: Custom httpx transport (used by tests)
        """
        self.token_v2 = token_v2
        self.options = options or ExportOptions()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.options.base_url.rstrip("/") + "/",
                cookies={"token_v2": self.token_v2},
                headers={"Content-Type": "application/json"},
                timeout=self.options.timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "NotionExporter":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _post(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        client = await self._get_client()
        try:
            response = await client.post(endpoint, json=body)
        except httpx.TransportError as e:
            raise ExportError(f"Connection error: {e}") from e
        if response.is_error:
            raise ExportError(
                f"Export API {endpoint} failed ({response.status_code}): {response.text}"
            )
        return response.json()

    async def enqueue_export(self, entry_id: str) -> str:
        """Start a markdown export of the page. Returns the task ID."""
        body = {
            "task": {
                "eventName": "exportBlock",
                "request": {
                    "block": {"id": format_block_id(entry_id)},
                    "recursive": False,
                    "exportOptions": {
                        "exportType": "markdown",
                        "timeZone": self.options.time_zone,
                        "locale": self.options.locale,
                    },
                },
            }
        }
        data = await self._post("enqueueTask", body)
        task_id = data.get("taskId")
        if not task_id:
            raise ExportError(f"Export of {entry_id} was not accepted: {data}")
        logger.debug("Enqueued export task %s for %s", task_id, entry_id)
        return task_id

    async def wait_for_export_url(self, task_id: str) -> str:
        """Poll the export task until it reports its download URL."""
        start_time = time.time()

        while time.time() - start_time < self.options.max_wait_seconds:
            data = await self._post("getTasks", {"taskIds": [task_id]})
            results = data.get("results") or [{}]
            task = results[0]
            state = task.get("state", TaskState.NOT_STARTED.value)
            export_url = (task.get("status") or {}).get("exportURL")

            if state == TaskState.SUCCESS.value and export_url:
                return export_url

            if state == TaskState.FAILURE.value:
                raise ExportError(
                    f"Export task {task_id} failed: {task.get('error', 'unknown error')}",
                    task_id,
                )

            logger.debug("Export task %s is %s", task_id, state)
            await asyncio.sleep(self.options.poll_interval_seconds)

        raise ExportError(f"Export task {task_id} timed out", task_id)

    async def download(self, url: str) -> bytes:
        """Download the export archive (a signed URL, sent without the session cookie)."""
        try:
            async with httpx.AsyncClient(
                timeout=self.options.timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.TransportError as e:
            raise ExportError(f"Connection error: {e}") from e
        if response.is_error:
            raise ExportError(f"Export download failed ({response.status_code})")
        return response.content

    async def export_entry(self, entry_id: str) -> ExportBundle:
        """
        Export a page as markdown with its embedded files.

        Args:
            entry_id: Notion page ID

        Returns:
            ExportBundle with every member of the export archive
        """
        task_id = await self.enqueue_export(entry_id)
        url = await self.wait_for_export_url(task_id)
        archive = await self.download(url)
        bundle = read_bundle(entry_id, archive)
        logger.debug("Export of %s holds %d files", entry_id, len(bundle.files))
        return bundle


def create_exporter(settings: Settings) -> NotionExporter:
    """Create a NotionExporter from settings."""
    return NotionExporter(
        token_v2=settings.notion_token.get_secret_value(),
        options=settings.export,
    )
