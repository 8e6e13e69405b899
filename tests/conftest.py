"""Shared fixtures and fakes for the test suite."""

from __future__ import annotations

import io
import zipfile
from typing import Any

import pytest

from notion_blog_sync.connectors.notion_client import QueryPage
from notion_blog_sync.core.models import BundleFile, ExportBundle


def make_page(
    page_id: str,
    title: str,
    published: bool = True,
    last_modified: float = 1_700_000_000_000,
    **extra: Any,
) -> dict[str, Any]:
    """Build a raw Notion page object as returned by a database query."""
    properties: dict[str, Any] = {
        "Name": {"type": "title", "title": [{"plain_text": title, "text": {"content": title}}]},
        "published": {"type": "checkbox", "checkbox": published},
        "lastModifiedTs": {"type": "formula", "formula": {"type": "number", "number": last_modified}},
    }
    properties.update(extra)
    return {"object": "page", "id": page_id, "properties": properties}


def make_export_markdown(title: str, last_modified: float, body: str = "Hello world.") -> str:
    """Markdown in the shape Notion exports it."""
    return f"# {title}\n\nlastModifiedTs: {int(last_modified)}\npublished: Yes\n\n{body}\n"


def make_zip(files: dict[str, bytes]) -> bytes:
    """Build an export archive in memory."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


class FakeNotion:
    """Database client serving pre-built query pages."""

    def __init__(self, pages: list[list[dict[str, Any]]]) -> None:
        self.pages = pages
        self.cursors: list[str | None] = []

    async def query_database(self, database_id: str, start_cursor: str | None = None) -> QueryPage:
        self.cursors.append(start_cursor)
        index = int(start_cursor) if start_cursor else 0
        if not self.pages:
            return QueryPage()
        next_cursor = str(index + 1) if index + 1 < len(self.pages) else None
        return QueryPage(
            results=self.pages[index],
            next_cursor=next_cursor,
            has_more=next_cursor is not None,
        )


class FakeExporter:
    """Exporter building bundles from the current state of FakeNotion pages."""

    def __init__(self, bundles: dict[str, dict[str, bytes]]) -> None:
        self.bundles = bundles
        self.exported: list[str] = []

    async def export_entry(self, entry_id: str) -> ExportBundle:
        self.exported.append(entry_id)
        files = [BundleFile(path=name, content=data) for name, data in self.bundles[entry_id].items()]
        return ExportBundle(entry_id=entry_id, files=files)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep real secrets and .env files out of the tests."""
    for name in ("NOTION_INTEGRATION_TOKEN", "NOTION_TOKEN", "NOTION_SYNC_DEV_MODE", "NOTION_SYNC_STATIC_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
