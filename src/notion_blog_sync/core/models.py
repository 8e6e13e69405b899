"""
Data model for the sync pipeline.

Notion pages arrive as loosely typed JSON. Entry.from_page validates the
properties the sync relies on up front, so a schema mismatch fails with a
named error instead of a KeyError deep inside the run.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

from notion_blog_sync.errors import EntryShapeError


# Property names are fixed by convention on the blog database
TITLE_PROPERTY = "Name"
PUBLISHED_PROPERTY = "published"
LAST_MODIFIED_PROPERTY = "lastModifiedTs"


def _plain_text(fragments: list[dict[str, Any]]) -> str:
    """Join a Notion rich text array into plain text."""
    parts = []
    for fragment in fragments:
        if "plain_text" in fragment:
            parts.append(fragment["plain_text"])
        else:
            parts.append(fragment.get("text", {}).get("content", ""))
    return "".join(parts)


@dataclass
class Entry:
    """A Notion database entry (one blog post)."""

    id: str
    title: str
    published: bool
    last_modified_ts: float  # epoch milliseconds
    properties: dict[str, Any] = field(default_factory=dict)
    markdown: str | None = None

    @classmethod
    def from_page(cls, page: dict[str, Any]) -> "Entry":
        """
        Build an Entry from a raw page object of a database query.

        Raises:
            EntryShapeError: If the id or a required property is missing
        """
        page_id = page.get("id")
        if not page_id:
            raise EntryShapeError("Notion page has no id")

        properties = page.get("properties") or {}

        title_prop = properties.get(TITLE_PROPERTY)
        if not title_prop or not title_prop.get("title"):
            raise EntryShapeError(
                f"Entry {page_id} has no '{TITLE_PROPERTY}' title property"
            )
        title = _plain_text(title_prop["title"]).strip()
        if not title:
            raise EntryShapeError(f"Entry {page_id} has an empty title")

        published_prop = properties.get(PUBLISHED_PROPERTY)
        if published_prop is None or "checkbox" not in published_prop:
            raise EntryShapeError(
                f"Entry '{title}' has no '{PUBLISHED_PROPERTY}' checkbox property"
            )

        modified_prop = properties.get(LAST_MODIFIED_PROPERTY) or {}
        modified = (modified_prop.get("formula") or {}).get("number")
        if modified is None:
            raise EntryShapeError(
                f"Entry '{title}' has no '{LAST_MODIFIED_PROPERTY}' formula number"
            )

        residual = {
            name: value
            for name, value in properties.items()
            if name not in (TITLE_PROPERTY, PUBLISHED_PROPERTY, LAST_MODIFIED_PROPERTY)
        }

        return cls(
            id=page_id,
            title=title,
            published=bool(published_prop["checkbox"]),
            last_modified_ts=float(modified),
            properties=residual,
        )


@dataclass
class BundleFile:
    """A single member of an export archive."""

    path: str
    content: bytes

    @property
    def is_markdown(self) -> bool:
        return self.path.lower().endswith(".md")

    @property
    def folder(self) -> str:
        """Top level folder of the member ("" for files at the archive root)."""
        parts = PurePosixPath(self.path).parts
        return parts[0] if len(parts) > 1 else ""


@dataclass
class ExportBundle:
    """Result of exporting one entry: markdown body plus asset files."""

    entry_id: str
    files: list[BundleFile] = field(default_factory=list)

    @property
    def markdown_files(self) -> list[BundleFile]:
        return [f for f in self.files if f.is_markdown]

    @property
    def assets(self) -> list[BundleFile]:
        return [f for f in self.files if not f.is_markdown]

    @property
    def markdown(self) -> str:
        """
        The decoded, trimmed markdown body.

        Raises:
            EntryShapeError: If the bundle does not hold exactly one markdown file
        """
        documents = self.markdown_files
        if not documents:
            raise EntryShapeError(f"Export of {self.entry_id} contains no markdown file")
        if len(documents) > 1:
            names = ", ".join(d.path for d in documents)
            raise EntryShapeError(
                f"Export of {self.entry_id} contains several markdown files: {names}"
            )
        return documents[0].content.decode("utf-8").strip()


@dataclass
class WrittenPost:
    """A post written during the run."""

    slug: str
    title: str
    path: str


@dataclass
class SyncSummary:
    """Outcome of one sync run."""

    written: list[WrittenPost] = field(default_factory=list)
    skipped: list[Entry] = field(default_factory=list)
    unpublished: list[Entry] = field(default_factory=list)
    start_time: float = 0.0
    end_time: float = 0.0

    @property
    def duration_seconds(self) -> float:
        """Duration in seconds."""
        if self.end_time and self.start_time:
            return self.end_time - self.start_time
        if self.start_time:
            return time.time() - self.start_time
        return 0.0
