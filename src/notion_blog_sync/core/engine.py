"""
Sync Engine - Main orchestration for a sync run.

Coordinates the components of one run:
- Entry fetcher for querying and exporting the database
- Change detector as the inclusion predicate
- Slug generator for post file names
- Post writes and the run summary
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from notion_blog_sync.config import Settings
from notion_blog_sync.core.change_detector import should_refetch
from notion_blog_sync.core.fetcher import EntryFetcher, StatusCallback
from notion_blog_sync.core.models import Entry, SyncSummary, WrittenPost
from notion_blog_sync.core.slug import make_slug

if TYPE_CHECKING:
    from notion_blog_sync.connectors.exporter import NotionExporter
    from notion_blog_sync.connectors.notion_client import NotionClient


logger = logging.getLogger(__name__)


def post_path(markdown_dir: Path, slug: str) -> Path:
    """Location of the post with the given slug."""
    return Path(markdown_dir) / f"{slug}.md"


class SyncEngine:
    """
    Sync engine driving one run.

    Example:
        async with create_notion_client(settings) as notion, \\
                create_exporter(settings) as exporter:
            engine = SyncEngine(settings, notion, exporter)
            summary = await engine.run(
                markdown_dir=Path("content/posts"),
                assets_dir_path="notion",
                database_id="8f3c...",
            )
    """

    def __init__(
        self,
        settings: Settings,
        notion: "NotionClient",
        exporter: "NotionExporter",
    ) -> None:
        """
        Initialize sync engine.

        Args:
            settings: Application settings
            notion: Database query client
            exporter: Per-entry exporter
        """
        self.settings = settings
        self.notion = notion
        self.exporter = exporter

    async def run(
        self,
        markdown_dir: Path | str,
        assets_dir_path: str,
        database_id: str,
        published_only: bool | None = None,
        on_status: StatusCallback | None = None,
    ) -> SyncSummary:
        """
        Sync the database into markdown posts.

        Args:
            markdown_dir: Directory receiving the posts
            assets_dir_path: Assets path relative to the site root
            database_id: Notion database ID
            published_only: Leave out unpublished entries (defaults to settings)
            on_status: Optional callback receiving progress messages

        Returns:
            SyncSummary of written, skipped and unpublished posts
        """
        markdown_dir = Path(markdown_dir)
        if published_only is None:
            published_only = self.settings.published_only
        summary = SyncSummary(start_time=time.time())

        def status(message: str) -> None:
            if on_status:
                on_status(message)

        status(f"Creating {markdown_dir} if it doesn't exist")
        markdown_dir.mkdir(parents=True, exist_ok=True)

        def needs_export(entry: Entry) -> bool:
            slug = make_slug(entry.title)
            if should_refetch(entry, post_path(markdown_dir, slug)):
                return True
            summary.skipped.append(entry)
            status(f'Skipped post "{slug}", is already up to date')
            logger.info("Skipped %s, already up to date", slug)
            return False

        fetcher = EntryFetcher(
            self.notion,
            self.exporter,
            assets_root=self.settings.static_dir / assets_dir_path.strip("/"),
            assets_dir_path=assets_dir_path,
            on_status=on_status,
        )
        entries = await fetcher.fetch_entries(
            database_id,
            summary,
            published_only=published_only,
            should_fetch=needs_export,
        )

        for entry in entries:
            slug = make_slug(entry.title)
            path = post_path(markdown_dir, slug)
            status(f'Writing post "{path}"')
            path.write_text(entry.markdown or "", encoding="utf-8")
            summary.written.append(WrittenPost(slug=slug, title=entry.title, path=str(path)))
            logger.info("Wrote %s", path)

        summary.end_time = time.time()
        return summary
