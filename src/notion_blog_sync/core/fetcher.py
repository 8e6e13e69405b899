"""
Entry Fetcher - Page through the blog database and export what changed.

For every entry, in remote order:
- unpublished entries are recorded and dropped (when publishing only)
- the caller's predicate decides whether the entry needs exporting
- included entries are exported, their assets unpacked below the assets
  directory and their markdown transformed for the site
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, AsyncIterator, Callable

from notion_blog_sync.core.markdown import transform_markdown
from notion_blog_sync.core.models import BundleFile, Entry, ExportBundle, SyncSummary
from notion_blog_sync.errors import EntryShapeError

if TYPE_CHECKING:
    from notion_blog_sync.connectors.exporter import NotionExporter
    from notion_blog_sync.connectors.notion_client import NotionClient


logger = logging.getLogger(__name__)

# Inclusion predicate and status callback types
EntryPredicate = Callable[[Entry], bool]
StatusCallback = Callable[[str], None]


class EntryFetcher:
    """
    Fetches and exports database entries.

    Example:
        fetcher = EntryFetcher(notion, exporter, assets_root=Path("static/notion"),
                               assets_dir_path="notion")
        entries = await fetcher.fetch_entries(database_id, summary)
    """

    def __init__(
        self,
        notion: "NotionClient",
        exporter: "NotionExporter",
        assets_root: Path,
        assets_dir_path: str,
        on_status: StatusCallback | None = None,
    ) -> None:
        """
        Initialize fetcher.

        Args:
            notion: Database query client
            exporter: Per-entry exporter
            assets_root: Directory on disk receiving exported assets
            assets_dir_path: Assets path relative to the site root (for links)
            on_status: Optional callback receiving progress messages
        """
        self.notion = notion
        self.exporter = exporter
        self.assets_root = Path(assets_root)
        self.assets_dir_path = assets_dir_path
        self.on_status = on_status

    def _status(self, message: str) -> None:
        if self.on_status:
            self.on_status(message)

    async def iter_pages(self, database_id: str) -> AsyncIterator[dict]:
        """Yield every raw page of the database, following cursors."""
        cursor: str | None = None
        page_count = 0
        while True:
            self._status("Fetching posts list")
            page = await self.notion.query_database(database_id, cursor)
            page_count += 1
            logger.debug("Query page %d returned %d entries", page_count, len(page.results))
            for result in page.results:
                yield result
            cursor = page.next_cursor
            if not cursor:
                break

    async def list_entries(self, database_id: str) -> list[Entry]:
        """Fetch all entries of the database, validating each one."""
        return [Entry.from_page(page) async for page in self.iter_pages(database_id)]

    async def fetch_entries(
        self,
        database_id: str,
        summary: SyncSummary,
        published_only: bool = True,
        should_fetch: EntryPredicate | None = None,
    ) -> list[Entry]:
        """
        Fetch, filter and export entries.

        Args:
            database_id: Notion database ID
            summary: Run summary; unpublished entries are recorded here
            published_only: Drop entries whose published flag is off
            should_fetch: Additional inclusion predicate

        Returns:
            Included entries with their transformed markdown attached
        """
        entries = await self.list_entries(database_id)
        logger.info("Found %d entries in database", len(entries))

        included: list[Entry] = []
        for entry in entries:
            if published_only and not entry.published:
                summary.unpublished.append(entry)
                logger.debug("Entry '%s' is unpublished", entry.title)
                continue
            if should_fetch is not None and not should_fetch(entry):
                continue

            self._status(f'Fetching page "{entry.title}"')
            bundle = await self.exporter.export_entry(entry.id)
            entry.markdown = self.unpack(bundle, entry.last_modified_ts)
            included.append(entry)

        return included

    def unpack(self, bundle: ExportBundle, last_modified_ts: float | None = None) -> str:
        """
        Write the bundle's assets to disk and return its transformed markdown.

        The markdown is stamped with last_modified_ts when given, so the post
        always carries the timestamp the change detector compares against.

        Raises:
            EntryShapeError: If the bundle has no single markdown file or an
                asset path escapes the assets directory
        """
        markdown = bundle.markdown
        for asset in bundle.assets:
            self._write_asset(asset)
        return transform_markdown(markdown, self.assets_dir_path, last_modified_ts)

    def _write_asset(self, asset: BundleFile) -> Path:
        relative = PurePosixPath(asset.path)
        if relative.is_absolute() or ".." in relative.parts:
            raise EntryShapeError(f"Refusing to write asset outside assets directory: {asset.path}")

        target = self.assets_root.joinpath(*relative.parts)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(asset.content)
        logger.debug("Wrote asset %s", target)
        return target
