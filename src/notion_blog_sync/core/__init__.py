"""Core sync pipeline components for Notion Blog Sync."""

from notion_blog_sync.core.engine import SyncEngine
from notion_blog_sync.core.fetcher import EntryFetcher
from notion_blog_sync.core.models import Entry, ExportBundle, SyncSummary
from notion_blog_sync.core.slug import make_slug
from notion_blog_sync.core.change_detector import should_refetch
from notion_blog_sync.core.markdown import transform_markdown

__all__ = [
    "SyncEngine",
    "EntryFetcher",
    "Entry",
    "ExportBundle",
    "SyncSummary",
    "make_slug",
    "should_refetch",
    "transform_markdown",
]
