"""Notion Blog Sync - Notion database to markdown synchronization tool."""

__version__ = "1.0.0"
__author__ = "Notion Blog Sync Contributors"

from notion_blog_sync.config import Settings

__all__ = ["Settings", "__version__"]
