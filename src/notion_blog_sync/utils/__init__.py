"""Utility modules for Notion Blog Sync."""

from notion_blog_sync.utils.logger import setup_logging
from notion_blog_sync.utils.display import ProgressDisplay

__all__ = ["setup_logging", "ProgressDisplay"]
