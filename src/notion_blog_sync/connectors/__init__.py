"""Remote collaborators for Notion Blog Sync."""

from notion_blog_sync.connectors.notion_client import NotionClient, NotionAPIError
from notion_blog_sync.connectors.exporter import NotionExporter, ExportError

__all__ = ["NotionClient", "NotionAPIError", "NotionExporter", "ExportError"]
