"""
Notion Blog Sync CLI - Command Line Interface.

Syncs a Notion blog database into markdown posts:

    notion-blog-sync -p notion -m content/posts -i <database-id>

Secrets come from the environment (or a .env file):
    NOTION_INTEGRATION_TOKEN  integration shared with the database
    NOTION_TOKEN              token_v2 cookie used for page exports
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from notion_blog_sync.config import Settings
from notion_blog_sync.connectors.exporter import ExportError, create_exporter
from notion_blog_sync.connectors.notion_client import NotionAPIError, create_notion_client
from notion_blog_sync.core.engine import SyncEngine
from notion_blog_sync.core.models import SyncSummary
from notion_blog_sync.errors import ConfigurationError, SyncError
from notion_blog_sync.utils.display import (
    ProgressDisplay,
    print_error,
    print_info,
    print_summary,
    print_warning,
)
from notion_blog_sync.utils.logger import setup_logging


# Create the Typer app
app = typer.Typer(
    name="notion-blog-sync",
    help="Sync a Notion blog database into markdown posts.",
    add_completion=False,
    rich_markup_mode="rich",
)


async def _sync(
    settings: Settings,
    markdown_dir: Path,
    assets_dir_path: str,
    database_id: str,
    display: ProgressDisplay,
) -> SyncSummary:
    async with create_notion_client(settings) as notion, create_exporter(settings) as exporter:
        engine = SyncEngine(settings, notion, exporter)
        return await engine.run(
            markdown_dir=markdown_dir,
            assets_dir_path=assets_dir_path,
            database_id=database_id,
            on_status=display.update,
        )


@app.command()
def sync(
    notion_assets_dir_path: str = typer.Option(
        ...,
        "--notion-assets-dir-path",
        "-p",
        help="Path of the Notion assets directory relative to your website root. "
        "Assets are embedded images and videos.",
    ),
    markdown_dir_path: Path = typer.Option(
        ...,
        "--markdown-dir-path",
        "-m",
        help="Directory (relative to the current one) where posts are stored as markdown.",
    ),
    notion_blog_db_id: str = typer.Option(
        ...,
        "--notion-blog-db-id",
        "-i",
        help="ID of the Notion database holding the blog posts.",
    ),
) -> None:
    """
    Sync new and changed Notion entries into markdown posts.

    Example:
        notion-blog-sync -p notion -m content/posts -i 8f3c...
    """
    settings = Settings()

    # Validate credentials before any network activity
    try:
        settings.require_credentials()
    except ConfigurationError as e:
        for err in e.errors:
            print_error(err)
        raise typer.Exit(1)

    setup_logging(
        level=settings.logging.level,
        log_file=settings.logging.file,
        format_style=settings.logging.format,
    )

    if not settings.published_only:
        print_warning("Dev mode - unpublished posts are included")

    try:
        with ProgressDisplay() as display:
            summary = asyncio.run(
                _sync(
                    settings,
                    markdown_dir_path,
                    notion_assets_dir_path,
                    notion_blog_db_id,
                    display,
                )
            )
    except (SyncError, NotionAPIError, ExportError) as e:
        print_error(str(e))
        print_info("Posts written before the failure were kept.")
        raise typer.Exit(1)

    print_summary(summary, markdown_dir_path)


if __name__ == "__main__":
    app()
