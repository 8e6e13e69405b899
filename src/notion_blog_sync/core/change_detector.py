"""
Change Detector - Decide whether an entry needs to be exported again.

The last modification time of a post is persisted in its own frontmatter
(``lastModifiedTs``) and compared with the entry's remote timestamp.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any

from notion_blog_sync.core.frontmatter import split_frontmatter
from notion_blog_sync.core.models import LAST_MODIFIED_PROPERTY, Entry
from notion_blog_sync.errors import LocalStateError


logger = logging.getLogger(__name__)


def to_epoch_ms(value: Any) -> float:
    """
    Convert a persisted lastModifiedTs value to epoch milliseconds.

    Numbers are taken as epoch milliseconds. Dates, datetimes and ISO
    strings are converted; naive values are treated as UTC.

    Raises:
        ValueError: If the value is not a point in time
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return float(text)
        except ValueError:
            value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp() * 1000
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc).timestamp() * 1000
    raise ValueError(f"Not a timestamp: {value!r}")


def read_last_modified(post_path: Path) -> float:
    """
    Read the lastModifiedTs of a post on disk.

    Raises:
        LocalStateError: If the post has no usable lastModifiedTs
    """
    data, _ = split_frontmatter(post_path.read_text(encoding="utf-8"))
    value = data.get(LAST_MODIFIED_PROPERTY)
    if value is None:
        raise LocalStateError(str(post_path))
    try:
        return to_epoch_ms(value)
    except ValueError as e:
        raise LocalStateError(str(post_path)) from e


def should_refetch(entry: Entry, post_path: Path) -> bool:
    """
    Whether the entry must be exported (new post or remote is newer).

    Args:
        entry: Remote entry
        post_path: Where the entry's post lives on disk

    Returns:
        True if no post exists or the local copy is strictly older

    Raises:
        LocalStateError: If the post exists without lastModifiedTs
    """
    if not post_path.exists():
        logger.debug("New post %s", post_path)
        return True

    local_ts = read_last_modified(post_path)
    if local_ts < entry.last_modified_ts:
        logger.debug(
            "Post %s is outdated (%s < %s)", post_path, local_ts, entry.last_modified_ts
        )
        return True
    return False
