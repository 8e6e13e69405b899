"""Filesystem-safe post slugs derived from entry titles."""

from __future__ import annotations

import re

from slugify import slugify

from notion_blog_sync.errors import EntryShapeError


_REMOVED_CHARS = re.compile(r"[_!\[\]]")
_HYPHENATED_CHARS = re.compile(r"[.()/]")
_TRAILING_HYPHENS = re.compile(r"-+$")


def make_slug(title: str) -> str:
    """
    Derive the slug of a post from its title.

    The result is lowercase, free of ``/ . ( ) [ ] ! _`` and has no trailing
    hyphens. Titles that collide produce the same slug; the last entry
    written wins.

    >>> make_slug("Hello / World!.md")
    'hello-world-md'
    """
    slug = slugify(title.replace("/", "-"))
    slug = _REMOVED_CHARS.sub("", slug)
    slug = _HYPHENATED_CHARS.sub("-", slug)
    slug = _TRAILING_HYPHENS.sub("", slug).lower()
    if not slug:
        raise EntryShapeError(f"Title {title!r} does not produce a usable slug")
    return slug
