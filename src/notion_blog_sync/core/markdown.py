"""
Markdown Transformer - Turn a Notion page export into a site post.

Three independent passes, applied in order by transform_markdown():
- repair_frontmatter: wrap the exported property block in ``---`` delimiters
- rewrite_asset_links: point relative media links at the site assets path
- expand_embeds: replace {EMBED_<TYPE>_<KEY>} placeholders with iframes
"""

from __future__ import annotations

import re

from notion_blog_sync.core.frontmatter import (
    dump_scalar,
    has_frontmatter,
    property_line,
    set_frontmatter_value,
    split_frontmatter,
)
from notion_blog_sync.core.models import LAST_MODIFIED_PROPERTY
from notion_blog_sync.errors import EmbedPropertyNotFoundError, UnsupportedEmbedError


MEDIA_EXTENSIONS = ("webp", "png", "avif", "jpg", "jpeg", "gif", "mp4", "webm")

# [text](target) or ![text](target) where target ends in a media extension.
# Targets may contain one level of parentheses (page titles end up in folder names).
MEDIA_LINK_RE = re.compile(
    r"!?\[(?P<text>[^\]]*)\]\s*"
    r"\((?P<target>(?:[^()\s]|\([^()\s]*\))*?\.(?:" + "|".join(MEDIA_EXTENSIONS) + r"))\)",
    re.IGNORECASE,
)
ABSOLUTE_URL_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)

EMBED_RE = re.compile(r"\{EMBED_(?P<type>[^_{}\s]+)_(?P<key>[^{}\s]+)\}")
SUPPORTED_EMBEDS = ("CODESANDBOX",)

CODESANDBOX_IFRAME = (
    '<iframe src="{url}"\n'
    '  style="width:100%; height:500px; border:0; border-radius: 4px; overflow:hidden;"\n'
    '  allow="accelerometer; ambient-light-sensor; camera; encrypted-media; geolocation; '
    'gyroscope; hid; microphone; midi; payment; usb; vr; xr-spatial-tracking"\n'
    '  sandbox="allow-forms allow-modals allow-popups allow-presentation '
    'allow-same-origin allow-scripts"\n'
    "></iframe>"
)


def repair_frontmatter(markdown: str) -> str:
    """
    Wrap the property block of a Notion export in frontmatter delimiters.

    Notion exports a page as ``# Title``, a blank line, a loose
    ``key: value`` block, a blank line, then the body. Only the first two
    blank-line separated blocks are consumed; everything after them is body,
    including blocks created by blank lines early in the body. Property values
    that are not valid YAML on their own are quoted. A document
    that already opens with a ``---`` block is returned unchanged.

    Args:
        markdown: Exported markdown

    Returns:
        Markdown with a ``---`` delimited frontmatter holding the title
    """
    if has_frontmatter(markdown):
        return markdown

    title, _, rest = markdown.partition("\n\n")
    properties, _, body = rest.partition("\n\n")
    title = title.strip().lstrip("#").strip()

    lines = ["---"]
    lines.extend(property_line(line) for line in properties.strip("\n").splitlines() if line.strip())
    lines.append(dump_scalar("title", title))
    lines.append("---")
    return "\n".join(lines) + "\n\n" + body


def rewrite_asset_links(markdown: str, assets_dir_path: str) -> str:
    """
    Root relative media links at the site assets path.

    ``[pic.png](abc/pic.png)`` becomes ``![pic.png](/<assets>/abc/pic.png)``.
    Rewritten links are always image links. Absolute URLs and links already
    under the assets path are left alone.
    """
    prefix = "/" + assets_dir_path.strip("/") + "/"

    def replace(match: re.Match[str]) -> str:
        target = match.group("target")
        if ABSOLUTE_URL_RE.match(target) or target.startswith(prefix):
            return match.group(0)
        return f"![{match.group('text')}]({prefix}{target.lstrip('/')})"

    return MEDIA_LINK_RE.sub(replace, markdown)


def expand_embeds(markdown: str) -> str:
    """
    Replace ``{EMBED_<TYPE>_<KEY>}`` placeholders with embed HTML.

    The embed URL comes from the frontmatter property of the same name.

    Raises:
        UnsupportedEmbedError: For any type other than CODESANDBOX
        EmbedPropertyNotFoundError: If the frontmatter has no URL for the placeholder
    """
    if not EMBED_RE.search(markdown):
        return markdown

    data, _ = split_frontmatter(markdown)

    def replace(match: re.Match[str]) -> str:
        embed_type, key = match.group("type"), match.group("key")
        if embed_type not in SUPPORTED_EMBEDS:
            raise UnsupportedEmbedError(embed_type, key)

        url = data.get(f"EMBED_{embed_type}_{key}")
        if not url:
            raise EmbedPropertyNotFoundError(embed_type, key, (str(k) for k in data))
        return CODESANDBOX_IFRAME.format(url=url)

    return EMBED_RE.sub(replace, markdown)


def stamp_last_modified(markdown: str, last_modified_ts: float) -> str:
    """Record the remote modification time (epoch ms) in the frontmatter."""
    value = int(last_modified_ts) if float(last_modified_ts).is_integer() else last_modified_ts
    return set_frontmatter_value(markdown, LAST_MODIFIED_PROPERTY, value)


def transform_markdown(
    markdown: str,
    assets_dir_path: str,
    last_modified_ts: float | None = None,
) -> str:
    """
    Apply frontmatter repair, asset link rewriting and embed expansion.

    When last_modified_ts is given it is written to the frontmatter as
    lastModifiedTs, replacing whatever the export carried.
    """
    markdown = repair_frontmatter(markdown)
    if last_modified_ts is not None:
        markdown = stamp_last_modified(markdown, last_modified_ts)
    markdown = rewrite_asset_links(markdown, assets_dir_path)
    return expand_embeds(markdown)
