"""
Frontmatter parsing helpers.

A frontmatter block is YAML between a leading ``---`` line and the next
``---`` line.
"""

from __future__ import annotations

import re
from typing import Any

import yaml

from notion_blog_sync.errors import FrontmatterError


FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)


def has_frontmatter(text: str) -> bool:
    """Whether the document opens with a ``---`` delimited block."""
    return FRONTMATTER_RE.match(text) is not None


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """
    Split a document into its frontmatter mapping and body.

    Documents without frontmatter (or with a block that is not a YAML
    mapping) yield an empty mapping and the unchanged text.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid frontmatter: {e}") from e
    if not isinstance(data, dict):
        return {}, text
    return data, text[match.end():].lstrip("\r\n")


def dump_scalar(key: str, value: Any) -> str:
    """Render a single ``key: value`` frontmatter line, quoting when needed."""
    return yaml.safe_dump(
        {key: value},
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    ).strip()


def property_line(line: str) -> str:
    """
    Make a loose ``key: value`` line safe to embed in a YAML block.

    Lines that already parse as a single mapping entry are kept as they are,
    so ``published: Yes`` stays a boolean. Other values are re-emitted as
    quoted scalars. Lines without a ``": "`` separator pass through.
    """
    key, sep, value = line.partition(": ")
    if not sep:
        return line
    try:
        parsed = yaml.safe_load(line)
    except yaml.YAMLError:
        parsed = None
    if isinstance(parsed, dict) and len(parsed) == 1:
        return line
    return dump_scalar(key.strip(), value.strip())


def set_frontmatter_value(text: str, key: str, value: Any) -> str:
    """
    Set a top level frontmatter key, replacing any line already holding it.

    Documents without frontmatter get a block holding only that key.
    """
    line = dump_scalar(key, value)
    match = FRONTMATTER_RE.match(text)
    if not match:
        return f"---\n{line}\n---\n\n{text}"

    key_re = re.compile(rf"{re.escape(key)}\s*:")
    lines = [existing for existing in match.group(1).splitlines() if not key_re.match(existing)]
    lines.append(line)
    return "---\n" + "\n".join(lines) + "\n---\n" + text[match.end():]
