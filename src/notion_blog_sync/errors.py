"""
Error taxonomy for Notion Blog Sync.

Every error raised by the sync pipeline derives from SyncError. None of them
are recovered from: the run aborts and already written files stay in place.
"""

from __future__ import annotations

from typing import Iterable


class SyncError(Exception):
    """Base exception for sync failures."""


class ConfigurationError(SyncError):
    """Raised when a required secret or setting is missing."""

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class LocalStateError(SyncError):
    """Raised when a post on disk is missing its lastModifiedTs field."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Post {path} has no lastModifiedTs. "
            "Delete the local markdown and rerun"
        )
        self.path = path


class EntryShapeError(SyncError):
    """Raised when a Notion entry or its export has an unexpected shape."""


class EmbedError(SyncError):
    """Base exception for embed placeholder failures."""

    def __init__(self, message: str, embed_type: str, key: str) -> None:
        super().__init__(message)
        self.embed_type = embed_type
        self.key = key


class UnsupportedEmbedError(EmbedError):
    """Raised for an embed placeholder of an unknown type."""

    def __init__(self, embed_type: str, key: str) -> None:
        super().__init__(
            f"Unsupported embed type {embed_type} (in EMBED_{embed_type}_{key})",
            embed_type,
            key,
        )


class EmbedPropertyNotFoundError(EmbedError):
    """Raised when the frontmatter has no URL for an embed placeholder."""

    def __init__(self, embed_type: str, key: str, available: Iterable[str]) -> None:
        self.property_name = f"EMBED_{embed_type}_{key}"
        self.available = sorted(available)
        super().__init__(
            f"Embed property {self.property_name} not found. "
            f"Available properties: {', '.join(self.available) or '(none)'}",
            embed_type,
            key,
        )


class FrontmatterError(SyncError):
    """Raised when a frontmatter block is not valid YAML."""
