"""Tests for the markdown transformer."""

import pytest
import yaml

from notion_blog_sync.core.frontmatter import split_frontmatter
from notion_blog_sync.core.markdown import (
    expand_embeds,
    repair_frontmatter,
    rewrite_asset_links,
    stamp_last_modified,
    transform_markdown,
)
from notion_blog_sync.errors import EmbedPropertyNotFoundError, UnsupportedEmbedError


EXPORTED = (
    "# My Post\n\n"
    "lastModifiedTs: 1700000000000\n"
    "published: Yes\n\n"
    "First paragraph.\n\n"
    "Second paragraph."
)


class TestRepairFrontmatter:
    """Tests for repair_frontmatter()."""

    def test_wraps_property_block(self) -> None:
        """Title and property blocks become a delimited frontmatter."""
        assert repair_frontmatter(EXPORTED) == (
            "---\n"
            "lastModifiedTs: 1700000000000\n"
            "published: Yes\n"
            "title: My Post\n"
            "---\n\n"
            "First paragraph.\n\n"
            "Second paragraph."
        )

    def test_idempotent(self) -> None:
        """A repaired document is not wrapped a second time."""
        once = repair_frontmatter(EXPORTED)
        assert repair_frontmatter(once) == once

    def test_title_is_valid_yaml(self) -> None:
        """Titles containing YAML syntax are quoted."""
        doc = repair_frontmatter("# Note: a #hashtag title\n\nkey: value\n\nbody")
        data, body = split_frontmatter(doc)
        assert data["title"] == "Note: a #hashtag title"
        assert data["key"] == "value"
        assert body == "body"

    def test_title_only(self) -> None:
        """A document without a property block gets a title-only frontmatter."""
        assert repair_frontmatter("# Lonely") == "---\ntitle: Lonely\n---\n\n"

    def test_extra_blank_lines_stay_in_body(self) -> None:
        """Only the first two blocks are consumed."""
        doc = repair_frontmatter("# T\n\na: 1\n\nbody\n\n\n\nmore")
        assert doc.endswith("---\n\nbody\n\n\n\nmore")

    def test_property_value_with_colon(self) -> None:
        """Property values that are not valid YAML on their own are quoted."""
        doc = repair_frontmatter("# One\n\nlastModifiedTs: 1700000000000\nSummary: Why X: a story\n\nbody")
        data, body = split_frontmatter(doc)
        assert data["Summary"] == "Why X: a story"
        assert data["lastModifiedTs"] == 1700000000000
        assert body == "body"

    def test_plain_properties_keep_their_types(self) -> None:
        """Properties that already parse are copied unchanged."""
        doc = repair_frontmatter("# One\n\npublished: Yes\ncount: 3\n\nbody")
        assert "published: Yes\ncount: 3\n" in doc
        data, _ = split_frontmatter(doc)
        assert data["published"] is True
        assert data["count"] == 3


class TestStampLastModified:
    """Tests for stamp_last_modified()."""

    def test_adds_missing_field(self) -> None:
        """A frontmatter without lastModifiedTs gains one."""
        doc = stamp_last_modified("---\ntitle: One\n---\n\nbody", 1700000000000.0)
        data, body = split_frontmatter(doc)
        assert data == {"title": "One", "lastModifiedTs": 1700000000000}
        assert body == "body"

    def test_replaces_existing_field(self) -> None:
        """An unusable exported value is overwritten."""
        doc = stamp_last_modified(
            "---\nlastModifiedTs: 1,700,000,000,000\ntitle: One\n---\n\nbody", 1700000000000
        )
        data, _ = split_frontmatter(doc)
        assert data["lastModifiedTs"] == 1700000000000
        assert doc.count("lastModifiedTs") == 1

    def test_document_without_frontmatter(self) -> None:
        """A bare document gets a frontmatter holding the timestamp."""
        doc = stamp_last_modified("body", 5)
        assert doc == "---\nlastModifiedTs: 5\n---\n\nbody"


class TestRewriteAssetLinks:
    """Tests for rewrite_asset_links()."""

    def test_relative_link_becomes_image(self) -> None:
        """Relative media links are rooted at the assets path as images."""
        assert (
            rewrite_asset_links("[pic.png](/abc/pic.png)", "notion")
            == "![pic.png](/notion/abc/pic.png)"
        )

    def test_existing_image_link(self) -> None:
        """Image links are rewritten without doubling the bang."""
        text = "![Image](My%20Post%20761668d0/image.PNG)"
        assert rewrite_asset_links(text, "/notion/") == "![Image](/notion/My%20Post%20761668d0/image.PNG)"

    def test_absolute_url_unchanged(self) -> None:
        """Absolute URLs pass through."""
        text = "[video.mp4](https://cdn.example.com/video.mp4)"
        assert rewrite_asset_links(text, "notion") == text

    def test_non_media_link_unchanged(self) -> None:
        """Links to other files are not touched."""
        text = "[guide](docs/guide.pdf) and [site](https://example.com)"
        assert rewrite_asset_links(text, "notion") == text

    def test_parentheses_in_folder(self) -> None:
        """Folder names with parentheses are kept intact."""
        text = "![x](Post%20(draft)%20abc/x.webp)"
        assert rewrite_asset_links(text, "notion") == "![x](/notion/Post%20(draft)%20abc/x.webp)"

    def test_already_rewritten(self) -> None:
        """Links under the assets path are left alone."""
        text = "![a.gif](/notion/abc/a.gif)"
        assert rewrite_asset_links(text, "notion") == text

    @pytest.mark.parametrize("ext", ["webp", "png", "avif", "jpg", "jpeg", "gif", "mp4", "webm"])
    def test_all_media_extensions(self, ext: str) -> None:
        """Every recognized extension is rewritten."""
        assert rewrite_asset_links(f"[f](d/f.{ext})", "a") == f"![f](/a/d/f.{ext})"


class TestExpandEmbeds:
    """Tests for expand_embeds()."""

    DOC = (
        "---\n"
        "EMBED_CODESANDBOX_demo: https://codesandbox.io/s/xyz\n"
        "title: T\n"
        "---\n\n"
        "Before\n\n{EMBED_CODESANDBOX_demo}\n\nAfter\n"
    )

    def test_codesandbox(self) -> None:
        """The placeholder becomes an iframe pointing at the frontmatter URL."""
        result = expand_embeds(self.DOC)
        assert "{EMBED_CODESANDBOX_demo}" not in result
        assert '<iframe src="https://codesandbox.io/s/xyz"' in result
        assert "height:500px" in result
        assert "border:0" in result
        assert 'sandbox="allow-forms' in result

    def test_unsupported_type(self) -> None:
        """Unknown embed types are rejected."""
        doc = self.DOC.replace("{EMBED_CODESANDBOX_demo}", "{EMBED_YOUTUBE_demo}")
        with pytest.raises(UnsupportedEmbedError, match="Unsupported embed type YOUTUBE") as info:
            expand_embeds(doc)
        assert info.value.embed_type == "YOUTUBE"
        assert info.value.key == "demo"

    def test_missing_property(self) -> None:
        """A placeholder without a matching property lists what is available."""
        doc = self.DOC.replace("{EMBED_CODESANDBOX_demo}", "{EMBED_CODESANDBOX_missing}")
        with pytest.raises(EmbedPropertyNotFoundError, match="EMBED_CODESANDBOX_missing") as info:
            expand_embeds(doc)
        assert info.value.available == ["EMBED_CODESANDBOX_demo", "title"]
        assert "EMBED_CODESANDBOX_demo" in str(info.value)

    def test_no_placeholders(self) -> None:
        """Documents without placeholders are returned as is."""
        assert expand_embeds("---\ntitle: T\n---\n\nplain") == "---\ntitle: T\n---\n\nplain"


class TestTransformMarkdown:
    """Tests for the combined pipeline."""

    def test_full_export(self) -> None:
        """A Notion export becomes a post with frontmatter, assets and embeds."""
        exported = (
            "# Embeds & Images\n\n"
            "lastModifiedTs: 1700000000000\n"
            "EMBED_CODESANDBOX_demo: https://codesandbox.io/s/xyz\n\n"
            "![cover.png](Embeds%20abc/cover.png)\n\n"
            "{EMBED_CODESANDBOX_demo}"
        )
        result = transform_markdown(exported, "notion")
        data, body = split_frontmatter(result)

        assert data["title"] == "Embeds & Images"
        assert data["lastModifiedTs"] == 1700000000000
        assert body.startswith("![cover.png](/notion/Embeds%20abc/cover.png)")
        assert '<iframe src="https://codesandbox.io/s/xyz"' in body
        assert yaml.safe_load(result.split("---")[1]) == data

    def test_transform_stamps_remote_timestamp(self) -> None:
        """The given timestamp wins over the exported one."""
        exported = "# One\n\nlastModifiedTs: 1\npublished: Yes\n\nbody"
        data, _ = split_frontmatter(transform_markdown(exported, "notion", 1700000000000.0))
        assert data["lastModifiedTs"] == 1700000000000
