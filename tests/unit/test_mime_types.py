"""
Unit tests for content type classification.
"""

from pathlib import Path

import pytest

from webserver.http.mime_types import ContentType, classify, content_type_for_name
from webserver.http.resource import ResolvedResource


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize("name, expected", [
        ("anim.gif", ContentType.GIF),
        ("photo.jpg", ContentType.JPEG),
        ("photo.jpeg", ContentType.JPEG),
        ("logo.png", ContentType.PNG),
        ("index.html", ContentType.HTML),
        ("notes.txt", ContentType.HTML),
        ("archive.tar.gz", ContentType.HTML),
        ("no_extension", ContentType.HTML),
    ])
    def test_file_extensions(self, name: str, expected: ContentType):
        resource = ResolvedResource.file(Path("www") / name)
        assert classify(resource) is expected

    def test_default_page_is_html(self):
        assert classify(ResolvedResource.default_page()) is ContentType.HTML

    def test_not_found_is_html(self):
        assert classify(ResolvedResource.not_found()) is ContentType.HTML

    def test_directory_part_is_ignored(self):
        """Only the file name is matched, not parent directories."""
        resource = ResolvedResource.file(Path("images.png") / "readme")
        assert classify(resource) is ContentType.HTML


class TestContentTypeForName:
    """Tests for the extension table lookup."""

    def test_case_sensitive(self):
        """Upper-case extensions are not in the table."""
        assert content_type_for_name("LOGO.PNG") is ContentType.HTML
        assert content_type_for_name("Photo.JPG") is ContentType.HTML

    def test_suffix_match(self):
        """Matching is a plain suffix check, so a bare ".png" counts."""
        assert content_type_for_name(".png") is ContentType.PNG
        assert content_type_for_name("x.png.html") is ContentType.HTML


class TestContentType:
    """Tests for the ContentType enum."""

    def test_mime_strings(self):
        assert ContentType.HTML.mime == "text/html"
        assert ContentType.GIF.mime == "image/gif"
        assert ContentType.JPEG.mime == "image/jpeg"
        assert ContentType.PNG.mime == "image/png"

    def test_is_binary(self):
        assert not ContentType.HTML.is_binary
        assert ContentType.GIF.is_binary
        assert ContentType.JPEG.is_binary
        assert ContentType.PNG.is_binary
