"""Tests for greyscale.formats module."""

import pytest

from greyscale.errors import UnsupportedFormatError
from greyscale.formats import SUFFIX_FORMATS, SUPPORTED_SUFFIXES, ImageFormat, resolve_format


class TestResolveFormat:
    """Tests for resolve_format."""

    @pytest.mark.parametrize("suffix,expected", list(SUFFIX_FORMATS.items()))
    def test_supported_suffix(self, suffix: str, expected: ImageFormat) -> None:
        assert resolve_format(f"out{suffix}") is expected

    def test_every_format_has_a_suffix(self) -> None:
        assert set(SUFFIX_FORMATS.values()) == set(ImageFormat)
        assert SUPPORTED_SUFFIXES == (
            ".bmp", ".ico", ".gif", ".pcx", ".dcx", ".png", ".tiff", ".wbmp", ".xbm", ".xpm"
        )

    def test_uses_last_suffix_only(self) -> None:
        assert resolve_format("dir.gif/archive.tar.png") is ImageFormat.PNG

    def test_same_suffix_same_format(self) -> None:
        assert resolve_format("a/b/one.tiff") is resolve_format("two.tiff")

    @pytest.mark.parametrize("path", ["result.jpg", "out.PNG", "scan.tif", "image.Bmp", "x.jpeg"])
    def test_unsupported_suffix_raises(self, path: str) -> None:
        with pytest.raises(UnsupportedFormatError) as exc_info:
            resolve_format(path)

        assert exc_info.value.path == path
        assert exc_info.value.suffix in str(exc_info.value)
        assert "not supported" in str(exc_info.value)

    def test_jpg_message_names_suffix(self) -> None:
        with pytest.raises(UnsupportedFormatError, match=r"'\.jpg'"):
            resolve_format("result.jpg")

    def test_missing_suffix_raises(self) -> None:
        with pytest.raises(UnsupportedFormatError) as exc_info:
            resolve_format("output")

        assert exc_info.value.suffix == ""
        assert "no extension" in str(exc_info.value)
