"""Output format resolution from file extensions."""

from enum import Enum
from pathlib import Path

from .errors import UnsupportedFormatError


class ImageFormat(Enum):
    """Image formats an output file can be written as."""

    BMP = "bmp"
    ICO = "ico"
    GIF = "gif"
    PCX = "pcx"
    DCX = "dcx"
    PNG = "png"
    TIFF = "tiff"
    WBMP = "wbmp"
    XBM = "xbm"
    XPM = "xpm"


# Matched exactly: ".PNG" and ".tif" are not recognised.
SUFFIX_FORMATS: dict[str, ImageFormat] = {
    ".bmp": ImageFormat.BMP,
    ".ico": ImageFormat.ICO,
    ".gif": ImageFormat.GIF,
    ".pcx": ImageFormat.PCX,
    ".dcx": ImageFormat.DCX,
    ".png": ImageFormat.PNG,
    ".tiff": ImageFormat.TIFF,
    ".wbmp": ImageFormat.WBMP,
    ".xbm": ImageFormat.XBM,
    ".xpm": ImageFormat.XPM,
}

SUPPORTED_SUFFIXES = tuple(SUFFIX_FORMATS)


def resolve_format(path: Path | str) -> ImageFormat:
    """Get the output format for a file path from its extension.

    Args:
        path: Output file path.

    Returns:
        The format matching the path's suffix.

    Raises:
        UnsupportedFormatError: If the suffix is not in ``SUFFIX_FORMATS``.
    """
    suffix = Path(path).suffix
    try:
        return SUFFIX_FORMATS[suffix]
    except KeyError:
        raise UnsupportedFormatError(path, suffix) from None
