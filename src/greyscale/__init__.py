"""Convert color images to greyscale by channel averaging."""

from .cli import convert, main
from .codec import (
    AutoCodec,
    ImageCodec,
    OpenCVCodec,
    PillowCodec,
    WandCodec,
    available_codecs,
    get_codec,
)
from .config import GreyscaleConfig, load_config
from .errors import GreyscaleError
from .formats import ImageFormat, resolve_format
from .transform import is_greyscale, to_greyscale

__all__ = [
    "main",
    "convert",
    "ImageCodec",
    "AutoCodec",
    "PillowCodec",
    "OpenCVCodec",
    "WandCodec",
    "available_codecs",
    "get_codec",
    "GreyscaleConfig",
    "load_config",
    "GreyscaleError",
    "ImageFormat",
    "resolve_format",
    "to_greyscale",
    "is_greyscale",
]
