"""Image codec back ends.

The converter only needs two capabilities from an image library: turn file
bytes into an RGB(A) pixel array and turn a pixel array back into bytes for a
given format. ``ImageCodec`` describes that contract. ``PillowCodec``,
``OpenCVCodec`` and ``WandCodec`` (ImageMagick) implement it on top of their
libraries, and ``AutoCodec`` routes each format to a back end that can write
it. Library exceptions are translated into ``DecodeParseError`` and
``EncodeError`` here so callers never see them.
"""

from __future__ import annotations

import io
from typing import Any, Protocol

import numpy as np
from PIL import Image

from .errors import ConfigError, DecodeParseError, EncodeError
from .formats import ImageFormat

DEFAULT_CODEC = "auto"

# ICO directory entries store each side in one byte
ICO_MAX_SIZE = 256


class ImageCodec(Protocol):
    """Decode/encode capability required by the converter."""

    name: str

    def decode(self, data: bytes) -> np.ndarray:
        """Decode image file bytes into a (H, W, 3|4) uint8 RGB(A) array."""
        ...

    def encode(self, image: np.ndarray, fmt: ImageFormat, options: dict[str, Any]) -> bytes:
        """Encode an RGB(A) array as ``fmt`` and return the file bytes."""
        ...


def _check_encodable(image: np.ndarray, fmt: ImageFormat) -> None:
    height, width = image.shape[:2]
    if height == 0 or width == 0:
        raise EncodeError(fmt.name, f"image has no pixels ({width}x{height})")
    if fmt is ImageFormat.ICO and (width > ICO_MAX_SIZE or height > ICO_MAX_SIZE):
        raise EncodeError(
            fmt.name,
            f"image is {width}x{height}, icons are at most {ICO_MAX_SIZE}x{ICO_MAX_SIZE}",
        )


def _scale_to_8_bit(values: np.ndarray) -> np.ndarray:
    """Map samples in the 16-bit range to 8 bits by keeping the high byte."""
    return (np.clip(values, 0, 0xFFFF).astype(np.uint16) >> 8).astype(np.uint8)


class PillowCodec:
    """Codec backed by Pillow."""

    name = "pillow"

    # Pillow has no writer for DCX, WBMP or XPM
    FORMATS = {
        ImageFormat.BMP: "BMP",
        ImageFormat.ICO: "ICO",
        ImageFormat.GIF: "GIF",
        ImageFormat.PCX: "PCX",
        ImageFormat.PNG: "PNG",
        ImageFormat.TIFF: "TIFF",
        ImageFormat.XBM: "XBM",
    }

    # Target mode for formats that cannot store RGB(A) directly
    TARGET_MODES = {
        ImageFormat.PCX: "RGB",
        ImageFormat.XBM: "1",
    }

    def decode(self, data: bytes) -> np.ndarray:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                if _pillow_is_high_depth(img):
                    grey = _scale_to_8_bit(np.array(img))
                    return np.repeat(grey[..., np.newaxis], 3, axis=2)
                mode = "RGBA" if _pillow_has_alpha(img) else "RGB"
                return np.array(img.convert(mode))
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            raise DecodeParseError(str(e) or type(e).__name__) from e

    def encode(self, image: np.ndarray, fmt: ImageFormat, options: dict[str, Any]) -> bytes:
        pil_format = self.FORMATS.get(fmt)
        if pil_format is None:
            raise EncodeError(fmt.name, "Pillow cannot write this format")
        _check_encodable(image, fmt)

        img = Image.fromarray(np.ascontiguousarray(image))
        target_mode = self.TARGET_MODES.get(fmt)
        if target_mode is not None and img.mode != target_mode:
            img = img.convert(target_mode)

        params = dict(options)
        if fmt is ImageFormat.ICO:
            # Otherwise Pillow resamples to its default icon sizes
            params["sizes"] = [img.size]

        buffer = io.BytesIO()
        try:
            img.save(buffer, format=pil_format, **params)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise EncodeError(fmt.name, str(e) or type(e).__name__) from e
        return buffer.getvalue()


def _pillow_has_alpha(img: Image.Image) -> bool:
    return "A" in img.getbands() or "transparency" in img.info


def _pillow_is_high_depth(img: Image.Image) -> bool:
    # 16-bit, 32-bit integer and float greyscale; convert("RGB") would clip these
    return img.mode in ("I", "F") or img.mode.startswith("I;16")


class OpenCVCodec:
    """Codec backed by OpenCV.

    OpenCV works in BGR(A) order; arrays are converted to RGB(A) on decode and
    back on encode. Encoder options are given by ``cv2`` write flag name, e.g.
    ``{"IMWRITE_PNG_COMPRESSION": 9}``.
    """

    name = "opencv"

    EXTENSIONS = {
        ImageFormat.BMP: ".bmp",
        ImageFormat.PNG: ".png",
        ImageFormat.TIFF: ".tiff",
    }

    def decode(self, data: bytes) -> np.ndarray:
        import cv2

        buffer = np.frombuffer(data, dtype=np.uint8)
        try:
            img = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
        except cv2.error as e:
            raise DecodeParseError(str(e)) from e
        if img is None:
            raise DecodeParseError("OpenCV could not decode the data")

        if img.dtype == np.uint16:
            img = _scale_to_8_bit(img)
        elif img.dtype != np.uint8:
            raise DecodeParseError(f"unsupported sample type {img.dtype}")

        if img.ndim == 3 and img.shape[2] == 1:
            img = img[..., 0]
        if img.ndim == 2:
            return cv2.cvtColor(img, cv2.COLOR_GRAY2RGB)
        if img.shape[2] == 4:
            return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)

    def _write_params(self, fmt: ImageFormat, options: dict[str, Any]) -> list[int]:
        import cv2

        params: list[int] = []
        for key, value in options.items():
            flag = getattr(cv2, key, None) if key.startswith("IMWRITE_") else None
            if not isinstance(flag, int):
                raise EncodeError(fmt.name, f"unknown OpenCV encoder option '{key}'")
            try:
                params.extend([flag, int(value)])
            except (TypeError, ValueError) as e:
                raise EncodeError(fmt.name, f"option '{key}' needs an integer, got {value!r}") from e
        return params

    def encode(self, image: np.ndarray, fmt: ImageFormat, options: dict[str, Any]) -> bytes:
        import cv2

        ext = self.EXTENSIONS.get(fmt)
        if ext is None:
            raise EncodeError(fmt.name, "OpenCV cannot write this format")
        _check_encodable(image, fmt)
        params = self._write_params(fmt, options)

        if image.shape[2] == 4:
            bgr = cv2.cvtColor(image, cv2.COLOR_RGBA2BGRA)
        else:
            bgr = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)

        try:
            ok, encoded = cv2.imencode(ext, bgr, params)
        except cv2.error as e:
            raise EncodeError(fmt.name, str(e)) from e
        if not ok:
            raise EncodeError(fmt.name, "OpenCV encoder reported failure")
        return encoded.tobytes()


class WandCodec:
    """Codec backed by ImageMagick through Wand.

    Needs the ImageMagick shared library at run time. When it cannot be
    loaded, decode and encode fail with the usual codec errors. Encoder
    options are set as ImageMagick ``-define`` values.
    """

    name = "wand"

    FORMATS = {
        ImageFormat.BMP: "BMP",
        ImageFormat.ICO: "ICO",
        ImageFormat.GIF: "GIF",
        ImageFormat.PCX: "PCX",
        ImageFormat.DCX: "DCX",
        ImageFormat.PNG: "PNG",
        ImageFormat.TIFF: "TIFF",
        ImageFormat.WBMP: "WBMP",
        ImageFormat.XBM: "XBM",
        ImageFormat.XPM: "XPM",
    }

    def decode(self, data: bytes) -> np.ndarray:
        try:
            from wand.exceptions import WandException
            from wand.image import Image as WandImage
        except ImportError as e:
            raise DecodeParseError(f"ImageMagick is not available ({e})") from e

        try:
            with WandImage(blob=data) as img:
                channel_map = "RGBA" if img.alpha_channel else "RGB"
                pixels = img.export_pixels(channel_map=channel_map, storage="char")
                shape = (img.height, img.width, len(channel_map))
        except (WandException, ValueError, TypeError) as e:
            raise DecodeParseError(str(e) or type(e).__name__) from e
        return np.array(pixels, dtype=np.uint8).reshape(shape)

    def encode(self, image: np.ndarray, fmt: ImageFormat, options: dict[str, Any]) -> bytes:
        magick_format = self.FORMATS[fmt]
        _check_encodable(image, fmt)
        try:
            from wand.exceptions import WandException
            from wand.image import Image as WandImage
        except ImportError as e:
            raise EncodeError(fmt.name, f"ImageMagick is not available ({e})") from e

        channel_map = "RGBA" if image.shape[2] == 4 else "RGB"
        try:
            with WandImage.from_array(np.ascontiguousarray(image), channel_map=channel_map) as img:
                for key, value in options.items():
                    img.options[key] = str(value)
                return img.make_blob(format=magick_format)
        except (WandException, ValueError, TypeError) as e:
            raise EncodeError(fmt.name, str(e) or type(e).__name__) from e


class AutoCodec:
    """Pillow where it can, ImageMagick for the rest.

    Encoding goes to Pillow for the formats it writes and to ImageMagick for
    DCX, WBMP and XPM. Decoding tries Pillow first and ImageMagick second,
    so inputs such as WBMP can be read too.
    """

    name = "auto"

    def __init__(self) -> None:
        self.pillow = PillowCodec()
        self.wand = WandCodec()

    def decode(self, data: bytes) -> np.ndarray:
        try:
            return self.pillow.decode(data)
        except DecodeParseError as pillow_error:
            try:
                return self.wand.decode(data)
            except DecodeParseError:
                raise pillow_error from None

    def encoder_for(self, fmt: ImageFormat) -> ImageCodec:
        """Get the back end that writes ``fmt``."""
        if fmt in PillowCodec.FORMATS:
            return self.pillow
        return self.wand

    def encode(self, image: np.ndarray, fmt: ImageFormat, options: dict[str, Any]) -> bytes:
        return self.encoder_for(fmt).encode(image, fmt, options)


CODECS: dict[str, type[ImageCodec]] = {
    AutoCodec.name: AutoCodec,
    PillowCodec.name: PillowCodec,
    OpenCVCodec.name: OpenCVCodec,
    WandCodec.name: WandCodec,
}


def available_codecs() -> list[str]:
    """Names accepted by ``get_codec``."""
    return list(CODECS)


def get_codec(name: str = DEFAULT_CODEC) -> ImageCodec:
    """Get a codec back end by name.

    Raises:
        ConfigError: If no back end has that name.
    """
    try:
        return CODECS[name]()
    except KeyError:
        choices = ", ".join(available_codecs())
        raise ConfigError(f"Unknown codec '{name}'. Choose one of: {choices}.") from None
