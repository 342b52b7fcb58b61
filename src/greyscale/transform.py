"""Average-of-channels greyscale conversion."""

import numpy as np


def _check_image(image: np.ndarray) -> None:
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected an RGB or RGBA image, got array of shape {image.shape}")


def to_greyscale(image: np.ndarray) -> None:
    """Convert an RGB or RGBA image to greyscale in place.

    Each pixel's red, green and blue channels are replaced with the truncated
    integer mean of the three. Alpha, when present, is left as is.

    Args:
        image: Array of shape (H, W, 3) or (H, W, 4), channels in R, G, B[, A] order.
    """
    _check_image(image)
    rgb = image[..., :3]
    # Sum in a wider type so 255 + 255 + 255 does not wrap
    average = rgb.sum(axis=2, dtype=np.uint16) // 3
    rgb[...] = average[..., np.newaxis].astype(image.dtype)


def is_greyscale(image: np.ndarray) -> bool:
    """Check whether every pixel has equal red, green and blue values."""
    _check_image(image)
    red, green, blue = image[..., 0], image[..., 1], image[..., 2]
    return bool(np.array_equal(red, green) and np.array_equal(green, blue))
