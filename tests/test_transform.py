"""Tests for greyscale.transform module."""

import numpy as np
import pytest

from greyscale.transform import is_greyscale, to_greyscale


def _rgb(pixels: list[list[tuple[int, ...]]]) -> np.ndarray:
    return np.array(pixels, dtype=np.uint8)


class TestToGreyscale:
    """Tests for to_greyscale."""

    def test_red_pixel_becomes_85(self) -> None:
        image = _rgb([[(255, 0, 0), (0, 0, 0)], [(0, 0, 0), (0, 0, 0)]])

        to_greyscale(image)

        assert tuple(image[0, 0]) == (85, 85, 85)

    def test_average_is_truncated(self) -> None:
        """(2 + 2 + 1) / 3 is 1.67 and must become 1, not 2."""
        image = _rgb([[(2, 2, 1), (1, 1, 0)]])

        to_greyscale(image)

        assert tuple(image[0, 0]) == (1, 1, 1)
        assert tuple(image[0, 1]) == (0, 0, 0)

    def test_white_does_not_overflow(self) -> None:
        image = _rgb([[(255, 255, 255), (255, 255, 254)]])

        to_greyscale(image)

        assert tuple(image[0, 0]) == (255, 255, 255)
        assert tuple(image[0, 1]) == (254, 254, 254)

    def test_alpha_is_preserved(self) -> None:
        image = _rgb([[(10, 20, 30, 0), (200, 100, 0, 128)], [(1, 2, 3, 255), (9, 9, 9, 7)]])
        alpha_before = image[..., 3].copy()

        to_greyscale(image)

        np.testing.assert_array_equal(image[..., 3], alpha_before)
        assert tuple(image[0, 0]) == (20, 20, 20, 0)
        assert tuple(image[0, 1]) == (100, 100, 100, 128)

    def test_matches_per_pixel_average(self) -> None:
        rng = np.random.default_rng(0)
        image = rng.integers(0, 256, size=(17, 23, 3), dtype=np.uint8)
        original = image.copy()

        to_greyscale(image)

        for y in range(image.shape[0]):
            for x in range(image.shape[1]):
                r, g, b = (int(v) for v in original[y, x])
                expected = (r + g + b) // 3
                assert tuple(image[y, x]) == (expected, expected, expected)

    def test_is_idempotent(self) -> None:
        rng = np.random.default_rng(1)
        image = rng.integers(0, 256, size=(8, 5, 4), dtype=np.uint8)

        to_greyscale(image)
        once = image.copy()
        to_greyscale(image)

        np.testing.assert_array_equal(image, once)

    @pytest.mark.parametrize("shape", [(0, 0, 3), (0, 4, 3), (3, 0, 4)])
    def test_empty_image_is_noop(self, shape: tuple[int, int, int]) -> None:
        image = np.zeros(shape, dtype=np.uint8)

        to_greyscale(image)

        assert image.shape == shape

    def test_dimensions_preserved(self) -> None:
        image = np.full((6, 9, 3), 77, dtype=np.uint8)

        to_greyscale(image)

        assert image.shape == (6, 9, 3)
        assert image.dtype == np.uint8

    def test_returns_none(self) -> None:
        image = _rgb([[(1, 2, 3)]])
        assert to_greyscale(image) is None

    @pytest.mark.parametrize("shape", [(4, 4), (4, 4, 1), (4, 4, 2), (4, 4, 5)])
    def test_rejects_non_rgb_arrays(self, shape: tuple[int, ...]) -> None:
        with pytest.raises(ValueError, match="RGB or RGBA"):
            to_greyscale(np.zeros(shape, dtype=np.uint8))


class TestIsGreyscale:
    """Tests for is_greyscale."""

    def test_color_image_is_not_greyscale(self) -> None:
        assert is_greyscale(_rgb([[(1, 1, 1), (1, 2, 1)]])) is False

    def test_converted_image_is_greyscale(self) -> None:
        image = _rgb([[(255, 0, 0), (0, 128, 64)]])
        to_greyscale(image)
        assert is_greyscale(image) is True

    def test_alpha_is_ignored(self) -> None:
        assert is_greyscale(_rgb([[(5, 5, 5, 200)]])) is True
