from __future__ import annotations

import numpy as np
import pytest

from imgfind import ColorMode, ConversionError, Image
from imgfind.matching import to_grayscale


def test_single_channel_bytes_are_reshaped_row_major() -> None:
    image = Image(width=3, height=2, data=bytes([1, 2, 3, 4, 5, 6]), channels=1)

    gray = to_grayscale(image)

    assert gray.dtype == np.uint8
    assert gray.tolist() == [[1, 2, 3], [4, 5, 6]]


def test_result_is_a_fresh_buffer() -> None:
    pixels = np.arange(12, dtype=np.uint8).reshape(3, 4)
    image = Image(width=4, height=3, data=pixels, channels=1)

    gray = to_grayscale(image)
    gray[0, 0] = 200

    assert pixels[0, 0] == 0


def test_neutral_colors_keep_their_intensity() -> None:
    values = np.array([0, 17, 128, 255], dtype=np.uint8)
    pixels = np.repeat(values[None, :, None], 3, axis=2)
    image = Image(width=4, height=1, data=pixels, channels=3, color_mode=ColorMode.RGB)

    assert to_grayscale(image).tolist() == [[0, 17, 128, 255]]


def test_channel_order_follows_color_mode() -> None:
    rng = np.random.default_rng(1)
    rgb = rng.integers(0, 256, size=(5, 6, 3), dtype=np.uint8)
    bgr = np.ascontiguousarray(rgb[:, :, ::-1])

    from_rgb = to_grayscale(Image(width=6, height=5, data=rgb, channels=3, color_mode=ColorMode.RGB))
    from_bgr = to_grayscale(Image(width=6, height=5, data=bgr, channels=3, color_mode=ColorMode.BGR))

    np.testing.assert_array_equal(from_rgb, from_bgr)


def test_red_uses_bt601_weight() -> None:
    red = np.array([[[255, 0, 0]]], dtype=np.uint8)
    image = Image(width=1, height=1, data=red, channels=3, color_mode=ColorMode.RGB)

    assert int(to_grayscale(image)[0, 0]) == pytest.approx(0.299 * 255, abs=1)


def test_alpha_is_discarded() -> None:
    opaque = np.array([[[10, 20, 30, 255]]], dtype=np.uint8)
    clear = np.array([[[10, 20, 30, 0]]], dtype=np.uint8)

    a = to_grayscale(Image(width=1, height=1, data=opaque, channels=4))
    b = to_grayscale(Image(width=1, height=1, data=clear, channels=4))

    np.testing.assert_array_equal(a, b)


def test_gray_alpha_keeps_gray_channel() -> None:
    image = Image(width=2, height=1, data=bytes([40, 255, 90, 0]), channels=2)

    assert to_grayscale(image).tolist() == [[40, 90]]


@pytest.mark.parametrize(
    "image",
    [
        Image(width=2, height=2, data=bytes(11), channels=3),
        Image(width=0, height=2, data=b"", channels=1),
        Image(width=1, height=1, data=bytes(5), channels=5),
        Image(width=1, height=1, data=bytes(3), channels=3, color_mode=7),  # type: ignore[arg-type]
        Image(width=1, height=1, data=np.zeros((1, 1), dtype=np.uint16), channels=1),
    ],
    ids=["short-buffer", "zero-width", "five-channels", "unknown-mode", "uint16"],
)
def test_uninterpretable_layouts_raise(image: Image) -> None:
    with pytest.raises(ConversionError):
        to_grayscale(image)
