from __future__ import annotations

import cv2
import numpy as np

from ..errors import ConversionError
from ..types import ColorMode, Image

# BT.601 luma weights, as applied by cv2.cvtColor for the *2GRAY conversions.
_TO_GRAY = {
    (3, ColorMode.BGR): cv2.COLOR_BGR2GRAY,
    (3, ColorMode.RGB): cv2.COLOR_RGB2GRAY,
    (4, ColorMode.BGR): cv2.COLOR_BGRA2GRAY,
    (4, ColorMode.RGB): cv2.COLOR_RGBA2GRAY,
}


def to_grayscale(image: Image) -> np.ndarray:
    """
    Collapse an image to a ``(height, width)`` uint8 luminance buffer.

    Alpha is discarded. Three and four channel layouts are read in the order
    given by ``image.color_mode`` before the BT.601 weighting is applied, so
    the same picture yields the same buffer whether it arrives as BGR or RGB.
    The returned array is always a fresh copy owned by the caller.
    """
    pixels = _interleaved_pixels(image)
    channels = image.channels

    if channels == 1:
        return pixels[:, :, 0].copy()
    if channels == 2:
        # gray + alpha
        return pixels[:, :, 0].copy()

    try:
        color_mode = ColorMode(image.color_mode)
    except ValueError as exc:
        raise ConversionError(f"unsupported color mode {image.color_mode!r}") from exc

    code = _TO_GRAY.get((channels, color_mode))
    if code is None:
        raise ConversionError(f"unsupported channel count {channels}")

    try:
        gray = cv2.cvtColor(pixels, code)
    except cv2.error as exc:
        raise ConversionError(f"Failed to convert image to raw buffer: {exc}") from exc
    return np.ascontiguousarray(gray, dtype=np.uint8)


def _interleaved_pixels(image: Image) -> np.ndarray:
    if image.width <= 0 or image.height <= 0:
        raise ConversionError(f"image dimensions must be positive, got {image.width}x{image.height}")
    if image.channels <= 0:
        raise ConversionError(f"channel count must be positive, got {image.channels}")

    data = image.data
    if isinstance(data, np.ndarray):
        if data.dtype != np.uint8:
            raise ConversionError(f"expected uint8 samples, got {data.dtype}")
        flat = data.reshape(-1)
    else:
        flat = np.frombuffer(data, dtype=np.uint8)

    expected = image.width * image.height * image.channels
    if flat.size != expected:
        raise ConversionError(
            f"buffer holds {flat.size} samples but {image.width}x{image.height}x{image.channels} "
            f"requires {expected}"
        )
    return flat.reshape(image.height, image.width, image.channels).copy()


__all__ = ["to_grayscale"]
