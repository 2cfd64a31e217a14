from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from ..types import ColorMode, Image

PathLike = Union[str, Path]


def load_image(path: PathLike) -> Image:
    """
    Decode an image file into an ``Image`` with BGR(A) channel order.

    The identifier combines the file name with the MD5 of its bytes, so the
    same asset loaded twice yields the same id.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Unable to load image at {path}")

    raw = file_path.read_bytes()
    pixels = cv2.imdecode(np.frombuffer(raw, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    if pixels is None:
        raise FileNotFoundError(f"Unable to decode image at {path}")
    if pixels.dtype == np.uint16:
        pixels = (pixels >> 8).astype(np.uint8)

    image_id = f"{file_path.name}_{hashlib.md5(raw).hexdigest()}"
    return image_from_array(pixels, color_mode=ColorMode.BGR, image_id=image_id)


def image_from_array(
    pixels: np.ndarray,
    color_mode: ColorMode = ColorMode.BGR,
    image_id: str = "",
) -> Image:
    """
    Wrap an ``HxW`` or ``HxWxC`` uint8 array without copying it.
    """
    if pixels.dtype != np.uint8:
        raise ValueError(f"expected uint8 pixels, got {pixels.dtype}")
    if pixels.ndim == 2:
        height, width = pixels.shape
        channels = 1
    elif pixels.ndim == 3:
        height, width, channels = pixels.shape
    else:
        raise ValueError("pixels must be a 2D or 3D array")

    return Image(
        width=int(width),
        height=int(height),
        data=np.ascontiguousarray(pixels),
        channels=int(channels),
        id=image_id,
        color_mode=color_mode,
    )
