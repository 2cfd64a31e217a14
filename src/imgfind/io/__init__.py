"""
IO helpers that turn image files and arrays into ``Image`` values.
"""

from .image_loader import image_from_array, load_image

__all__ = ["image_from_array", "load_image"]
