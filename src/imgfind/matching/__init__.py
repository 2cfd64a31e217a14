"""
Matching subpackage exposes the template search and the matcher interface.
"""

from .base import ImageFinder
from .correlation import match_template, window_confidence
from .grayscale import to_grayscale
from .template import DEFAULT_CONFIDENCE, TemplateImageFinder

__all__ = [
    "DEFAULT_CONFIDENCE",
    "ImageFinder",
    "TemplateImageFinder",
    "match_template",
    "to_grayscale",
    "window_confidence",
]
