from __future__ import annotations


class ImageFinderError(Exception):
    """
    Base class for every error raised by the matching core.
    """


class ValidationError(ImageFinderError, ValueError):
    """
    The request cannot be scanned, e.g. the needle is larger than the haystack.
    """


class ConversionError(ImageFinderError, ValueError):
    """
    Pixel data could not be reduced to a grayscale buffer.
    """


class NoMatchError(ImageFinderError, LookupError):
    def __init__(self, message: str = "No matches found") -> None:
        super().__init__(message)


class RegistryError(ImageFinderError, RuntimeError):
    pass


__all__ = [
    "ConversionError",
    "ImageFinderError",
    "NoMatchError",
    "RegistryError",
    "ValidationError",
]
