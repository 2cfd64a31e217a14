"""
Template matching core for locating reference images inside screen captures.
"""

from .errors import ConversionError, ImageFinderError, NoMatchError, RegistryError, ValidationError
from .matching.base import ImageFinder
from .matching.template import TemplateImageFinder
from .registry import ProviderRegistry, install, provider_registry
from .types import (
    ColorMode,
    Image,
    MatchRequest,
    MatchResult,
    NeedKind,
    Region,
    TextQuery,
    WindowQuery,
)

__all__ = [
    "ColorMode",
    "ConversionError",
    "Image",
    "ImageFinder",
    "ImageFinderError",
    "MatchRequest",
    "MatchResult",
    "NeedKind",
    "NoMatchError",
    "ProviderRegistry",
    "RegistryError",
    "Region",
    "TemplateImageFinder",
    "TextQuery",
    "ValidationError",
    "WindowQuery",
    "install",
    "provider_registry",
]
