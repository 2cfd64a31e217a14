from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from .errors import RegistryError
from .matching.base import ImageFinder
from .matching.template import TemplateImageFinder
from .types import MatchRequest, NeedKind

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Holds one matcher per need kind.

    Finders are registered during setup, then the registry is sealed; after
    that it only answers lookups. Lookups before sealing are rejected so a
    search can never observe a half-configured registry.
    """

    def __init__(self) -> None:
        self._finders: Dict[NeedKind, ImageFinder[Any]] = {}
        self._sealed = False
        self._lock = threading.Lock()

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(self, finder: ImageFinder[Any], kind: Optional[NeedKind] = None) -> None:
        kind = NeedKind(kind) if kind is not None else finder.need_kind
        with self._lock:
            if self._sealed:
                raise RegistryError(f"registry is sealed; cannot register {type(finder).__name__}")
            previous = self._finders.get(kind)
            if previous is not None:
                logger.info("replacing %s finder %s", kind.value, type(previous).__name__)
            self._finders[kind] = finder
        logger.info("registered %s finder %s", kind.value, type(finder).__name__)

    def register_image_finder(self, finder: ImageFinder[Any]) -> None:
        self.register(finder, NeedKind.IMAGE)

    def seal(self) -> None:
        with self._lock:
            self._sealed = True

    def reset(self) -> None:
        """
        Drop every registration and reopen the registry for setup.
        """
        with self._lock:
            self._finders.clear()
            self._sealed = False

    def finder_for(self, kind: NeedKind) -> ImageFinder[Any]:
        with self._lock:
            if not self._sealed:
                raise RegistryError("registry is still being configured; call seal() first")
            try:
                return self._finders[NeedKind(kind)]
            except KeyError:
                raise RegistryError(f"no finder registered for {NeedKind(kind).value} needles") from None

    def finder_for_request(self, request: MatchRequest[Any, Any]) -> ImageFinder[Any]:
        return self.finder_for(request.needle.kind)


provider_registry = ProviderRegistry()


def install(
    finder: Optional[ImageFinder[Any]] = None,
    registry: Optional[ProviderRegistry] = None,
) -> ImageFinder[Any]:
    """
    Register ``finder`` (a default TemplateImageFinder when omitted) as the image finder.
    """
    finder = finder if finder is not None else TemplateImageFinder()
    target = registry if registry is not None else provider_registry
    target.register_image_finder(finder)
    return finder


__all__ = ["ProviderRegistry", "install", "provider_registry"]
