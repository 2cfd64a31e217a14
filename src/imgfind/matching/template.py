from __future__ import annotations

import logging
import math
from typing import Any, List, Optional

import numpy as np

from ..errors import ConversionError, NoMatchError, ValidationError
from ..types import EMPTY_REGION, Image, MatchRequest, MatchResult, NeedKind, Region
from .base import ImageFinder
from .correlation import match_template
from .grayscale import to_grayscale

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.8


class TemplateImageFinder(ImageFinder[Image]):
    """
    Brute-force normalized cross-correlation search for an image needle.

    Matching is axis-aligned and single-scale. Every call derives its own
    grayscale buffers, so one instance can serve concurrent requests.
    """

    need_kind = NeedKind.IMAGE

    def __init__(self, default_confidence: float = DEFAULT_CONFIDENCE) -> None:
        if not _is_unit_interval(default_confidence):
            raise ValueError("default_confidence must be between 0 and 1")
        self.default_confidence = float(default_confidence)

    def find_match(self, request: MatchRequest[Image, Any]) -> MatchResult[Region]:
        try:
            matches = self.find_matches(request)
        except Exception as exc:  # reported through the result
            logger.debug("template search failed: %s", exc)
            return MatchResult(0.0, EMPTY_REGION, exc)

        if not matches:
            return MatchResult(0.0, EMPTY_REGION, NoMatchError())

        best = matches[0]
        for candidate in matches[1:]:
            if candidate.confidence > best.confidence:
                best = candidate
        return best

    def find_matches(self, request: MatchRequest[Image, Any]) -> List[MatchResult[Region]]:
        haystack, needle = request.haystack, request.needle
        min_confidence = self._resolve_confidence(request.confidence)

        if needle.width > haystack.width or needle.height > haystack.height:
            raise ValidationError(
                f"Needle image is larger than haystack image "
                f"({needle.width}x{needle.height} > {haystack.width}x{haystack.height})"
            )

        haystack_gray = _grayscale(haystack, "haystack")
        needle_gray = _grayscale(needle, "needle")

        matches = match_template(haystack_gray, needle_gray, min_confidence)
        logger.debug(
            "found %d match(es) for needle %r at confidence >= %.3f",
            len(matches),
            needle.id,
            min_confidence,
        )
        return matches

    def _resolve_confidence(self, confidence: Optional[float]) -> float:
        if confidence is None:
            return self.default_confidence
        return float(confidence)


def _is_unit_interval(value: Any) -> bool:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return not math.isnan(number) and 0.0 <= number <= 1.0


def _grayscale(image: Image, role: str) -> np.ndarray:
    try:
        return to_grayscale(image)
    except ConversionError as exc:
        raise ConversionError(f"cannot prepare {role} {image.id!r}: {exc}") from exc


__all__ = ["DEFAULT_CONFIDENCE", "TemplateImageFinder"]
