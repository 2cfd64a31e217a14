from __future__ import annotations

import logging
from typing import Iterator, List, Tuple

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from ..errors import ValidationError
from ..types import MatchResult, Region
from . import statistics

logger = logging.getLogger(__name__)

_WINDOW_AXES = (1, 2)
_CHUNK_ELEMENTS = 1 << 18


def match_template(
    haystack: np.ndarray,
    needle: np.ndarray,
    min_confidence: float,
) -> List[MatchResult[Region]]:
    """
    Score every needle-sized window of ``haystack`` by normalized cross-correlation.

    Both inputs are ``(height, width)`` uint8 grayscale buffers. Offsets are visited
    in raster order (``y`` outer, ``x`` inner) and every window whose
    confidence ``(ncc + 1) / 2`` reaches ``min_confidence`` is returned in that
    order. A constant needle has no variance to correlate against, so it is
    matched exactly instead and every identical window scores ``1.0``.
    """
    if haystack.ndim != 2 or needle.ndim != 2:
        raise ValidationError("haystack and needle must be single-channel buffers")
    if haystack.dtype != np.uint8 or needle.dtype != np.uint8:
        raise ValidationError("haystack and needle must be uint8 buffers")

    haystack_height, haystack_width = haystack.shape
    needle_height, needle_width = needle.shape
    if needle_width > haystack_width or needle_height > haystack_height:
        raise ValidationError("Needle image is larger than haystack image")
    if needle.size == 0:
        raise ValidationError("needle must contain at least one pixel")

    needle_mean = statistics.mean(needle)
    needle_stddev = statistics.stddev(needle, needle_mean)

    windows = sliding_window_view(haystack, (needle_height, needle_width))
    logger.debug(
        "scanning %dx%d offsets for %dx%d needle (min_confidence=%.3f)",
        windows.shape[1],
        windows.shape[0],
        needle_width,
        needle_height,
        min_confidence,
    )

    if needle_stddev == 0:
        logger.debug("needle is uniform (value=%d), using exact matching", int(needle.flat[0]))
        return _uniform_matches(windows, needle.flat[0], needle_width, needle_height)

    needle_centered = needle.astype(np.float64) - needle_mean
    matches: List[MatchResult[Region]] = []
    for y, x0, chunk in _window_chunks(windows):
        confidence = _chunk_confidence(chunk, needle_centered, needle_stddev)
        for offset in np.flatnonzero(confidence >= min_confidence):
            matches.append(
                MatchResult(
                    float(confidence[offset]),
                    Region(x0 + int(offset), y, needle_width, needle_height),
                )
            )
    return matches


def window_confidence(
    window: np.ndarray,
    needle: np.ndarray,
    needle_mean: float,
    needle_stddev: float,
) -> float:
    """
    Confidence of a single window against a non-uniform needle.
    """
    region_mean = statistics.mean(window)
    region_stddev = statistics.stddev(window, region_mean)
    if region_stddev == 0:
        return 0.0

    covariance = statistics.mean(
        (window.astype(np.float64) - region_mean) * (needle.astype(np.float64) - needle_mean)
    )
    ncc = covariance / (region_stddev * needle_stddev)
    return min(1.0, max(0.0, (ncc + 1.0) / 2.0))


def _window_chunks(windows: np.ndarray) -> Iterator[Tuple[int, int, np.ndarray]]:
    """
    Yield ``(y, x0, windows)`` in raster order, at most ``_CHUNK_ELEMENTS`` pixels per chunk.
    """
    rows, columns, needle_height, needle_width = windows.shape
    step = max(1, _CHUNK_ELEMENTS // (needle_height * needle_width))
    for y in range(rows):
        for x0 in range(0, columns, step):
            yield y, x0, windows[y, x0 : x0 + step]


def _chunk_confidence(
    chunk: np.ndarray,
    needle_centered: np.ndarray,
    needle_stddev: float,
) -> np.ndarray:
    _, region_stddev = statistics.window_moments(chunk)

    # needle_centered sums to zero, so the window needs no centering
    covariance = np.einsum("xij,ij->x", chunk, needle_centered) / needle_centered.size

    with np.errstate(divide="ignore", invalid="ignore"):
        ncc = covariance / (region_stddev * needle_stddev)
    confidence = np.clip((ncc + 1.0) / 2.0, 0.0, 1.0)
    # flat windows cannot correlate with a textured needle
    return np.where(region_stddev == 0, 0.0, confidence)


def _uniform_matches(
    windows: np.ndarray,
    value: int,
    needle_width: int,
    needle_height: int,
) -> List[MatchResult[Region]]:
    matches: List[MatchResult[Region]] = []
    for y, x0, chunk in _window_chunks(windows):
        identical = np.all(chunk == value, axis=_WINDOW_AXES)
        for offset in np.flatnonzero(identical):
            matches.append(MatchResult(1.0, Region(x0 + int(offset), y, needle_width, needle_height)))
    return matches


__all__ = ["match_template", "window_confidence"]
