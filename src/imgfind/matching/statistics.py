"""
Mean and population standard deviation over pixel windows.

``mean`` and ``stddev`` reduce a single buffer. ``window_moments`` reduces a
stack of uint8 windows from exact integer sums, so a flat window always has
a standard deviation of exactly zero and no float copy of the stack is made.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


def mean(buffer: np.ndarray) -> float:
    return float(np.mean(buffer, dtype=np.float64))


def stddev(buffer: np.ndarray, buffer_mean: float) -> float:
    """
    Population standard deviation (sum of squared deviations divided by N).
    """
    deviations = buffer.astype(np.float64) - buffer_mean
    return float(np.sqrt(np.mean(deviations * deviations)))


def window_moments(windows: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Per-window mean and population standard deviation of ``(n, h, w)`` uint8 windows.
    """
    count = windows.shape[1] * windows.shape[2]
    totals = np.einsum("xij->x", windows, dtype=np.int64)
    squares = np.einsum("xij,xij->x", windows, windows, dtype=np.int64)

    # count * sum(v^2) - sum(v)^2 == count^2 * variance, exact in int64
    scaled_variance = count * squares - totals * totals
    return totals / count, np.sqrt(scaled_variance) / count


__all__ = ["mean", "stddev", "window_moments"]
