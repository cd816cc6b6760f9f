"""Aggregate helpers shared by the metric calculators.

  - Arithmetic mean
  - Sample standard deviation (Bessel-corrected)
  - Coefficient of variation
  - Intensity normalization onto [0, 1]
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


MIN_INTENSITY = 1
MAX_INTENSITY = 5

# Means closer to zero than this are treated as zero
EPSILON = 1e-9


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    arr = np.asarray(values, dtype=np.float64)
    return float(np.mean(arr))


def standard_deviation(values: Sequence[float]) -> float:
    """Sample standard deviation with the n-1 divisor.

    Returns 0.0 if fewer than 2 values are provided.
    """
    if len(values) < 2:
        return 0.0
    arr = np.asarray(values, dtype=np.float64)
    return float(np.std(arr, ddof=1))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Standard deviation divided by the mean.

    Scale-free dispersion.  Returns 0.0 for empty input or when the mean
    is (nearly) zero.
    """
    if len(values) == 0:
        return 0.0
    m = mean(values)
    if abs(m) < EPSILON:
        return 0.0
    return standard_deviation(values) / m


def normalize_intensity(intensity: float) -> float:
    """Map an intensity on the 1-5 scale onto 0.0-1.0."""
    return (float(intensity) - MIN_INTENSITY) / (MAX_INTENSITY - MIN_INTENSITY)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))
