"""Set analytics engine.

Turns index-aligned per-set durations (seconds) and intensities (1-5)
into a handful of normalized session metrics: active time, work/rest
ratio, consistency and training density.

``analyze`` is the strict entry point: it validates the whole batch and
raises :class:`InvalidArgument` before computing anything.  The
``calculate_*`` functions are best-effort utilities meant for data that
has already been validated; the only thing they reject is a rest
sequence of the wrong length.

Rest durations come in two conventions:

  - per-set rest: one rest period per set (``len == len(durations)``)
  - between-set gaps: one gap between consecutive sets
    (``len == len(durations) - 1``)

Both are accepted.  Pass ``rest_convention`` to pin one of them.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, asdict
from enum import Enum, IntEnum
from typing import Any, Sequence

import numpy as np

from setmetrics.analytics.stats import (
    EPSILON,
    MAX_INTENSITY,
    MIN_INTENSITY,
    clamp,
    coefficient_of_variation,
    mean,
    normalize_intensity,
)


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------

MIN_DURATION = 0.0
MAX_DURATION = 86400.0  # 24 h

# ---------------------------------------------------------------------------
# Consistency weights
# ---------------------------------------------------------------------------

W_DURATION_CONSISTENCY = 0.6
W_INTENSITY_CONSISTENCY = 0.4

# ---------------------------------------------------------------------------
# Density weights and reference durations (seconds)
# ---------------------------------------------------------------------------

W_DENSITY_INTENSITY = 0.4
W_DENSITY_VOLUME = 0.4
W_DENSITY_DURATION = 0.2

VOLUME_CEILING_PER_SET = 3600.0  # one hour at full intensity
SHORT_SET_THRESHOLD = 30.0
LONG_SET_THRESHOLD = 1800.0


class Intensity(IntEnum):
    """Subjective effort rating for a set."""

    VERY_LOW = 1
    LOW = 2
    MODERATE = 3
    HIGH = 4
    VERY_HIGH = 5


class RestConvention(str, Enum):
    """How a rest-duration sequence lines up with the sets."""

    PER_SET = "per_set"  # one rest per set, n values
    BETWEEN_SETS = "between_sets"  # gaps between sets, n-1 values


class InvalidArgument(ValueError):
    """Input batch rejected by validation.

    Attributes:
        field: Which input sequence was at fault.
        index: Offending element index, or None for length problems.
    """

    def __init__(self, message: str, field: str, index: int | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.index = index


@dataclass(frozen=True)
class AnalysisResult:
    """Metrics computed from one input batch."""

    total_active_time: float  # seconds
    work_rest_ratio: float  # may be inf
    consistency_score: float  # 0-1
    training_density_score: float  # 0-1
    average_intensity: float  # 1-5, 0.0 for an empty batch
    total_work_volume: float  # intensity-weighted seconds
    total_sets: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def __repr__(self) -> str:
        return (
            f"AnalysisResult(sets={self.total_sets}, "
            f"active={self.total_active_time:.0f}s, "
            f"ratio={self.work_rest_ratio:.2f}, "
            f"consistency={self.consistency_score:.2f}, "
            f"density={self.training_density_score:.2f})"
        )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _allowed_rest_lengths(
    n: int,
    rest_convention: RestConvention | None,
) -> set[int]:
    gap_len = n - 1 if n > 1 else 0
    if rest_convention is None:
        return {n, gap_len}
    if RestConvention(rest_convention) is RestConvention.PER_SET:
        return {n}
    return {gap_len}


def _check_rest_length(
    n: int,
    rest_durations: Sequence[float],
    rest_convention: RestConvention | None,
) -> None:
    if len(rest_durations) not in _allowed_rest_lengths(n, rest_convention):
        if rest_convention is None:
            message = (
                "rest durations vector size must match durations vector size "
                "or be one less (for gaps between sets)"
            )
        else:
            message = (
                f"rest durations vector size {len(rest_durations)} does not fit "
                f"the {RestConvention(rest_convention).value} convention for "
                f"{n} sets"
            )
        raise InvalidArgument(message, field="rest_durations")


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _validate_inputs(
    durations: Sequence[float],
    intensities: Sequence[int],
    rest_durations: Sequence[float],
    rest_convention: RestConvention | None,
) -> None:
    """Reject the batch on the first problem found."""
    if len(durations) != len(intensities):
        raise InvalidArgument(
            f"durations and intensities must have the same size "
            f"({len(durations)} != {len(intensities)})",
            field="intensities",
        )

    for i, value in enumerate(durations):
        if not _is_number(value):
            raise InvalidArgument(
                f"duration at index {i} is not a number: {value!r}",
                field="durations",
                index=i,
            )
        d = float(value)
        # NaN fails both comparisons
        if not MIN_DURATION <= d <= MAX_DURATION:
            raise InvalidArgument(
                f"duration at index {i} is out of valid range "
                f"[{MIN_DURATION:.0f}, {MAX_DURATION:.0f}] seconds: {value!r}",
                field="durations",
                index=i,
            )

    for i, value in enumerate(intensities):
        level = float(value) if _is_number(value) else math.nan
        if not MIN_INTENSITY <= level <= MAX_INTENSITY or not level.is_integer():
            raise InvalidArgument(
                f"intensity at index {i} is out of valid range "
                f"[{MIN_INTENSITY}, {MAX_INTENSITY}]: {value!r}",
                field="intensities",
                index=i,
            )

    if len(rest_durations) == 0:
        return

    _check_rest_length(len(durations), rest_durations, rest_convention)
    for i, value in enumerate(rest_durations):
        r = float(value) if _is_number(value) else math.nan
        if not r >= 0.0:
            raise InvalidArgument(
                f"rest duration at index {i} must be a non-negative number: {value!r}",
                field="rest_durations",
                index=i,
            )


# ---------------------------------------------------------------------------
# Metric calculators
# ---------------------------------------------------------------------------


def calculate_total_active_time(durations: Sequence[float]) -> float:
    """Sum of all set durations in seconds (0.0 when there are none)."""
    if len(durations) == 0:
        return 0.0
    return float(np.sum(np.asarray(durations, dtype=np.float64)))


def calculate_work_rest_ratio(
    durations: Sequence[float],
    rest_durations: Sequence[float] | None = None,
    rest_convention: RestConvention | None = None,
) -> float:
    """Total work time divided by total rest time.

    Without rest data, rest is assumed to equal work (ratio 1.0).  A rest
    total of (nearly) zero yields ``math.inf``; an empty batch yields 0.0.

    Args:
        durations: Per-set work durations (s).
        rest_durations: Per-set rest (n values) or between-set gaps
            (n-1 values).
        rest_convention: Restrict the accepted rest length to one
            convention.

    Raises:
        InvalidArgument: if the rest sequence has any other length.
    """
    if len(durations) == 0:
        return 0.0

    total_work = calculate_total_active_time(durations)

    if rest_durations is None or len(rest_durations) == 0:
        total_rest = total_work
    else:
        _check_rest_length(len(durations), rest_durations, rest_convention)
        total_rest = float(np.sum(np.asarray(rest_durations, dtype=np.float64)))

    if total_rest < EPSILON:
        return math.inf

    return total_work / total_rest


def calculate_consistency_score(
    durations: Sequence[float],
    intensities: Sequence[int],
) -> float:
    """How evenly the sets were performed, 0.0-1.0.

    Each sequence's coefficient of variation is mapped through
    ``1 / (1 + cv)`` (1.0 = no variation), then blended 60/40 in favour
    of duration.  Fewer than two sets is trivially consistent.
    """
    if len(durations) < 2:
        return 1.0

    duration_cv = coefficient_of_variation(durations)
    intensity_cv = coefficient_of_variation([float(i) for i in intensities])

    duration_consistency = 1.0 / (1.0 + duration_cv)
    intensity_consistency = 1.0 / (1.0 + intensity_cv)

    score = (
        W_DURATION_CONSISTENCY * duration_consistency
        + W_INTENSITY_CONSISTENCY * intensity_consistency
    )
    return clamp(score)


def _duration_component(avg_duration: float) -> float:
    """Penalize very short and very long average sets."""
    if avg_duration < SHORT_SET_THRESHOLD:
        return avg_duration / SHORT_SET_THRESHOLD
    if avg_duration > LONG_SET_THRESHOLD:
        return LONG_SET_THRESHOLD / avg_duration
    return 1.0


def calculate_training_density_score(
    durations: Sequence[float],
    intensities: Sequence[int],
) -> float:
    """Blend of effort, effort-weighted volume and set length, 0.0-1.0.

    Components:
        intensity (40%) -- mean normalized intensity
        volume (40%)    -- sum(duration * normalized intensity), relative
                           to one hour per set at full intensity
        duration (20%)  -- 1.0 for average sets of 30 s to 30 min,
                           scaled down outside that band
    """
    n = len(durations)
    if n == 0:
        return 0.0

    norm = np.asarray([normalize_intensity(i) for i in intensities], dtype=np.float64)
    arr = np.asarray(durations, dtype=np.float64)

    avg_intensity_norm = float(np.mean(norm))
    work_volume = float(np.sum(arr * norm))
    volume_component = min(1.0, work_volume / (VOLUME_CEILING_PER_SET * n))
    duration_component = _duration_component(mean(durations))

    density = (
        W_DENSITY_INTENSITY * avg_intensity_norm
        + W_DENSITY_VOLUME * volume_component
        + W_DENSITY_DURATION * duration_component
    )
    return clamp(density)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def analyze(
    durations: Sequence[float],
    intensities: Sequence[int],
    rest_durations: Sequence[float] | None = None,
    rest_convention: RestConvention | None = None,
) -> AnalysisResult:
    """Validate a batch of sets and compute every metric.

    Args:
        durations: Per-set active durations, each within [0, 86400] s.
        intensities: Per-set intensity, integers 1-5, same length as
            *durations*.
        rest_durations: Optional rest data, per-set (n values) or
            between-set gaps (n-1 values).  Omitted means 1:1 work/rest.
        rest_convention: Pin the rest convention instead of inferring it
            from the length.

    Returns:
        AnalysisResult.  An empty batch is valid and yields zeros, with a
        consistency score of 1.0 and an average intensity of 0.0.

    Raises:
        InvalidArgument: on mismatched lengths or out-of-range values.
    """
    rest = [] if rest_durations is None else rest_durations
    _validate_inputs(durations, intensities, rest, rest_convention)

    n = len(durations)
    levels = np.asarray(intensities, dtype=np.float64)
    arr = np.asarray(durations, dtype=np.float64)

    return AnalysisResult(
        total_active_time=calculate_total_active_time(durations),
        work_rest_ratio=calculate_work_rest_ratio(durations, rest, rest_convention),
        consistency_score=calculate_consistency_score(durations, intensities),
        training_density_score=calculate_training_density_score(durations, intensities),
        average_intensity=float(np.mean(levels)) if n > 0 else 0.0,
        total_work_volume=float(np.sum(arr * levels)) if n > 0 else 0.0,
        total_sets=n,
    )


class SessionAnalyzer:
    """Stateless handle on the engine for callers that inject one.

    Every method delegates to the module-level function of the same name.
    """

    def analyze(
        self,
        durations: Sequence[float],
        intensities: Sequence[int],
        rest_durations: Sequence[float] | None = None,
        rest_convention: RestConvention | None = None,
    ) -> AnalysisResult:
        return analyze(durations, intensities, rest_durations, rest_convention)

    def total_active_time(self, durations: Sequence[float]) -> float:
        return calculate_total_active_time(durations)

    def work_rest_ratio(
        self,
        durations: Sequence[float],
        rest_durations: Sequence[float] | None = None,
        rest_convention: RestConvention | None = None,
    ) -> float:
        return calculate_work_rest_ratio(durations, rest_durations, rest_convention)

    def consistency_score(
        self,
        durations: Sequence[float],
        intensities: Sequence[int],
    ) -> float:
        return calculate_consistency_score(durations, intensities)

    def training_density_score(
        self,
        durations: Sequence[float],
        intensities: Sequence[int],
    ) -> float:
        return calculate_training_density_score(durations, intensities)

    def __repr__(self) -> str:
        return "SessionAnalyzer()"
