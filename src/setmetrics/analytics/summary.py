"""Session summary: engine metrics plus presentation helpers.

Pulls an :class:`AnalysisResult` and the session's set statistics into a
single SessionSummary that is JSON-serializable, and provides the
level labels and duration formatting used to display it.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Any

from setmetrics.analytics.engine import AnalysisResult
from setmetrics.session import TrainingSession


# ---------------------------------------------------------------------------
# Level labels (lower bound, label), highest first
# ---------------------------------------------------------------------------

CONSISTENCY_LEVELS = [
    (0.8, "Very Consistent"),
    (0.6, "Consistent"),
    (0.4, "Moderate"),
    (0.2, "Inconsistent"),
]
CONSISTENCY_FLOOR = "Very Inconsistent"

DENSITY_LEVELS = [
    (0.8, "Very High"),
    (0.6, "High"),
    (0.4, "Moderate"),
    (0.2, "Low"),
]
DENSITY_FLOOR = "Very Low"


def _level(score: float, levels: list[tuple[float, str]], floor: str) -> str:
    for lower, label in levels:
        if score >= lower:
            return label
    return floor


def consistency_level(score: float) -> str:
    """Describe a 0-1 consistency score in words."""
    return _level(score, CONSISTENCY_LEVELS, CONSISTENCY_FLOOR)


def density_level(score: float) -> str:
    """Describe a 0-1 training density score in words."""
    return _level(score, DENSITY_LEVELS, DENSITY_FLOOR)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """``H:MM:SS`` from one hour up, ``MM:SS`` below."""
    total = int(seconds)
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_short_duration(seconds: float) -> str:
    """Compact form: ``2h 30m``, ``45m`` or ``12s``."""
    total = int(seconds)
    hours, rem = divmod(total, 3600)
    minutes = rem // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m"
    return f"{total}s"


def format_active_time(seconds: float) -> str:
    """``5m 03s`` or ``45s``."""
    minutes, secs = divmod(int(seconds), 60)
    if minutes > 0:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


def format_percentage(score: float) -> str:
    return f"{score * 100:.0f}%"


def format_ratio(ratio: float) -> str:
    if math.isinf(ratio):
        return "inf"
    return f"{ratio:.2f}"


# ---------------------------------------------------------------------------
# Summary record
# ---------------------------------------------------------------------------


@dataclass
class SessionSummary:
    """One session's metrics report."""

    date: str  # ISO date string, e.g. "2026-02-13"

    # Engine metrics
    total_active_time: float = 0.0
    work_rest_ratio: float = 0.0
    consistency_score: float = 0.0
    training_density_score: float = 0.0
    average_intensity: float = 0.0
    total_work_volume: float = 0.0
    total_sets: int = 0

    # Labels
    consistency_level: str = CONSISTENCY_FLOOR
    density_level: str = DENSITY_FLOOR
    formatted_active_time: str = "0s"

    # Set statistics (from the session, if given)
    sets_by_type: dict[str, int] = field(default_factory=dict)
    longest_set: float | None = None
    shortest_set: float | None = None
    average_set: float | None = None

    # Set when the data could not be analyzed
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly).

        An unbounded work/rest ratio is written as the string ``"inf"``.
        """
        d = asdict(self)
        if math.isinf(self.work_rest_ratio):
            d["work_rest_ratio"] = "inf"
        return d

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        if self.error is not None:
            return f"SessionSummary({self.date}: error={self.error!r})"
        return (
            f"SessionSummary({self.date}: "
            f"sets={self.total_sets}, "
            f"active={self.formatted_active_time}, "
            f"consistency={format_percentage(self.consistency_score)}, "
            f"density={format_percentage(self.training_density_score)})"
        )


def build_session_summary(
    day: date | str,
    result: AnalysisResult | None = None,
    session: TrainingSession | None = None,
    error: str | None = None,
) -> SessionSummary:
    """Build a session summary from an analysis result.

    Args:
        day: The date of the session.
        result: Engine output.  None leaves every metric at zero.
        session: Source session, for per-type counts and set extremes.
        error: Why the session could not be analyzed, if it could not.

    Returns:
        A populated SessionSummary.
    """
    date_str = day if isinstance(day, str) else day.isoformat()

    summary = SessionSummary(date=date_str, error=error)

    if result is not None:
        summary.total_active_time = result.total_active_time
        summary.work_rest_ratio = result.work_rest_ratio
        summary.consistency_score = result.consistency_score
        summary.training_density_score = result.training_density_score
        summary.average_intensity = result.average_intensity
        summary.total_work_volume = result.total_work_volume
        summary.total_sets = result.total_sets
        summary.consistency_level = consistency_level(result.consistency_score)
        summary.density_level = density_level(result.training_density_score)
        summary.formatted_active_time = format_active_time(result.total_active_time)

    if session is not None:
        summary.sets_by_type = session.sets_by_type()
        summary.longest_set = session.longest_set_duration
        summary.shortest_set = session.shortest_set_duration
        summary.average_set = session.average_set_duration

    return summary


# ---------------------------------------------------------------------------
# Multi-session overview
# ---------------------------------------------------------------------------


def _format_average_duration(seconds: float) -> str:
    """Whole minutes (``95m``), or seconds below one minute."""
    minutes, secs = divmod(int(seconds), 60)
    if minutes > 0:
        return f"{minutes}m"
    if secs > 0:
        return f"{secs}s"
    return "0m"


@dataclass
class SessionsOverview:
    """Totals across every session that has at least one completed set."""

    total_sessions: int = 0
    total_time: float = 0.0  # seconds
    average_session_duration: float = 0.0  # seconds
    total_sets: int = 0
    formatted_total_time: str = "0m"
    formatted_average_duration: str = "0m"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def __repr__(self) -> str:
        return (
            f"SessionsOverview(sessions={self.total_sessions}, "
            f"time={self.formatted_total_time}, "
            f"avg={self.formatted_average_duration}, "
            f"sets={self.total_sets})"
        )


def build_overview(sessions: list[TrainingSession]) -> SessionsOverview:
    """Aggregate training time and set counts over many sessions.

    Sessions without a completed set are left out, so a session that was
    only started does not drag the average down.
    """
    with_data = [s for s in sessions if s.completed_sets]
    if not with_data:
        return SessionsOverview()

    total = sum(s.total_duration for s in with_data)
    average = total / len(with_data)

    return SessionsOverview(
        total_sessions=len(with_data),
        total_time=total,
        average_session_duration=average,
        total_sets=sum(len(s.completed_sets) for s in with_data),
        formatted_total_time=format_short_duration(total) if total > 0 else "0m",
        formatted_average_duration=_format_average_duration(average),
    )
