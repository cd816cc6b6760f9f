"""Training session and set records.

A session is a list of timed sets.  Each set has a start time, an end
time once it is finished, a type and an intensity.  Times are Unix epoch
seconds.  The session derives the engine's input sequences from its
completed sets:

  - durations       -- end - start per completed set
  - intensities     -- 1-5 per completed set
  - rest durations  -- gaps between consecutive completed sets
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from enum import Enum


MIN_SET_DURATION = 1.0  # seconds
MAX_SET_DURATION = 86400.0  # 24 h
MAX_NOTES_LENGTH = 5000

# Overlapping or back-to-back sets still count as a minimal rest
MIN_REST_GAP = 1.0


class SetType(str, Enum):
    """Kind of work done in a set."""

    RALLY = "rally"
    SERVE = "serve"
    DRILL = "drill"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


@dataclass
class TrainingSet:
    """A single timed set."""

    start_time: float  # Unix epoch seconds
    end_time: float | None = None  # None while the set is running
    type: SetType = SetType.RALLY
    intensity: int = 3

    @classmethod
    def completed(
        cls,
        type: SetType,
        duration_sec: float,
        start_time: float = 0.0,
        intensity: int = 3,
    ) -> TrainingSet:
        """Build a finished set lasting *duration_sec* seconds."""
        return cls(
            start_time=start_time,
            end_time=start_time + duration_sec,
            type=type,
            intensity=intensity,
        )

    @property
    def duration(self) -> float | None:
        """Elapsed seconds, or None while active or if the end precedes the start."""
        if self.end_time is None:
            return None
        elapsed = self.end_time - self.start_time
        if elapsed < 0:
            return None
        return elapsed

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors()

    @property
    def is_completed(self) -> bool:
        return self.end_time is not None and self.is_valid

    def validation_errors(self) -> list[str]:
        """Human-readable timing problems.  Active sets have none."""
        if self.end_time is None:
            return []

        errors: list[str] = []
        if self.end_time < self.start_time:
            errors.append("End time cannot be before start time")
            return errors

        elapsed = self.end_time - self.start_time
        if elapsed < MIN_SET_DURATION:
            errors.append("Duration must be at least 1 second")
        if elapsed > MAX_SET_DURATION:
            errors.append("Duration exceeds maximum limit (24 hours)")
        return errors

    def __repr__(self) -> str:
        dur = f"{self.duration:.0f}s" if self.duration is not None else "active"
        return f"TrainingSet({self.type.value}, {dur}, intensity={self.intensity})"


@dataclass
class TrainingSession:
    """A training session made of sets."""

    date: date | str
    sets: list[TrainingSet] = field(default_factory=list)
    notes: str | None = None

    # ------------------------------------------------------------------
    # Engine inputs
    # ------------------------------------------------------------------

    @property
    def completed_sets(self) -> list[TrainingSet]:
        """Completed, valid sets in start-time order."""
        done = [s for s in self.sets if s.is_completed]
        return sorted(done, key=lambda s: s.start_time)

    def durations(self) -> list[float]:
        return [s.duration for s in self.completed_sets]

    def intensities(self) -> list[int]:
        return [s.intensity for s in self.completed_sets]

    def rest_durations(self) -> list[float]:
        """Gaps between consecutive completed sets (n - 1 values).

        A gap of zero or less (overlapping sets) counts as MIN_REST_GAP.
        """
        done = self.completed_sets
        if len(done) < 2:
            return []

        gaps: list[float] = []
        for current, nxt in zip(done, done[1:]):
            gap = nxt.start_time - current.end_time
            gaps.append(gap if gap > 0 else MIN_REST_GAP)
        return gaps

    # ------------------------------------------------------------------
    # Set statistics
    # ------------------------------------------------------------------

    @property
    def total_duration(self) -> float:
        return float(sum(self.durations()))

    @property
    def average_set_duration(self) -> float | None:
        durations = self.durations()
        if not durations:
            return None
        return sum(durations) / len(durations)

    @property
    def longest_set_duration(self) -> float | None:
        return max(self.durations(), default=None)

    @property
    def shortest_set_duration(self) -> float | None:
        return min(self.durations(), default=None)

    @property
    def active_set(self) -> TrainingSet | None:
        return next((s for s in self.sets if s.is_active), None)

    @property
    def is_completed(self) -> bool:
        return bool(self.sets) and self.active_set is None

    def sets_by_type(self) -> dict[str, int]:
        """Number of sets per type, across all sets."""
        counts = Counter(s.type.value for s in self.sets)
        return {t.value: counts.get(t.value, 0) for t in SetType}

    def duration_by_type(self) -> dict[str, float]:
        """Total completed seconds per type."""
        totals = {t.value: 0.0 for t in SetType}
        for s in self.completed_sets:
            totals[s.type.value] += s.duration
        return totals

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors()

    def validation_errors(self) -> list[str]:
        errors: list[str] = []
        for i, s in enumerate(self.sets, 1):
            set_errors = s.validation_errors()
            if set_errors:
                errors.append(f"Set {i}: {', '.join(set_errors)}")

        if self.notes is not None and len(self.notes) > MAX_NOTES_LENGTH:
            errors.append(f"Notes exceed maximum length ({MAX_NOTES_LENGTH} characters)")

        if sum(1 for s in self.sets if s.is_active) > 1:
            errors.append("Multiple active sets found (only one allowed)")

        return errors

    def __repr__(self) -> str:
        return (
            f"TrainingSession({self.date}, "
            f"sets={len(self.sets)}, "
            f"completed={len(self.completed_sets)}, "
            f"total={self.total_duration:.0f}s)"
        )
