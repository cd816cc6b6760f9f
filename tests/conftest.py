"""Shared fixtures for the setmetrics test suite."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from setmetrics.session import SetType, TrainingSession, TrainingSet


# ---------------------------------------------------------------------------
# Session builders
# ---------------------------------------------------------------------------


def build_session(
    durations: list[float],
    intensities: list[int] | None = None,
    gap: float = 60.0,
    day: str = "2026-02-13",
    start: float = 1770976800.0,
) -> TrainingSession:
    """Back-to-back completed sets separated by *gap* seconds."""
    if intensities is None:
        intensities = [3] * len(durations)

    sets: list[TrainingSet] = []
    t = start
    for d, level in zip(durations, intensities):
        sets.append(TrainingSet.completed(SetType.RALLY, d, start_time=t, intensity=level))
        t += d + gap
    return TrainingSession(date=day, sets=sets)


@pytest.fixture
def make_session():
    return build_session


@pytest.fixture
def steady_session() -> TrainingSession:
    """Three 5-minute moderate sets with 1-minute rests."""
    return build_session([300.0, 300.0, 300.0], [3, 3, 3], gap=60.0)


# ---------------------------------------------------------------------------
# Session file helpers
# ---------------------------------------------------------------------------


def session_entry(
    day: str = "2026-02-13",
    sets: list[dict] | None = None,
    notes: str | None = None,
) -> dict:
    """Create a single JSON session object."""
    if sets is None:
        sets = [
            {"start": "2026-02-13T10:00:00Z", "end": "2026-02-13T10:05:00Z",
             "type": "rally", "intensity": 3},
            {"start": "2026-02-13T10:06:00Z", "end": "2026-02-13T10:11:00Z",
             "type": "serve", "intensity": 3},
        ]
    entry: dict = {"date": day, "sets": sets}
    if notes is not None:
        entry["notes"] = notes
    return entry


@pytest.fixture
def make_entry():
    return session_entry


@pytest.fixture
def write_json(tmp_path: Path):
    """Write an object as JSON into tmp_path and return the path."""

    def _write(obj, name: str = "sessions.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(obj))
        return path

    return _write


@pytest.fixture
def write_jsonl(tmp_path: Path):
    """Write raw lines (dicts are JSON-encoded) into tmp_path."""

    def _write(entries: list, name: str = "sessions.jsonl") -> Path:
        path = tmp_path / name
        with open(path, "w") as f:
            for entry in entries:
                line = entry if isinstance(entry, str) else json.dumps(entry)
                f.write(line + "\n")
        return path

    return _write
