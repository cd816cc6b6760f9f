"""Load training sessions from JSON / JSONL files for offline analysis.

Accepted layouts:

  - ``.json``  -- a single session object, or a list of them
  - ``.jsonl`` -- one session object per line

A session object looks like::

    {
      "date": "2026-02-13",
      "notes": "baseline drills",
      "sets": [
        {"start": "2026-02-13T10:00:00Z", "end": "2026-02-13T10:05:00Z",
         "type": "rally", "intensity": 3},
        {"start": 1770977400, "duration": 240, "type": "serve", "intensity": 4},
        {"start": 1770977700, "end": null, "type": "drill"}
      ]
    }

``start`` / ``end`` are Unix seconds or ISO-8601 strings (naive strings
are taken as UTC).  A set may give ``duration`` instead of ``end``; a
null ``end`` marks a set that is still running.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from setmetrics.session import SetType, TrainingSession, TrainingSet

logger = logging.getLogger(__name__)

DEFAULT_INTENSITY = 3


class SessionFormatError(ValueError):
    """A session file does not have the expected structure."""


def parse_timestamp(value: Any) -> float:
    """Unix seconds from a number or an ISO-8601 string."""
    if isinstance(value, bool):
        raise SessionFormatError(f"invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise SessionFormatError(f"invalid timestamp: {value!r}")
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            raise SessionFormatError(f"invalid timestamp: {value!r}") from None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.timestamp()
    raise SessionFormatError(f"invalid timestamp: {value!r}")


def parse_set(obj: Any) -> TrainingSet:
    """Build a TrainingSet from its JSON object."""
    if not isinstance(obj, dict):
        raise SessionFormatError(f"set must be an object, got {type(obj).__name__}")
    if "start" not in obj:
        raise SessionFormatError("set is missing 'start'")

    start = parse_timestamp(obj["start"])

    if obj.get("end") is not None:
        end: float | None = parse_timestamp(obj["end"])
    elif obj.get("duration") is not None:
        try:
            end = start + float(obj["duration"])
        except (TypeError, ValueError):
            raise SessionFormatError(f"invalid duration: {obj['duration']!r}") from None
        if not math.isfinite(end):
            raise SessionFormatError(f"invalid duration: {obj['duration']!r}")
    else:
        end = None

    try:
        set_type = SetType(str(obj.get("type", SetType.RALLY.value)).lower())
    except ValueError:
        raise SessionFormatError(f"unknown set type: {obj.get('type')!r}") from None

    intensity = obj.get("intensity", DEFAULT_INTENSITY)
    if isinstance(intensity, bool) or not isinstance(intensity, (int, float)):
        raise SessionFormatError(f"invalid intensity: {intensity!r}")

    # Range is checked by the engine so the pipeline can report it
    return TrainingSet(start_time=start, end_time=end, type=set_type, intensity=intensity)


def parse_session(obj: Any) -> TrainingSession:
    """Build a TrainingSession from its JSON object."""
    if not isinstance(obj, dict):
        raise SessionFormatError(f"session must be an object, got {type(obj).__name__}")

    raw_sets = obj.get("sets", [])
    if not isinstance(raw_sets, list):
        raise SessionFormatError("'sets' must be a list")

    sets: list[TrainingSet] = []
    for i, raw in enumerate(raw_sets):
        try:
            sets.append(parse_set(raw))
        except SessionFormatError as e:
            raise SessionFormatError(f"set {i}: {e}") from None

    day = obj.get("date")
    if day is None:
        started = [s.start_time for s in sets]
        if started:
            try:
                first = datetime.fromtimestamp(min(started), tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                raise SessionFormatError(
                    f"start time out of range: {min(started)!r}"
                ) from None
            day = first.date().isoformat()
        else:
            day = date.today().isoformat()

    return TrainingSession(date=str(day), sets=sets, notes=obj.get("notes"))


def _read_jsonl(path: Path) -> list[TrainingSession]:
    sessions: list[TrainingSession] = []
    with open(path, encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue

            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("%s line %d: invalid JSON, skipping", path.name, line_num)
                continue

            try:
                sessions.append(parse_session(entry))
            except SessionFormatError as e:
                raise SessionFormatError(f"{path.name} line {line_num}: {e}") from None
    return sessions


def _read_json(path: Path) -> list[TrainingSession]:
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SessionFormatError(f"{path.name}: invalid JSON ({e.msg})") from None

    entries = data if isinstance(data, list) else [data]
    sessions: list[TrainingSession] = []
    for i, entry in enumerate(entries):
        try:
            sessions.append(parse_session(entry))
        except SessionFormatError as e:
            raise SessionFormatError(f"{path.name} session {i}: {e}") from None
    return sessions


def load_sessions(session_path: str | Path) -> list[TrainingSession]:
    """Read every session from a ``.json`` or ``.jsonl`` file.

    Raises:
        FileNotFoundError: if the file does not exist.
        SessionFormatError: if the content is not a valid session layout.
    """
    path = Path(session_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {session_path}")

    if path.suffix.lower() == ".jsonl":
        sessions = _read_jsonl(path)
    else:
        sessions = _read_json(path)

    logger.info("loaded %d session(s) from %s", len(sessions), path.name)
    return sessions
