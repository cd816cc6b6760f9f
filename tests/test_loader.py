"""Tests for setmetrics.loader -- JSON / JSONL session files."""

from __future__ import annotations

import json
import logging
import math

import pytest

from setmetrics.loader import (
    SessionFormatError,
    load_sessions,
    parse_session,
    parse_set,
    parse_timestamp,
)
from setmetrics.session import SetType


class TestParseTimestamp:
    def test_number(self):
        assert parse_timestamp(1770976800) == 1770976800.0

    def test_iso_utc(self):
        assert parse_timestamp("1970-01-01T00:01:00Z") == 60.0

    def test_iso_offset(self):
        assert parse_timestamp("1970-01-01T01:01:00+01:00") == 60.0

    def test_naive_iso_is_utc(self):
        assert parse_timestamp("1970-01-01T00:01:00") == 60.0

    @pytest.mark.parametrize("bad", ["yesterday", None, True, [1]])
    def test_invalid(self, bad):
        with pytest.raises(SessionFormatError):
            parse_timestamp(bad)

    @pytest.mark.parametrize("bad", [math.inf, -math.inf, math.nan])
    def test_non_finite(self, bad):
        with pytest.raises(SessionFormatError):
            parse_timestamp(bad)


class TestParseSet:
    def test_start_end(self):
        s = parse_set({"start": 0, "end": 300, "type": "serve", "intensity": 4})
        assert s.duration == 300.0
        assert s.type is SetType.SERVE
        assert s.intensity == 4

    def test_duration_instead_of_end(self):
        s = parse_set({"start": 100, "duration": 240})
        assert s.end_time == 340.0
        assert s.type is SetType.RALLY
        assert s.intensity == 3

    def test_null_end_is_active(self):
        s = parse_set({"start": 100, "end": None, "type": "Drill"})
        assert s.is_active
        assert s.type is SetType.DRILL

    def test_missing_start(self):
        with pytest.raises(SessionFormatError, match="start"):
            parse_set({"end": 100})

    def test_unknown_type(self):
        with pytest.raises(SessionFormatError, match="unknown set type"):
            parse_set({"start": 0, "end": 60, "type": "volley"})

    def test_bad_intensity(self):
        with pytest.raises(SessionFormatError):
            parse_set({"start": 0, "end": 60, "intensity": "hard"})

    def test_out_of_range_intensity_kept(self):
        # Range is left for the engine to report
        assert parse_set({"start": 0, "end": 60, "intensity": 8}).intensity == 8


class TestParseSession:
    def test_session(self, make_entry):
        session = parse_session(make_entry(notes="drills"))
        assert session.date == "2026-02-13"
        assert session.notes == "drills"
        assert session.durations() == [300.0, 300.0]
        assert session.rest_durations() == [60.0]

    def test_date_from_first_set(self):
        session = parse_session({"sets": [{"start": 86400 * 2 + 10, "end": 86400 * 2 + 70}]})
        assert session.date == "1970-01-03"

    def test_set_error_names_index(self):
        with pytest.raises(SessionFormatError, match="set 1"):
            parse_session({"sets": [{"start": 0, "end": 60}, {"end": 60}]})

    def test_sets_must_be_list(self):
        with pytest.raises(SessionFormatError):
            parse_session({"sets": {"start": 0}})

    def test_not_an_object(self):
        with pytest.raises(SessionFormatError):
            parse_session([1, 2])

    def test_start_beyond_calendar_without_date(self):
        with pytest.raises(SessionFormatError, match="out of range"):
            parse_session({"sets": [{"start": 1e20, "duration": 300}]})

    def test_nan_start_without_date(self):
        with pytest.raises(SessionFormatError, match="set 0"):
            parse_session({"sets": [{"start": math.nan, "duration": 300}]})

    def test_infinite_duration(self):
        with pytest.raises(SessionFormatError, match="invalid duration"):
            parse_set({"start": 0, "duration": math.inf})


class TestLoadSessions:
    def test_single_object(self, write_json, make_entry):
        sessions = load_sessions(write_json(make_entry()))
        assert len(sessions) == 1

    def test_list(self, write_json, make_entry):
        path = write_json([make_entry("2026-02-13"), make_entry("2026-02-14")])
        sessions = load_sessions(path)
        assert [s.date for s in sessions] == ["2026-02-13", "2026-02-14"]

    def test_jsonl(self, write_jsonl, make_entry, caplog):
        path = write_jsonl([make_entry("2026-02-13"), "", "{not json", make_entry("2026-02-14")])
        with caplog.at_level(logging.WARNING, logger="setmetrics.loader"):
            sessions = load_sessions(path)
        assert len(sessions) == 2
        assert "line 3" in caplog.text

    def test_jsonl_structure_error_names_line(self, write_jsonl, make_entry):
        path = write_jsonl([make_entry(), {"sets": [{"end": 5}]}])
        with pytest.raises(SessionFormatError, match="line 2"):
            load_sessions(path)

    def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{")
        with pytest.raises(SessionFormatError, match="invalid JSON"):
            load_sessions(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_sessions(tmp_path / "nope.json")

    def test_nan_literal_in_file(self, tmp_path):
        path = tmp_path / "nan.json"
        path.write_text('{"sets": [{"start": NaN, "duration": 300}]}')
        with pytest.raises(SessionFormatError, match="session 0"):
            load_sessions(path)

    def test_utf8_notes(self, tmp_path, make_entry):
        path = tmp_path / "notes.json"
        entry = make_entry(notes="Übungen ✓ Rückhand")
        path.write_text(json.dumps(entry, ensure_ascii=False), encoding="utf-8")
        sessions = load_sessions(path)
        assert sessions[0].notes == "Übungen ✓ Rückhand"

    def test_utf8_jsonl(self, tmp_path, make_entry):
        path = tmp_path / "notes.jsonl"
        lines = [json.dumps(make_entry(notes=n), ensure_ascii=False) for n in ("été", "東京")]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        sessions = load_sessions(path)
        assert [s.notes for s in sessions] == ["été", "東京"]
