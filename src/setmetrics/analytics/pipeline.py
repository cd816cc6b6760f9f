"""Analytics pipeline: run training sessions through the engine.

This module takes a :class:`TrainingSession` (built by hand or by
:func:`setmetrics.loader.load_sessions`), derives the engine inputs from
its completed sets and produces a :class:`SessionSummary`.
"""

from __future__ import annotations

import logging
from datetime import date

from setmetrics.analytics.engine import (
    AnalysisResult,
    InvalidArgument,
    RestConvention,
    SessionAnalyzer,
)
from setmetrics.analytics.summary import build_session_summary, SessionSummary
from setmetrics.session import TrainingSession

logger = logging.getLogger(__name__)


def session_inputs(
    session: TrainingSession,
) -> tuple[list[float], list[int], list[float]]:
    """Return ``(durations, intensities, rest_durations)`` for *session*.

    Only completed sets are used.  Rest durations are the gaps between
    consecutive sets, so there is one fewer than there are sets.
    """
    return session.durations(), session.intensities(), session.rest_durations()


def analyze_session(
    session: TrainingSession,
    analyzer: SessionAnalyzer | None = None,
) -> AnalysisResult:
    """Analyze the completed sets of a session.

    Raises:
        InvalidArgument: if the derived inputs fail validation (e.g. an
            intensity outside 1-5).
    """
    engine = analyzer if analyzer is not None else SessionAnalyzer()
    durations, intensities, rests = session_inputs(session)
    convention = RestConvention.BETWEEN_SETS if rests else None
    return engine.analyze(durations, intensities, rests, rest_convention=convention)


def run_pipeline(
    session: TrainingSession,
    analyzer: SessionAnalyzer | None = None,
    day_override: date | str | None = None,
) -> SessionSummary:
    """Run the full analytics pipeline on one session.

    Invalid data does not raise: the summary comes back with zeroed
    metrics and ``error`` set, so callers can show placeholders.

    Args:
        session: The session to analyze.
        analyzer: Engine instance to use (a fresh one by default).
        day_override: Override the session date.

    Returns:
        A populated SessionSummary.
    """
    day = day_override if day_override else session.date

    try:
        result = analyze_session(session, analyzer)
    except InvalidArgument as e:
        logger.warning("cannot analyze session %s: %s", day, e)
        return build_session_summary(day, session=session, error=str(e))

    logger.debug("session %s: %r", day, result)
    return build_session_summary(day, result=result, session=session)
