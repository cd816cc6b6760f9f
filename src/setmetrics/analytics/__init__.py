"""Analytics engine for computing performance metrics from timed sets.

Modules:
    stats    -- Mean, standard deviation, CV, intensity normalization
    engine   -- Validation and the four session metrics
    summary  -- Session summary record, level labels, formatting
    pipeline -- Training session -> engine -> summary
"""

from setmetrics.analytics.stats import (
    mean,
    standard_deviation,
    coefficient_of_variation,
    normalize_intensity,
)
from setmetrics.analytics.engine import (
    analyze,
    calculate_total_active_time,
    calculate_work_rest_ratio,
    calculate_consistency_score,
    calculate_training_density_score,
    AnalysisResult,
    InvalidArgument,
    Intensity,
    RestConvention,
    SessionAnalyzer,
)
from setmetrics.analytics.summary import (
    build_overview,
    build_session_summary,
    consistency_level,
    density_level,
    SessionSummary,
    SessionsOverview,
)
from setmetrics.analytics.pipeline import analyze_session, run_pipeline

__all__ = [
    # stats
    "mean",
    "standard_deviation",
    "coefficient_of_variation",
    "normalize_intensity",
    # engine
    "analyze",
    "calculate_total_active_time",
    "calculate_work_rest_ratio",
    "calculate_consistency_score",
    "calculate_training_density_score",
    "AnalysisResult",
    "InvalidArgument",
    "Intensity",
    "RestConvention",
    "SessionAnalyzer",
    # summary
    "build_overview",
    "build_session_summary",
    "consistency_level",
    "density_level",
    "SessionSummary",
    "SessionsOverview",
    # pipeline
    "analyze_session",
    "run_pipeline",
]
