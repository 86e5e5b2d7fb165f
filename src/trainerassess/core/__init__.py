"""Core scoring and analytics components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .aggregation import (
    ActivityConfig,
    ActivityHeatmapCell,
    ManagerActivity,
    ManagerAggregator,
    PlatformAggregator,
    PlatformStats,
    TopPerformer,
    TrainerAggregator,
    TrainerStatistics,
)
from .itemized import ItemizedReport, ItemizedReportAssembler, ItemizedRow
from .periods import DateWindow, PeriodResolver, reference_date
from .scoring import (
    CategoryAverage,
    ImprovementArea,
    ParameterAverage,
    ScoreCalculator,
    assessment_average,
    category_averages,
    round_half_up,
)
from .timeline import MonthlyTrend, QuarterlyData, TrendBuilder
from .trends import Trend, TrendClassifier, TrendConfig
from .validation import (
    AssessmentValidator,
    ValidationConfig,
    ValidationResult,
    validate_assessment,
)

__all__ = [
    "ActivityConfig",
    "ActivityHeatmapCell",
    "AssessmentValidator",
    "CategoryAverage",
    "DateWindow",
    "ImprovementArea",
    "ItemizedReport",
    "ItemizedReportAssembler",
    "ItemizedRow",
    "ManagerActivity",
    "ManagerAggregator",
    "MonthlyTrend",
    "ParameterAverage",
    "PeriodResolver",
    "PlatformAggregator",
    "PlatformStats",
    "QuarterlyData",
    "ScoreCalculator",
    "TopPerformer",
    "TrainerAggregator",
    "TrainerStatistics",
    "Trend",
    "TrendBuilder",
    "TrendClassifier",
    "TrendConfig",
    "ValidationConfig",
    "ValidationResult",
    "assessment_average",
    "category_averages",
    "reference_date",
    "round_half_up",
    "validate_assessment",
]
