"""Analytics service: one bulk store read per request, then pure computation."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, is_dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Literal, Mapping, get_args

import pendulum
import structlog

from . import __version__
from .adapters import AssessmentStore, ProfileDirectory, StoreReadError
from .core import (
    AssessmentValidator,
    ImprovementArea,
    ItemizedReport,
    ItemizedReportAssembler,
    ManagerActivity,
    ManagerAggregator,
    MonthlyTrend,
    ParameterAverage,
    PeriodResolver,
    PlatformAggregator,
    PlatformStats,
    QuarterlyData,
    ScoreCalculator,
    TopPerformer,
    TrainerAggregator,
    TrainerStatistics,
    TrendBuilder,
    ValidationResult,
    reference_date,
)
from .core.aggregation import ActivityHeatmapCell, Now
from .schemas import Assessment, AssessmentFilter, Profile
from .taxonomy import TAXONOMY_VERSION

ReportKind = Literal["trainers", "managers", "monthly", "quarterly", "itemized", "platform", "top"]
REPORT_KINDS: tuple[str, ...] = get_args(ReportKind)


@dataclass
class ReportConfig:
    """Defaults for report sizes."""

    monthly_trend_months: int = 12
    top_performers_limit: int = 5


@dataclass(slots=True)
class TrainerBreakdown:
    """Parameter-level view of one trainer within a window."""

    trainer_id: str
    window: str
    assessment_count: int
    parameter_averages: list[ParameterAverage]
    best_parameter: ParameterAverage | None
    worst_parameter: ParameterAverage | None
    improvement_areas: list[ImprovementArea]


class AnalyticsService:
    """Single aggregation interface over the store, directory and core calculators.

    Every call re-reads the store; there is no cached aggregate state, so a
    caching layer can later wrap this class without touching the calculators.
    """

    def __init__(
        self,
        *,
        store: AssessmentStore,
        directory: ProfileDirectory | None = None,
        validator: AssessmentValidator | None = None,
        calculator: ScoreCalculator | None = None,
        resolver: PeriodResolver | None = None,
        trainer_aggregator: TrainerAggregator | None = None,
        manager_aggregator: ManagerAggregator | None = None,
        platform_aggregator: PlatformAggregator | None = None,
        trend_builder: TrendBuilder | None = None,
        itemized_assembler: ItemizedReportAssembler | None = None,
        config: ReportConfig | None = None,
    ) -> None:
        self._store = store
        self._directory = directory
        self._validator = validator or AssessmentValidator()
        self._calculator = calculator or ScoreCalculator()
        self._resolver = resolver or PeriodResolver()
        self._trainers = trainer_aggregator or TrainerAggregator(
            calculator=self._calculator, resolver=self._resolver
        )
        self._managers = manager_aggregator or ManagerAggregator(
            calculator=self._calculator, resolver=self._resolver
        )
        self._platform = platform_aggregator or PlatformAggregator(
            calculator=self._calculator, resolver=self._resolver
        )
        self._trend_builder = trend_builder or TrendBuilder(
            calculator=self._calculator, resolver=self._resolver
        )
        self._itemized = itemized_assembler or ItemizedReportAssembler(calculator=self._calculator)
        self._config = config or ReportConfig()
        self._logger = structlog.get_logger(__name__)

    def validate(self, candidate: Mapping[str, Any] | Assessment) -> ValidationResult:
        result = self._validator.validate(candidate)
        self._logger.info(
            "assessment.validated",
            valid=result.valid,
            error_fields=sorted(result.field_errors),
        )
        return result

    def trainer_statistics(self, now: Now = None, window: str = "all-time") -> list[TrainerStatistics]:
        self._resolver.resolve(now, window)  # reject unknown windows before reading the store
        assessments = self._fetch(AssessmentFilter())
        profiles = self._profiles_for_role("trainer")
        trainer_ids = set(profiles) | {item.trainer_id for item in assessments}
        profiles.update(self._lookup_profiles(trainer_ids - set(profiles)))
        manager_names = self._names(
            profile.reporting_manager_id
            for profile in profiles.values()
            if profile.reporting_manager_id
        )

        stats: list[TrainerStatistics] = []
        for trainer_id in trainer_ids:
            profile = profiles.get(trainer_id)
            manager_id = profile.reporting_manager_id if profile else None
            stats.append(
                self._trainers.aggregate(
                    trainer_id,
                    assessments,
                    now,
                    window,
                    profile=profile,
                    manager_name=manager_names.get(manager_id) if manager_id else None,
                )
            )
        stats.sort(key=lambda item: ((item.trainer_name or "").lower(), item.trainer_id))
        self._logger.info(
            "analytics.trainer_statistics",
            window=window,
            trainers=len(stats),
            assessments=len(assessments),
        )
        return stats

    def trainer_breakdown(self, trainer_id: str, now: Now = None, window: str = "all-time") -> TrainerBreakdown:
        selected = self._resolver.resolve(now, window)
        assessments = self._fetch(
            AssessmentFilter(
                trainer_id=trainer_id,
                date_from=selected.start,
                date_to=selected.last_day,
            )
        )
        averages = self._calculator.parameter_averages(assessments)
        return TrainerBreakdown(
            trainer_id=trainer_id,
            window=window,
            assessment_count=len(assessments),
            parameter_averages=averages,
            best_parameter=self._calculator.best_parameter(averages),
            worst_parameter=self._calculator.worst_parameter(averages),
            improvement_areas=self._calculator.improvement_areas(assessments),
        )

    def manager_activity(self, now: Now = None) -> list[ManagerActivity]:
        assessments = self._fetch(AssessmentFilter())
        profiles = self._profiles_for_role("manager")
        manager_ids = set(profiles) | {item.assessor_id for item in assessments}
        profiles.update(self._lookup_profiles(manager_ids - set(profiles)))

        activity = [
            self._managers.aggregate(manager_id, assessments, now, profile=profiles.get(manager_id))
            for manager_id in manager_ids
        ]
        activity.sort(key=lambda item: ((item.manager_name or "").lower(), item.manager_id))
        self._logger.info(
            "analytics.manager_activity",
            managers=len(activity),
            active=sum(1 for item in activity if item.activity_status == "active"),
        )
        return activity

    def monthly_trend(self, now: Now = None, months: int | None = None) -> list[MonthlyTrend]:
        months = self._config.monthly_trend_months if months is None else months
        if months < 0:
            raise ValueError("months must not be negative")
        query = AssessmentFilter()
        if months:
            query = AssessmentFilter(
                date_from=self._resolver.month_bucket(now, months - 1).start,
                date_to=reference_date(now),
            )
        trends = self._trend_builder.monthly(self._fetch(query), now, months)
        self._logger.info("analytics.monthly_trend", months=months)
        return trends

    def quarterly_trend(self, now: Now = None) -> list[QuarterlyData]:
        year = reference_date(now).year
        query = AssessmentFilter(date_from=date(year - 1, 1, 1), date_to=date(year, 12, 31))
        quarters = self._trend_builder.quarterly(self._fetch(query), now)
        self._logger.info("analytics.quarterly_trend", year=year)
        return quarters

    def itemized_report(self, date_from: date | None = None, date_to: date | None = None) -> ItemizedReport:
        assessments = self._fetch(AssessmentFilter(date_from=date_from, date_to=date_to))
        assessor_names = self._names({item.assessor_id for item in assessments})
        trainer_names = self._names({item.trainer_id for item in assessments})
        report = self._itemized.build(assessments, assessor_names, trainer_names)
        self._logger.info("analytics.itemized_report", rows=len(report.by_assessor))
        return report

    def platform_stats(self, now: Now = None) -> PlatformStats:
        assessments = self._fetch(AssessmentFilter())
        trainer_count = len(self._profiles_for_role("trainer")) or len(
            {item.trainer_id for item in assessments}
        )
        return self._platform.platform_stats(assessments, trainer_count, now)

    def top_performers(self, now: Now = None, window: str = "month", limit: int | None = None) -> list[TopPerformer]:
        selected = self._resolver.resolve(now, window)
        assessments = self._fetch(AssessmentFilter(date_from=selected.start, date_to=selected.last_day))
        profiles = self._lookup_profiles({item.trainer_id for item in assessments})
        return self._platform.top_performers(
            assessments,
            now,
            window,
            limit=self._config.top_performers_limit if limit is None else limit,
            profiles=profiles,
        )

    def activity_heatmap(self, now: Now = None, months: int = 12) -> list[ActivityHeatmapCell]:
        selected = self._resolver.last_n_months(now, months)
        assessments = self._fetch(AssessmentFilter(date_from=selected.start, date_to=selected.last_day))
        return self._platform.activity_heatmap(assessments, now, months)

    def report(
        self,
        kind: str,
        *,
        now: Now = None,
        window: str = "all-time",
        months: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> Any:
        """Run a named report and return a JSON-ready payload."""
        if kind == "trainers":
            return to_jsonable(self.trainer_statistics(now, window))
        if kind == "managers":
            return to_jsonable(self.manager_activity(now))
        if kind == "monthly":
            return to_jsonable(self.monthly_trend(now, months))
        if kind == "quarterly":
            return to_jsonable(self.quarterly_trend(now))
        if kind == "itemized":
            return self.itemized_report(date_from, date_to).records()
        if kind == "platform":
            return to_jsonable(self.platform_stats(now))
        if kind == "top":
            return to_jsonable(self.top_performers(now, window))
        raise ValueError(f"Unsupported report kind: {kind!r}")

    def _fetch(self, query: AssessmentFilter) -> list[Assessment]:
        try:
            return self._store.fetch_assessments(query)
        except StoreReadError as exc:
            self._logger.error("store.read_failed", errors=exc.errors, query=query.model_dump(mode="json"))
            raise

    def _profiles_for_role(self, role: Literal["manager", "trainer"]) -> dict[str, Profile]:
        if self._directory is None:
            return {}
        return {profile.id: profile for profile in self._directory.list_profiles(role)}

    def _lookup_profiles(self, ids: Iterable[str]) -> dict[str, Profile]:
        if self._directory is None:
            return {}
        return self._directory.get_profiles(sorted(ids))

    def _names(self, ids: Iterable[str]) -> dict[str, str]:
        if self._directory is None:
            return {}
        return self._directory.resolve_names(sorted(set(ids)))


def to_jsonable(value: Any) -> Any:
    """Convert dataclass results into plain JSON-compatible structures."""
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    elif isinstance(value, list):
        value = [asdict(item) if is_dataclass(item) else item for item in value]
    return json.loads(json.dumps(value, default=_json_default, ensure_ascii=False))


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def build_envelope(kind: str, payload: Any, *, as_of: Now = None) -> dict[str, Any]:
    return {
        "metadata": {
            "kind": kind,
            "as_of": reference_date(as_of).isoformat(),
            "generated_at": pendulum.now("UTC").to_iso8601_string(),
            "app_version": __version__,
            "taxonomy_version": TAXONOMY_VERSION,
        },
        "results": payload,
    }


class OutputWriter:
    """Persist report payloads."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
