"""Fold windowed assessments into trainer, manager and platform statistics."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Literal, Mapping

from ..schemas import Assessment, Profile
from .periods import PeriodResolver, reference_date
from .scoring import ScoreCalculator, round_half_up
from .trends import TrendClassifier, TrendDirection

ActivityStatus = Literal["active", "inactive"]
Now = datetime | date | None


@dataclass
class ActivityConfig:
    """Recency threshold for an assessor to count as active."""

    active_within_days: int = 30


@dataclass(slots=True)
class TrainerStatistics:
    """Per-trainer averages across the standard windows.

    Averages are ``None`` when the window holds no assessments; the paired
    ``*_count`` field says how many assessments each average covers.
    """

    trainer_id: str
    trainer_name: str | None
    team_name: str | None
    reporting_manager_name: str | None
    window: str
    current_month_avg: float | None
    quarter_avg: float | None
    ytd_avg: float | None
    all_time_avg: float | None
    current_month_count: int
    quarter_count: int
    ytd_count: int
    all_time_count: int
    previous_month_avg: float | None
    total_assessments: int
    trend: TrendDirection
    trend_percentage: float
    last_assessment_date: date | None


@dataclass(slots=True)
class ManagerActivity:
    """Assessment activity of a single assessor."""

    manager_id: str
    manager_name: str | None
    team_name: str | None
    assessments_this_month: int
    assessments_this_quarter: int
    assessments_this_year: int
    all_time_total: int
    avg_rating_given: float | None
    unique_trainers_assessed: int
    last_assessment_date: date | None
    days_since_last_assessment: int | None
    activity_status: ActivityStatus


@dataclass(slots=True)
class PlatformStats:
    total_trainers: int
    assessments_this_month: int
    trainers_assessed_this_month: int
    platform_average_rating: float | None
    assessment_activity_rate: float


@dataclass(slots=True)
class TopPerformer:
    trainer_id: str
    trainer_name: str | None
    team_name: str | None
    average_rating: float
    assessment_count: int


@dataclass(slots=True)
class ActivityHeatmapCell:
    date: date
    count: int


def group_by(
    assessments: Iterable[Assessment],
    key: Callable[[Assessment], str],
) -> dict[str, list[Assessment]]:
    grouped: dict[str, list[Assessment]] = defaultdict(list)
    for assessment in assessments:
        grouped[key(assessment)].append(assessment)
    return dict(grouped)


class TrainerAggregator:
    """Build :class:`TrainerStatistics` for one trainer from a bulk assessment set."""

    def __init__(
        self,
        *,
        calculator: ScoreCalculator | None = None,
        resolver: PeriodResolver | None = None,
        classifier: TrendClassifier | None = None,
    ) -> None:
        self._calculator = calculator or ScoreCalculator()
        self._resolver = resolver or PeriodResolver()
        self._classifier = classifier or TrendClassifier()

    def aggregate(
        self,
        trainer_id: str,
        assessments: Iterable[Assessment],
        now: Now = None,
        window: str = "all-time",
        *,
        profile: Profile | None = None,
        manager_name: str | None = None,
    ) -> TrainerStatistics:
        own = [item for item in assessments if item.trainer_id == trainer_id]
        resolve = self._resolver.resolve

        # each window re-filters the same list; one assessment may count in all four
        month = resolve(now, "month").filter(own)
        quarter = resolve(now, "quarter").filter(own)
        ytd = resolve(now, "ytd").filter(own)
        all_time = resolve(now, "all-time").filter(own)
        previous = resolve(now, "previous-month").filter(own)
        selected = resolve(now, window).filter(own)

        month_avg = self._calculator.mean_of_averages(month)
        previous_avg = self._calculator.mean_of_averages(previous)
        trend = self._classifier.classify(month_avg, previous_avg)

        return TrainerStatistics(
            trainer_id=trainer_id,
            trainer_name=profile.full_name if profile else None,
            team_name=profile.team_name if profile else None,
            reporting_manager_name=manager_name,
            window=window,
            current_month_avg=month_avg,
            quarter_avg=self._calculator.mean_of_averages(quarter),
            ytd_avg=self._calculator.mean_of_averages(ytd),
            all_time_avg=self._calculator.mean_of_averages(all_time),
            current_month_count=len(month),
            quarter_count=len(quarter),
            ytd_count=len(ytd),
            all_time_count=len(all_time),
            previous_month_avg=previous_avg,
            total_assessments=len(selected),
            trend=trend.direction,
            trend_percentage=trend.percentage,
            last_assessment_date=max((item.assessment_date for item in all_time), default=None),
        )


class ManagerAggregator:
    """Build :class:`ManagerActivity` keyed by assessor id."""

    def __init__(
        self,
        *,
        calculator: ScoreCalculator | None = None,
        resolver: PeriodResolver | None = None,
        config: ActivityConfig | None = None,
    ) -> None:
        self._calculator = calculator or ScoreCalculator()
        self._resolver = resolver or PeriodResolver()
        self._config = config or ActivityConfig()

    def aggregate(
        self,
        manager_id: str,
        assessments: Iterable[Assessment],
        now: Now = None,
        *,
        profile: Profile | None = None,
    ) -> ManagerActivity:
        today = reference_date(now)
        authored = self._resolver.resolve(now, "all-time").filter(
            item for item in assessments if item.assessor_id == manager_id
        )

        def count_in(window: str) -> int:
            return len(self._resolver.resolve(now, window).filter(authored))

        last_date = max((item.assessment_date for item in authored), default=None)
        days_since = today.toordinal() - last_date.toordinal() if last_date else None
        status: ActivityStatus = (
            "active"
            if days_since is not None and days_since <= self._config.active_within_days
            else "inactive"
        )

        return ManagerActivity(
            manager_id=manager_id,
            manager_name=profile.full_name if profile else None,
            team_name=profile.team_name if profile else None,
            assessments_this_month=count_in("month"),
            assessments_this_quarter=count_in("quarter"),
            assessments_this_year=count_in("ytd"),
            all_time_total=len(authored),
            avg_rating_given=self._calculator.mean_of_averages(authored),
            unique_trainers_assessed=len({item.trainer_id for item in authored}),
            last_assessment_date=last_date,
            days_since_last_assessment=days_since,
            activity_status=status,
        )


class PlatformAggregator:
    """Platform-wide headline numbers, leaderboards and activity heatmaps."""

    def __init__(
        self,
        *,
        calculator: ScoreCalculator | None = None,
        resolver: PeriodResolver | None = None,
    ) -> None:
        self._calculator = calculator or ScoreCalculator()
        self._resolver = resolver or PeriodResolver()

    def platform_stats(
        self,
        assessments: Iterable[Assessment],
        trainer_count: int,
        now: Now = None,
    ) -> PlatformStats:
        rows = self._resolver.resolve(now, "all-time").filter(assessments)
        month = self._resolver.resolve(now, "month").filter(rows)
        rate = round_half_up(len(month) / trainer_count, 2) if trainer_count > 0 else 0.0
        return PlatformStats(
            total_trainers=trainer_count,
            assessments_this_month=len(month),
            trainers_assessed_this_month=len({item.trainer_id for item in month}),
            platform_average_rating=self._calculator.mean_of_averages(rows),
            assessment_activity_rate=rate,
        )

    def top_performers(
        self,
        assessments: Iterable[Assessment],
        now: Now = None,
        window: str = "month",
        *,
        limit: int = 5,
        profiles: Mapping[str, Profile] | None = None,
    ) -> list[TopPerformer]:
        profiles = profiles or {}
        selected = self._resolver.resolve(now, window).filter(assessments)
        performers: list[TopPerformer] = []
        for trainer_id, rows in group_by(selected, lambda item: item.trainer_id).items():
            average = self._calculator.mean_of_averages(rows)
            if average is None:
                continue
            profile = profiles.get(trainer_id)
            performers.append(
                TopPerformer(
                    trainer_id=trainer_id,
                    trainer_name=profile.full_name if profile else None,
                    team_name=profile.team_name if profile else None,
                    average_rating=average,
                    assessment_count=len(rows),
                )
            )
        performers.sort(key=lambda item: (-item.average_rating, -item.assessment_count, item.trainer_id))
        return performers[:limit]

    def activity_heatmap(
        self,
        assessments: Iterable[Assessment],
        now: Now = None,
        months: int = 12,
    ) -> list[ActivityHeatmapCell]:
        window = self._resolver.last_n_months(now, months)
        counts: dict[date, int] = defaultdict(int)
        for item in window.filter(assessments):
            counts[item.assessment_date] += 1
        return [ActivityHeatmapCell(date=day, count=counts[day]) for day in sorted(counts)]
