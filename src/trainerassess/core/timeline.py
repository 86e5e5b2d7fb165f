"""Monthly and quarterly platform time series."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from ..schemas import Assessment
from .aggregation import Now
from .periods import DateWindow, PeriodResolver, reference_date
from .scoring import ScoreCalculator


@dataclass(slots=True)
class MonthlyTrend:
    month: str
    period: str
    start: date
    end: date
    average_rating: float
    assessment_count: int
    trainers_assessed: int
    category_averages: dict[str, float]


@dataclass(slots=True)
class QuarterlyData:
    quarter: str
    year: int
    quarter_number: int
    start: date
    end: date
    average_rating: float
    assessment_count: int
    trainers_assessed: int
    category_averages: dict[str, float]


class TrendBuilder:
    """Bucket assessments by calendar month or quarter.

    Empty buckets keep the numeric ``0.0`` average and zero counts so a chart
    always receives a full series; ``assessment_count`` tells them apart from
    real scores.
    """

    def __init__(
        self,
        *,
        calculator: ScoreCalculator | None = None,
        resolver: PeriodResolver | None = None,
    ) -> None:
        self._calculator = calculator or ScoreCalculator()
        self._resolver = resolver or PeriodResolver()

    def monthly(
        self,
        assessments: Iterable[Assessment],
        now: Now = None,
        months: int = 12,
    ) -> list[MonthlyTrend]:
        if months < 0:
            raise ValueError("months must not be negative")
        rows = list(assessments)
        trends: list[MonthlyTrend] = []
        for offset in range(months - 1, -1, -1):
            bucket = self._resolver.month_bucket(now, offset)
            average, count, trainers, categories = self._summarize(bucket, rows)
            trends.append(
                MonthlyTrend(
                    month=bucket.start.format("MMM YYYY"),
                    period=bucket.name,
                    start=bucket.start,
                    end=bucket.last_day,
                    average_rating=average,
                    assessment_count=count,
                    trainers_assessed=trainers,
                    category_averages=categories,
                )
            )
        return trends

    def quarterly(self, assessments: Iterable[Assessment], now: Now = None) -> list[QuarterlyData]:
        """The eight quarters spanning last year and the current year."""
        rows = list(assessments)
        current_year = reference_date(now).year
        quarters: list[QuarterlyData] = []
        for year in (current_year - 1, current_year):
            for number in (1, 2, 3, 4):
                bucket = self._resolver.quarter_bucket(year, number)
                average, count, trainers, categories = self._summarize(bucket, rows)
                quarters.append(
                    QuarterlyData(
                        quarter=bucket.name,
                        year=year,
                        quarter_number=number,
                        start=bucket.start,
                        end=bucket.last_day,
                        average_rating=average,
                        assessment_count=count,
                        trainers_assessed=trainers,
                        category_averages=categories,
                    )
                )
        return quarters

    def _summarize(
        self,
        bucket: DateWindow,
        rows: list[Assessment],
    ) -> tuple[float, int, int, dict[str, float]]:
        selected = bucket.filter(rows)
        average = self._calculator.mean_of_averages(selected)
        return (
            average if average is not None else 0.0,
            len(selected),
            len({item.trainer_id for item in selected}),
            self._calculator.pooled_category_averages(selected),
        )
