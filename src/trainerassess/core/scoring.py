"""Per-assessment and per-category score calculation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..schemas import Assessment
from ..taxonomy import ASSESSMENT_TAXONOMY, Taxonomy

MAX_RATING = 5


def round_half_up(value: float, places: int = 2) -> float:
    """Round like a fixed-point display would (2.675 -> 2.68, -3.75 -> -3.8)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(slots=True)
class CategoryAverage:
    """Average of a category's counted parameter ratings."""

    category_id: str
    category_name: str
    average: float
    parameter_count: int


@dataclass(slots=True)
class ParameterAverage:
    """Average of a single parameter across many assessments."""

    parameter_id: str
    label: str
    category_id: str
    average: float
    count: int


@dataclass(slots=True)
class ImprovementArea:
    """Parameter ranked by headroom to the maximum rating."""

    parameter_id: str
    label: str
    category_name: str
    current_average: float
    potential_impact: float


class ScoreCalculator:
    """Compute assessment, category and parameter averages from the taxonomy table."""

    def __init__(self, taxonomy: Taxonomy | None = None, *, places: int = 2) -> None:
        self._taxonomy = taxonomy or ASSESSMENT_TAXONOMY
        self._places = places

    @property
    def taxonomy(self) -> Taxonomy:
        return self._taxonomy

    def assessment_average(self, assessment: Assessment) -> float | None:
        """Unweighted mean of the counted ratings; ``None`` when nothing is rated."""
        values = [
            rating
            for parameter_id in self._taxonomy.parameter_ids()
            if (rating := assessment.rating(parameter_id))
        ]
        if not values:
            return None
        return sum(values) / len(values)

    def category_averages(self, assessment: Assessment) -> list[CategoryAverage]:
        results: list[CategoryAverage] = []
        for category in self._taxonomy.categories:
            values = [
                rating
                for parameter_id in category.parameter_ids
                if (rating := assessment.rating(parameter_id))
            ]
            results.append(
                CategoryAverage(
                    category_id=category.id,
                    category_name=category.name,
                    average=sum(values) / len(values) if values else 0.0,
                    parameter_count=len(values),
                )
            )
        return results

    def mean_of_averages(self, assessments: Iterable[Assessment]) -> float | None:
        """Mean of per-assessment averages, rounded for reporting."""
        averages = [
            average
            for assessment in assessments
            if (average := self.assessment_average(assessment)) is not None
        ]
        if not averages:
            return None
        return round_half_up(sum(averages) / len(averages), self._places)

    def pooled_category_averages(self, assessments: Iterable[Assessment]) -> dict[str, float]:
        """Per-category mean over every counted rating in the set (0.0 when sparse)."""
        sums = {category.id: 0 for category in self._taxonomy.categories}
        counts = {category.id: 0 for category in self._taxonomy.categories}
        for assessment in assessments:
            for parameter_id, rating in assessment.counted_ratings().items():
                category_id = self._taxonomy.category_for(parameter_id).id
                sums[category_id] += rating
                counts[category_id] += 1
        return {
            category_id: round_half_up(sums[category_id] / counts[category_id], self._places)
            if counts[category_id]
            else 0.0
            for category_id in sums
        }

    def parameter_averages(self, assessments: Iterable[Assessment]) -> list[ParameterAverage]:
        rows = list(assessments)
        results: list[ParameterAverage] = []
        for category in self._taxonomy.categories:
            for parameter in category.parameters:
                values = [
                    rating for assessment in rows if (rating := assessment.rating(parameter.id))
                ]
                results.append(
                    ParameterAverage(
                        parameter_id=parameter.id,
                        label=parameter.label,
                        category_id=category.id,
                        average=round_half_up(sum(values) / len(values), self._places) if values else 0.0,
                        count=len(values),
                    )
                )
        return results

    @staticmethod
    def best_parameter(averages: Iterable[ParameterAverage]) -> ParameterAverage | None:
        rated = [item for item in averages if item.count]
        # first wins on ties, in taxonomy order
        return max(rated, key=lambda item: item.average) if rated else None

    @staticmethod
    def worst_parameter(averages: Iterable[ParameterAverage]) -> ParameterAverage | None:
        rated = [item for item in averages if item.count]
        return min(rated, key=lambda item: item.average) if rated else None

    def improvement_areas(self, assessments: Iterable[Assessment]) -> list[ImprovementArea]:
        areas = [
            ImprovementArea(
                parameter_id=item.parameter_id,
                label=item.label,
                category_name=self._taxonomy.category(item.category_id).name,
                current_average=item.average,
                potential_impact=round_half_up(MAX_RATING - item.average, self._places),
            )
            for item in self.parameter_averages(assessments)
            if item.count
        ]
        areas.sort(key=lambda area: area.potential_impact, reverse=True)
        return areas


_DEFAULT_CALCULATOR = ScoreCalculator()


def assessment_average(assessment: Assessment) -> float | None:
    return _DEFAULT_CALCULATOR.assessment_average(assessment)


def category_averages(assessment: Assessment) -> list[CategoryAverage]:
    return _DEFAULT_CALCULATOR.category_averages(assessment)
