"""Flat per-assessment rows pivoted by assessor or by trainer."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Literal, Mapping

from ..schemas import Assessment
from ..taxonomy import ASSESSMENT_TAXONOMY, Taxonomy
from .scoring import ScoreCalculator, round_half_up

GroupBy = Literal["assessor", "trainer"]
UNKNOWN_NAME = "Unknown"


@dataclass(slots=True)
class ItemizedRow:
    group_by: GroupBy
    assessment_id: str
    group_id: str
    group_name: str
    assessment_count: int
    assessment_date: date
    counterpart_id: str
    counterpart_name: str
    average_score: float | None
    parameter_scores: dict[str, int | None] = field(default_factory=dict)

    def to_record(self, taxonomy: Taxonomy | None = None) -> dict[str, Any]:
        """Ordered column mapping for tabular exporters; missing values become ``""``."""
        taxonomy = taxonomy or ASSESSMENT_TAXONOMY
        group_label, counterpart_label = (
            ("Assessor", "Trainer") if self.group_by == "assessor" else ("Trainer", "Assessor")
        )
        record: dict[str, Any] = {
            group_label: self.group_name,
            "Assessment Count": self.assessment_count,
            "Assessment Date": self.assessment_date.isoformat(),
            counterpart_label: self.counterpart_name,
            "Average Score": "" if self.average_score is None else self.average_score,
        }
        for parameter_id in taxonomy.parameter_ids():
            value = self.parameter_scores.get(parameter_id)
            record[taxonomy.parameter(parameter_id).label] = "" if value is None else value
        return record


@dataclass(slots=True)
class ItemizedReport:
    by_assessor: list[ItemizedRow]
    by_trainer: list[ItemizedRow]

    def records(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "by_assessor": [row.to_record() for row in self.by_assessor],
            "by_trainer": [row.to_record() for row in self.by_trainer],
        }


class ItemizedReportAssembler:
    def __init__(self, *, calculator: ScoreCalculator | None = None) -> None:
        self._calculator = calculator or ScoreCalculator()

    def build(
        self,
        assessments: Iterable[Assessment],
        assessor_names: Mapping[str, str],
        trainer_names: Mapping[str, str],
    ) -> ItemizedReport:
        rows = list(assessments)
        assessor_counts = Counter(item.assessor_id for item in rows)
        trainer_counts = Counter(item.trainer_id for item in rows)

        by_assessor = [
            self._row(
                item,
                group_by="assessor",
                group_id=item.assessor_id,
                group_name=assessor_names.get(item.assessor_id, UNKNOWN_NAME),
                group_count=assessor_counts[item.assessor_id],
                counterpart_id=item.trainer_id,
                counterpart_name=trainer_names.get(item.trainer_id, UNKNOWN_NAME),
            )
            for item in rows
        ]
        by_trainer = [
            self._row(
                item,
                group_by="trainer",
                group_id=item.trainer_id,
                group_name=trainer_names.get(item.trainer_id, UNKNOWN_NAME),
                group_count=trainer_counts[item.trainer_id],
                counterpart_id=item.assessor_id,
                counterpart_name=assessor_names.get(item.assessor_id, UNKNOWN_NAME),
            )
            for item in rows
        ]
        by_assessor.sort(key=_row_order)
        by_trainer.sort(key=_row_order)
        return ItemizedReport(by_assessor=by_assessor, by_trainer=by_trainer)

    def _row(
        self,
        assessment: Assessment,
        *,
        group_by: GroupBy,
        group_id: str,
        group_name: str,
        group_count: int,
        counterpart_id: str,
        counterpart_name: str,
    ) -> ItemizedRow:
        average = self._calculator.assessment_average(assessment)
        return ItemizedRow(
            group_by=group_by,
            assessment_id=assessment.id,
            group_id=group_id,
            group_name=group_name,
            assessment_count=group_count,
            assessment_date=assessment.assessment_date,
            counterpart_id=counterpart_id,
            counterpart_name=counterpart_name,
            average_score=round_half_up(average, 2) if average is not None else None,
            parameter_scores={
                parameter_id: assessment.rating(parameter_id) or None
                for parameter_id in self._calculator.taxonomy.parameter_ids()
            },
        )


def _row_order(row: ItemizedRow) -> tuple[str, str, date, str]:
    return (row.group_name, row.group_id, row.assessment_date, row.assessment_id)
