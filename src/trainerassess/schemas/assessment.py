"""Assessment row model and store query filter."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..taxonomy import ASSESSMENT_TAXONOMY, PARAMETER_IDS, TAXONOMY_VERSION, Taxonomy

StoredRating = Annotated[int, Field(ge=0, le=5)]


class Assessment(BaseModel):
    """Persisted manager assessment of a trainer.

    Store rows arrive flat (``logs_in_early``, ``logs_in_early_comments``);
    they are folded into the ``ratings`` and ``comments`` maps keyed by
    parameter id. A rating of 0 or null is tolerated on read and never
    counted by the calculators.
    """

    id: str
    trainer_id: str
    assessor_id: str
    assessment_date: date
    created_at: datetime | None = None
    updated_at: datetime | None = None
    ratings: dict[str, StoredRating | None] = Field(default_factory=dict)
    comments: dict[str, str] = Field(default_factory=dict)
    overall_comments: str = ""
    taxonomy_version: str = TAXONOMY_VERSION

    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _fold_flat_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        payload = dict(data)
        ratings = dict(payload.pop("ratings", None) or {})
        comments = dict(payload.pop("comments", None) or {})
        for parameter_id in PARAMETER_IDS:
            if parameter_id in payload:
                ratings[parameter_id] = payload.pop(parameter_id)
            comment_field = Taxonomy.comment_field(parameter_id)
            if comment_field in payload:
                comments[parameter_id] = payload.pop(comment_field)
        payload["ratings"] = ratings
        payload["comments"] = {key: value or "" for key, value in comments.items()}
        return payload

    @field_validator("ratings", "comments")
    @classmethod
    def _known_parameters(cls, value: dict[str, Any]) -> dict[str, Any]:
        unknown = sorted(key for key in value if key not in ASSESSMENT_TAXONOMY)
        if unknown:
            raise ValueError(f"Unknown parameter ids: {', '.join(unknown)}")
        return value

    @field_validator("overall_comments", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def rating(self, parameter_id: str) -> int | None:
        return self.ratings.get(parameter_id)

    def comment(self, parameter_id: str) -> str:
        return self.comments.get(parameter_id, "")

    def counted_ratings(self) -> dict[str, int]:
        """Ratings that take part in averages (set and positive)."""
        return {key: value for key, value in self.ratings.items() if value}

    def is_complete(self) -> bool:
        return all(self.rating(parameter_id) for parameter_id in PARAMETER_IDS)

    def to_record(self) -> dict[str, Any]:
        """Flatten back into the store row layout."""
        record: dict[str, Any] = {
            "id": self.id,
            "trainer_id": self.trainer_id,
            "assessor_id": self.assessor_id,
            "assessment_date": self.assessment_date.isoformat(),
        }
        for parameter_id in PARAMETER_IDS:
            record[parameter_id] = self.rating(parameter_id)
            record[Taxonomy.comment_field(parameter_id)] = self.comment(parameter_id)
        record["overall_comments"] = self.overall_comments
        record["created_at"] = self.created_at.isoformat() if self.created_at else None
        record["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return record


class AssessmentFilter(BaseModel):
    """Store query filter; date bounds are inclusive calendar dates."""

    date_from: date | None = None
    date_to: date | None = None
    trainer_id: str | None = None
    assessor_id: str | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _ordered_bounds(self) -> "AssessmentFilter":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        return self

    def matches(self, assessment: Assessment) -> bool:
        if self.date_from and assessment.assessment_date < self.date_from:
            return False
        if self.date_to and assessment.assessment_date > self.date_to:
            return False
        if self.trainer_id and assessment.trainer_id != self.trainer_id:
            return False
        if self.assessor_id and assessment.assessor_id != self.assessor_id:
            return False
        return True
