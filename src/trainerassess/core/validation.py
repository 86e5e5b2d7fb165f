"""Rating and comment rules enforced on a candidate assessment before it is stored."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import pendulum
from pendulum.parsing.exceptions import ParserError

from ..schemas import Assessment
from ..taxonomy import ASSESSMENT_TAXONOMY, Taxonomy

VALID_RATINGS = frozenset({1, 2, 3, 4, 5})


@dataclass
class ValidationConfig:
    """Comment length thresholds; all bounds are inclusive."""

    min_comment_length: int = 20
    max_comment_length: int = 500
    overall_min_length: int = 20
    overall_max_length: int = 2000
    comment_required_max_rating: int = 3


@dataclass(slots=True)
class ValidationResult:
    """Field-keyed outcome of validating a candidate assessment."""

    valid: bool
    field_errors: dict[str, str] = field(default_factory=dict)


class AssessmentValidator:
    """Check a candidate assessment without mutating it or raising on rule violations.

    Low ratings (1 to ``comment_required_max_rating``) must be justified with a
    comment of at least ``min_comment_length`` trimmed characters; higher
    ratings may carry an optional comment. Every comment is capped at
    ``max_comment_length`` characters and the overall comment is always
    required.
    """

    def __init__(
        self,
        *,
        config: ValidationConfig | None = None,
        taxonomy: Taxonomy | None = None,
    ) -> None:
        self._config = config or ValidationConfig()
        self._taxonomy = taxonomy or ASSESSMENT_TAXONOMY

    def validate(self, candidate: Mapping[str, Any] | Assessment) -> ValidationResult:
        fields: Mapping[str, Any] = (
            candidate.to_record() if isinstance(candidate, Assessment) else candidate
        )
        errors: dict[str, str] = {}

        self._check_identity(fields, errors)
        for parameter_id in self._taxonomy.parameter_ids():
            self._check_parameter(fields, parameter_id, errors)
        self._check_overall(fields.get("overall_comments"), errors)

        return ValidationResult(valid=not errors, field_errors=errors)

    def _check_identity(self, fields: Mapping[str, Any], errors: dict[str, str]) -> None:
        trainer_id = fields.get("trainer_id")
        if not isinstance(trainer_id, str) or not trainer_id.strip():
            errors["trainer_id"] = "Please select a trainer"

        raw_date = fields.get("assessment_date")
        if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
            errors["assessment_date"] = "Please select an assessment date"
        elif not self._is_calendar_date(raw_date):
            errors["assessment_date"] = "Assessment date must be a valid date (YYYY-MM-DD)"

    def _check_parameter(
        self,
        fields: Mapping[str, Any],
        parameter_id: str,
        errors: dict[str, str],
    ) -> None:
        config = self._config
        comment_field = self._taxonomy.comment_field(parameter_id)
        rating = self._coerce_rating(self._lookup(fields, parameter_id, "ratings"))
        comment = self._lookup(fields, comment_field, "comments", key=parameter_id)
        comment = "" if comment is None else str(comment)

        if rating is None:
            errors[parameter_id] = "Rating is required (1-5)"

        if len(comment) > config.max_comment_length:
            errors[comment_field] = (
                f"Comment must not exceed {config.max_comment_length} characters"
            )
        elif (
            rating is not None
            and rating <= config.comment_required_max_rating
            and len(comment.strip()) < config.min_comment_length
        ):
            errors[comment_field] = (
                f"Comment required, min {config.min_comment_length} chars "
                f"for ratings 1-{config.comment_required_max_rating}"
            )

    def _check_overall(self, value: Any, errors: dict[str, str]) -> None:
        config = self._config
        text = "" if value is None else str(value)
        trimmed = len(text.strip())
        if trimmed < config.overall_min_length:
            errors["overall_comments"] = (
                f"Overall comments are required (min {config.overall_min_length} characters)"
            )
        elif trimmed > config.overall_max_length:
            errors["overall_comments"] = (
                f"Overall comments must not exceed {config.overall_max_length} characters"
            )

    @staticmethod
    def _lookup(
        fields: Mapping[str, Any],
        name: str,
        nested: str,
        *,
        key: str | None = None,
    ) -> Any:
        if name in fields:
            return fields[name]
        container = fields.get(nested)
        if isinstance(container, Mapping):
            return container.get(key or name)
        return None

    @staticmethod
    def _coerce_rating(value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if isinstance(value, int) and value in VALID_RATINGS:
            return value
        return None

    @staticmethod
    def _is_calendar_date(value: Any) -> bool:
        if isinstance(value, datetime):
            return False
        if isinstance(value, date):
            return True
        if not isinstance(value, str):
            return False
        try:
            parsed = pendulum.parse(value.strip(), exact=True)
        except (ValueError, ParserError):
            return False
        # exact parsing also yields DateTime, Time and Duration objects
        return isinstance(parsed, pendulum.Date) and not isinstance(parsed, pendulum.DateTime)


_DEFAULT_VALIDATOR = AssessmentValidator()


def validate_assessment(candidate: Mapping[str, Any] | Assessment) -> ValidationResult:
    return _DEFAULT_VALIDATOR.validate(candidate)
