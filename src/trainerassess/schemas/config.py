"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ValidationSection(BaseModel):
    min_comment_length: int | None = Field(default=None, ge=0)
    max_comment_length: int | None = Field(default=None, gt=0)
    overall_min_length: int | None = Field(default=None, ge=0)
    overall_max_length: int | None = Field(default=None, gt=0)
    comment_required_max_rating: int | None = Field(default=None, ge=0, le=5)

    model_config = ConfigDict(extra="forbid")


class TrendSection(BaseModel):
    dead_band: float | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class ActivitySection(BaseModel):
    active_within_days: int | None = Field(default=None, gt=0)

    model_config = ConfigDict(extra="forbid")


class ReportSection(BaseModel):
    monthly_trend_months: int | None = Field(default=None, gt=0)
    top_performers_limit: int | None = Field(default=None, gt=0)

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    validation: ValidationSection = Field(default_factory=ValidationSection)
    trends: TrendSection = Field(default_factory=TrendSection)
    activity: ActivitySection = Field(default_factory=ActivitySection)
    reports: ReportSection = Field(default_factory=ReportSection)

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for name in ("validation", "trends", "activity", "reports"):
            section = getattr(self, name).model_dump(exclude_none=True)
            if section:
                settings[name] = section
        return settings


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValueError("Config must be a mapping")
    try:
        return AppConfig.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid config: {exc}") from exc
