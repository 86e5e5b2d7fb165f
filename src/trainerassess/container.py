"""Dependency injection container for the analytics engine."""

from __future__ import annotations

from typing import Any

from dependency_injector import containers, providers

from .core import (
    ActivityConfig,
    AssessmentValidator,
    ItemizedReportAssembler,
    ManagerAggregator,
    PeriodResolver,
    PlatformAggregator,
    ScoreCalculator,
    TrainerAggregator,
    TrendBuilder,
    TrendClassifier,
    TrendConfig,
    ValidationConfig,
)
from .pipeline import AnalyticsService, ReportConfig


class AnalyticsContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition.

    ``analytics_service`` is a factory; callers supply ``store`` and
    ``directory`` when invoking it.
    """

    validation_config = providers.Singleton(ValidationConfig)
    trend_config = providers.Singleton(TrendConfig)
    activity_config = providers.Singleton(ActivityConfig)
    report_config = providers.Singleton(ReportConfig)

    score_calculator = providers.Singleton(ScoreCalculator)
    period_resolver = providers.Singleton(PeriodResolver)

    validator = providers.Singleton(AssessmentValidator, config=validation_config)
    trend_classifier = providers.Singleton(TrendClassifier, config=trend_config)

    trainer_aggregator = providers.Singleton(
        TrainerAggregator,
        calculator=score_calculator,
        resolver=period_resolver,
        classifier=trend_classifier,
    )
    manager_aggregator = providers.Singleton(
        ManagerAggregator,
        calculator=score_calculator,
        resolver=period_resolver,
        config=activity_config,
    )
    platform_aggregator = providers.Singleton(
        PlatformAggregator,
        calculator=score_calculator,
        resolver=period_resolver,
    )
    trend_builder = providers.Singleton(
        TrendBuilder,
        calculator=score_calculator,
        resolver=period_resolver,
    )
    itemized_assembler = providers.Singleton(ItemizedReportAssembler, calculator=score_calculator)

    analytics_service = providers.Factory(
        AnalyticsService,
        validator=validator,
        calculator=score_calculator,
        resolver=period_resolver,
        trainer_aggregator=trainer_aggregator,
        manager_aggregator=manager_aggregator,
        platform_aggregator=platform_aggregator,
        trend_builder=trend_builder,
        itemized_assembler=itemized_assembler,
        config=report_config,
    )


_SECTION_PROVIDERS: dict[str, tuple[str, type]] = {
    "validation": ("validation_config", ValidationConfig),
    "trends": ("trend_config", TrendConfig),
    "activity": ("activity_config", ActivityConfig),
    "reports": ("report_config", ReportConfig),
}


def create_container(*, settings: dict[str, Any] | None = None) -> AnalyticsContainer:
    """Instantiate container with optional per-section config overrides."""

    container = AnalyticsContainer()

    if not settings:
        return container

    for section, (provider_name, config_cls) in _SECTION_PROVIDERS.items():
        values = settings.get(section) if isinstance(settings, dict) else None
        if values:
            getattr(container, provider_name).override(providers.Singleton(config_cls, **values))

    return container
