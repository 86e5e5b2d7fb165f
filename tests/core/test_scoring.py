from __future__ import annotations

from typing import Any

import pytest

from trainerassess.core import ScoreCalculator, assessment_average, category_averages, round_half_up
from trainerassess.schemas import Assessment
from trainerassess.taxonomy import ASSESSMENT_TAXONOMY, PARAMETER_IDS


def build_assessment(rating: int | None = 4, **kwargs: Any) -> Assessment:
    defaults: dict[str, Any] = {
        "id": "A-001",
        "trainer_id": "T-001",
        "assessor_id": "M-001",
        "assessment_date": "2025-05-02",
        "ratings": {parameter_id: rating for parameter_id in PARAMETER_IDS},
    }
    defaults.update(kwargs)
    return Assessment.model_validate(defaults)


@pytest.mark.parametrize(
    "value, places, expected",
    [
        (2.675, 2, 2.68),
        (1.005, 2, 1.01),
        (3.375, 2, 3.38),
        (14.2857, 1, 14.3),
        (-3.75, 1, -3.8),
    ],
)
def test_round_half_up_matches_fixed_point_display(value: float, places: int, expected: float):
    assert round_half_up(value, places) == expected


def test_assessment_average_ignores_zero_and_missing_ratings():
    ratings = {parameter_id: 0 for parameter_id in PARAMETER_IDS}
    ratings.update({"logs_in_early": 3, "video_always_on": 4, "clear_speech": None})

    assessment = build_assessment(ratings=ratings)

    assert assessment_average(assessment) == pytest.approx(3.5)


def test_assessment_average_is_none_without_counted_ratings():
    assert assessment_average(build_assessment(rating=None)) is None
    assert assessment_average(build_assessment(rating=0)) is None


def test_category_averages_follow_taxonomy_order():
    ratings = {parameter_id: 3 for parameter_id in PARAMETER_IDS}
    for parameter_id in ASSESSMENT_TAXONOMY.category("trainer_readiness").parameter_ids:
        ratings[parameter_id] = 5
    ratings["survey_assignment"] = None

    result = category_averages(build_assessment(ratings=ratings))

    assert [item.category_id for item in result] == [
        "trainer_readiness",
        "expertise_delivery",
        "engagement_interaction",
        "communication",
        "technical_acumen",
    ]
    assert result[0].average == 5.0
    assert result[0].parameter_count == 5
    assert result[-1].average == 3.0
    assert result[-1].parameter_count == 3


def test_empty_category_reports_zero_with_zero_count():
    ratings = {"logs_in_early": 4}

    result = category_averages(build_assessment(ratings=ratings))

    communication = next(item for item in result if item.category_id == "communication")
    assert communication.average == 0.0
    assert communication.parameter_count == 0


def test_mean_of_averages_is_unweighted_across_assessments():
    calculator = ScoreCalculator()
    sparse = build_assessment(id="A-2", ratings={"logs_in_early": 1})

    result = calculator.mean_of_averages([build_assessment(rating=5), sparse])

    assert result == 3.0
    assert calculator.mean_of_averages([]) is None
    assert calculator.mean_of_averages([build_assessment(rating=None)]) is None


def test_pooled_category_averages_are_zero_when_empty():
    pooled = ScoreCalculator().pooled_category_averages([])

    assert pooled == {
        "trainer_readiness": 0.0,
        "expertise_delivery": 0.0,
        "engagement_interaction": 0.0,
        "communication": 0.0,
        "technical_acumen": 0.0,
    }


def test_parameter_averages_and_best_worst():
    calculator = ScoreCalculator()
    first = build_assessment(rating=4, ratings={"logs_in_early": 5, "clear_speech": 2})
    second = build_assessment(id="A-2", ratings={"logs_in_early": 4, "clear_speech": 1})

    averages = calculator.parameter_averages([first, second])

    by_id = {item.parameter_id: item for item in averages}
    assert len(averages) == 21
    assert by_id["logs_in_early"].average == 4.5
    assert by_id["logs_in_early"].count == 2
    assert by_id["video_always_on"].count == 0
    assert calculator.best_parameter(averages).parameter_id == "logs_in_early"
    assert calculator.worst_parameter(averages).parameter_id == "clear_speech"


def test_best_and_worst_are_none_when_nothing_rated():
    averages = ScoreCalculator().parameter_averages([])

    assert ScoreCalculator.best_parameter(averages) is None
    assert ScoreCalculator.worst_parameter(averages) is None


def test_improvement_areas_rank_by_headroom_and_skip_unrated():
    assessment = build_assessment(
        ratings={"logs_in_early": 5, "clear_speech": 2, "professional_tone": 3}
    )

    areas = ScoreCalculator().improvement_areas([assessment])

    assert [area.parameter_id for area in areas] == ["clear_speech", "professional_tone", "logs_in_early"]
    assert areas[0].potential_impact == 3.0
    assert areas[0].category_name == "Participant Engagement & Interaction"
    assert areas[-1].potential_impact == 0.0


def test_category_weighted_sum_matches_rating_total():
    ratings = {parameter_id: (index % 5) + 1 for index, parameter_id in enumerate(PARAMETER_IDS)}
    ratings["professional_tone"] = 0
    assessment = build_assessment(ratings=ratings)

    categories = category_averages(assessment)
    weighted = sum(item.average * item.parameter_count for item in categories)

    assert weighted == pytest.approx(sum(value for value in ratings.values() if value > 0))
    assert 1 <= assessment_average(assessment) <= 5
