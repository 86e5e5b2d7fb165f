from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from trainerassess.cli import app
from trainerassess.taxonomy import PARAMETER_IDS


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


def build_row(rating: int, **kwargs: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": "A-001",
        "trainer_id": "T-001",
        "assessor_id": "M-001",
        "assessment_date": "2025-05-02",
        "overall_comments": "Well prepared session with good energy.",
    }
    for parameter_id in PARAMETER_IDS:
        row[parameter_id] = rating
        row[f"{parameter_id}_comments"] = None
    row.update(kwargs)
    return row


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    path = tmp_path / "assessments.jsonl"
    rows = [
        build_row(3, id="A-1", assessment_date="2025-05-02"),
        build_row(5, id="A-2", assessment_date="2025-05-10"),
        build_row(4, id="A-3", assessment_date="2025-04-20"),
    ]
    path.write_text("\n".join(json.dumps(row) for row in rows), encoding="utf-8")
    return path


@pytest.fixture
def profiles_path(tmp_path: Path) -> Path:
    path = tmp_path / "profiles.json"
    write_json(
        path,
        [
            {"id": "T-001", "full_name": "Tara", "role": "trainer", "reporting_manager_id": "M-001"},
            {"id": "M-001", "full_name": "Mira", "role": "manager"},
        ],
    )
    return path


def test_cli_writes_trainer_report(tmp_path: Path, runner: CliRunner, store_path: Path, profiles_path: Path):
    output_path = tmp_path / "out" / "trainers.json"

    result = runner.invoke(
        app,
        [
            "report",
            "--kind",
            "trainers",
            "--assessments",
            str(store_path),
            "--profiles",
            str(profiles_path),
            "--as-of",
            "2025-05-15",
            "--output",
            str(output_path),
        ],
    )

    assert result.exit_code == 0, result.stdout
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered["metadata"]["kind"] == "trainers"
    assert rendered["metadata"]["as_of"] == "2025-05-15"
    trainer = rendered["results"][0]
    assert trainer["trainer_name"] == "Tara"
    assert trainer["reporting_manager_name"] == "Mira"
    assert trainer["current_month_avg"] == 4.0
    assert trainer["previous_month_avg"] == 4.0
    assert trainer["trend"] == "stable"


def test_cli_monthly_report_honours_config(tmp_path: Path, runner: CliRunner, store_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("reports:\n  monthly_trend_months: 2\n", encoding="utf-8")
    output_path = tmp_path / "monthly.json"

    result = runner.invoke(
        app,
        [
            "report",
            "--kind",
            "monthly",
            "--assessments",
            str(store_path),
            "--as-of",
            "2025-05-15",
            "--config",
            str(config_path),
            "--output",
            str(output_path),
        ],
    )

    assert result.exit_code == 0, result.stdout
    results = json.loads(output_path.read_text(encoding="utf-8"))["results"]
    assert [item["month"] for item in results] == ["Apr 2025", "May 2025"]
    assert results[1]["assessment_count"] == 2


def test_cli_itemized_report(tmp_path: Path, runner: CliRunner, store_path: Path, profiles_path: Path):
    output_path = tmp_path / "itemized.json"

    result = runner.invoke(
        app,
        [
            "report",
            "--kind",
            "itemized",
            "--assessments",
            str(store_path),
            "--profiles",
            str(profiles_path),
            "--date-from",
            "2025-05-01",
            "--date-to",
            "2025-05-31",
            "--output",
            str(output_path),
        ],
    )

    assert result.exit_code == 0, result.stdout
    results = json.loads(output_path.read_text(encoding="utf-8"))["results"]
    assert len(results["by_assessor"]) == 2
    assert results["by_assessor"][0]["Assessor"] == "Mira"
    assert results["by_assessor"][0]["Assessment Count"] == 2


def test_cli_exits_with_2_on_malformed_store(tmp_path: Path, runner: CliRunner):
    store_path = tmp_path / "broken.jsonl"
    store_path.write_text("{not json\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["report", "--kind", "platform", "--assessments", str(store_path), "--output", str(tmp_path / "x.json")],
    )

    assert result.exit_code == 2
    assert not (tmp_path / "x.json").exists()


def test_cli_rejects_unknown_report_kind(runner: CliRunner, store_path: Path):
    result = runner.invoke(app, ["report", "--kind", "weekly", "--assessments", str(store_path)])

    assert result.exit_code == 2


def test_cli_validate_reports_field_errors(tmp_path: Path, runner: CliRunner):
    draft_path = tmp_path / "draft.json"
    draft = build_row(4, logs_in_early=2, logs_in_early_comments="late")
    write_json(draft_path, draft)

    result = runner.invoke(app, ["validate", "--input", str(draft_path)])

    assert result.exit_code == 1
    assert "logs_in_early_comments" in result.stdout


def test_cli_validate_accepts_complete_draft(tmp_path: Path, runner: CliRunner):
    draft_path = tmp_path / "draft.json"
    write_json(draft_path, build_row(5))

    result = runner.invoke(app, ["validate", "--input", str(draft_path)])

    assert result.exit_code == 0, result.stdout
    assert '"valid": true' in result.stdout


@pytest.mark.parametrize("option", ["--as-of", "--date-from", "--date-to"])
def test_cli_rejects_malformed_dates(runner: CliRunner, store_path: Path, option: str):
    result = runner.invoke(
        app,
        ["report", "--kind", "itemized", "--assessments", str(store_path), option, "18/10/2026"],
    )

    assert result.exit_code == 2
    assert "Not a date" in result.output


def test_cli_rejects_non_mapping_config(tmp_path: Path, runner: CliRunner, store_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["report", "--kind", "platform", "--assessments", str(store_path), "--config", str(config_path)],
    )

    assert result.exit_code == 2
    assert "Config must be a mapping" in result.output


@pytest.mark.parametrize(
    "content, message",
    [("{not json", "Invalid JSON"), (json.dumps(["a", "list"]), "Candidate must be a JSON object")],
)
def test_cli_validate_rejects_unusable_input(tmp_path: Path, runner: CliRunner, content: str, message: str):
    draft_path = tmp_path / "draft.json"
    draft_path.write_text(content, encoding="utf-8")

    result = runner.invoke(app, ["validate", "--input", str(draft_path)])

    assert result.exit_code == 2
    assert message in result.output
