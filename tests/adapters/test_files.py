from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

import pytest
from structlog.testing import capture_logs

from trainerassess.adapters import (
    AssessmentStore,
    InMemoryAssessmentStore,
    InMemoryProfileDirectory,
    JsonlAssessmentStore,
    JsonProfileDirectory,
    ProfileDirectory,
    StoreReadError,
)
from trainerassess.schemas import AssessmentFilter, Profile


def build_row(**kwargs: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": "A-001",
        "trainer_id": "T-001",
        "assessor_id": "M-001",
        "assessment_date": "2025-05-02",
        "logs_in_early": 4,
        "logs_in_early_comments": None,
        "overall_comments": "Good session overall, clear pacing.",
    }
    row.update(kwargs)
    return row


def write_jsonl(path: Path, lines: list[str]) -> None:
    path.write_text("\n".join(lines), encoding="utf-8")


def test_jsonl_store_reads_and_filters(tmp_path: Path):
    path = tmp_path / "assessments.jsonl"
    write_jsonl(
        path,
        [
            json.dumps(build_row()),
            "",
            json.dumps(build_row(id="A-002", trainer_id="T-002", assessment_date="2025-04-01")),
        ],
    )
    store = JsonlAssessmentStore(path)

    assert isinstance(store, AssessmentStore)
    assert [item.id for item in store.fetch_assessments()] == ["A-001", "A-002"]
    assert [item.id for item in store.fetch_assessments(AssessmentFilter(trainer_id="T-002"))] == ["A-002"]
    assert [
        item.id for item in store.fetch_assessments(AssessmentFilter(date_from=date(2025, 5, 1)))
    ] == ["A-001"]


def test_jsonl_store_rereads_file_on_every_query(tmp_path: Path):
    path = tmp_path / "assessments.jsonl"
    write_jsonl(path, [json.dumps(build_row())])
    store = JsonlAssessmentStore(path)
    assert len(store.fetch_assessments()) == 1

    write_jsonl(path, [json.dumps(build_row()), json.dumps(build_row(id="A-002"))])

    assert len(store.fetch_assessments()) == 2


def test_malformed_rows_fail_the_whole_read(tmp_path: Path):
    path = tmp_path / "assessments.jsonl"
    write_jsonl(
        path,
        [
            json.dumps(build_row()),
            "{not json",
            json.dumps(["array"]),
            json.dumps(build_row(id="A-004", logs_in_early=9)),
        ],
    )

    with capture_logs() as logs, pytest.raises(StoreReadError) as excinfo:
        JsonlAssessmentStore(path).fetch_assessments()

    errors = excinfo.value.errors
    assert len(errors) == 3
    assert errors[0].startswith("line 2: invalid JSON")
    assert errors[1] == "line 3: expected a JSON object"
    assert errors[2].startswith("line 4: ratings.logs_in_early")
    assert [item.id for item in excinfo.value.partial] == ["A-001"]
    assert logs[0]["event"] == "store.malformed_rows"
    assert logs[0]["log_level"] == "error"


def test_missing_store_file_raises_store_error(tmp_path: Path):
    with pytest.raises(StoreReadError) as excinfo:
        JsonlAssessmentStore(tmp_path / "missing.jsonl").fetch_assessments()

    assert "missing.jsonl" in excinfo.value.errors[0]


def test_json_profile_directory(tmp_path: Path):
    path = tmp_path / "profiles.json"
    path.write_text(
        json.dumps(
            {
                "profiles": [
                    {"id": "T-001", "full_name": "Tara", "role": "trainer", "reporting_manager_id": "M-001"},
                    {"id": "M-001", "full_name": "Mira", "role": "manager", "team_name": "Ops"},
                ]
            }
        ),
        encoding="utf-8",
    )
    directory = JsonProfileDirectory(path)

    assert isinstance(directory, ProfileDirectory)
    assert directory.resolve_names(["T-001", "X-404"]) == {"T-001": "Tara"}
    assert [item.id for item in directory.list_profiles("manager")] == ["M-001"]
    assert len(directory.list_profiles()) == 2
    assert directory.get_profiles(["M-001"])["M-001"].team_name == "Ops"


@pytest.mark.parametrize("content", ["{broken", json.dumps("just a string")])
def test_json_profile_directory_rejects_invalid_files(tmp_path: Path, content: str):
    path = tmp_path / "profiles.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError):
        JsonProfileDirectory(path).list_profiles()


def test_in_memory_adapters_follow_the_protocols():
    store = InMemoryAssessmentStore()
    directory = InMemoryProfileDirectory([Profile(id="T-001", full_name="Tara")])

    assert isinstance(store, AssessmentStore)
    assert isinstance(directory, ProfileDirectory)
    assert store.fetch_assessments() == []
    assert directory.resolve_names(["T-001"]) == {"T-001": "Tara"}
