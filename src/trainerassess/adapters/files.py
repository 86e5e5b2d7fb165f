"""JSON-file backed assessment store and profile directory."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import structlog
from pydantic import ValidationError

from ..schemas import Assessment, AssessmentFilter, Profile, Role


class StoreReadError(RuntimeError):
    """Raised when the store cannot be read or returns malformed rows."""

    def __init__(self, errors: list[str], partial: list[Assessment] | None = None):
        super().__init__("Assessment store read failed")
        self.errors = errors
        self.partial = partial or []

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Assessment store read failed: {self.errors}"


class JsonlAssessmentStore:
    """Read assessments from a JSON-lines file, one flat store row per line.

    The file is re-read on every query; a single malformed line fails the
    whole read so aggregates are never built from partial data.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._logger = structlog.get_logger(__name__)

    def fetch_assessments(self, query: AssessmentFilter | None = None) -> list[Assessment]:
        assessments = self._load()
        if query is None:
            return assessments
        return [item for item in assessments if query.matches(item)]

    def _load(self) -> list[Assessment]:
        try:
            handle = self._path.open("r", encoding="utf-8")
        except OSError as exc:
            raise StoreReadError([f"{self._path}: {exc.strerror or exc}"]) from exc

        assessments: list[Assessment] = []
        errors: list[str] = []
        with handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: expected a JSON object")
                    continue
                try:
                    assessments.append(Assessment.model_validate(record))
                except ValidationError as exc:
                    errors.append(f"line {idx}: {_summarize(exc)}")
        if errors:
            self._logger.error("store.malformed_rows", path=str(self._path), errors=errors)
            raise StoreReadError(errors, assessments)
        self._logger.debug("store.loaded", path=str(self._path), count=len(assessments))
        return assessments


class JsonProfileDirectory:
    """Profiles from a JSON array (or an object with a ``profiles`` array)."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._profiles: dict[str, Profile] | None = None

    def resolve_names(self, ids: Iterable[str]) -> dict[str, str]:
        profiles = self._index()
        return {key: profiles[key].full_name for key in ids if key in profiles}

    def get_profiles(self, ids: Iterable[str]) -> dict[str, Profile]:
        profiles = self._index()
        return {key: profiles[key] for key in ids if key in profiles}

    def list_profiles(self, role: Role | None = None) -> list[Profile]:
        return [item for item in self._index().values() if role is None or item.role == role]

    def _index(self) -> dict[str, Profile]:
        if self._profiles is None:
            self._profiles = {profile.id: profile for profile in self._read()}
        return self._profiles

    def _read(self) -> list[Profile]:
        with self._path.open("r", encoding="utf-8") as handle:
            try:
                data: Any = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid profiles JSON: {exc}") from exc
        if isinstance(data, dict):
            data = data.get("profiles", [])
        if not isinstance(data, list):
            raise ValueError("Profiles JSON must be an array of profile objects")
        return [Profile.model_validate(item) for item in data]


def _summarize(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'row'}: {error['msg']}"
        for error in exc.errors()
    )
