"""In-process store and directory used by tests and embedding callers."""

from __future__ import annotations

from typing import Iterable

from ..schemas import Assessment, AssessmentFilter, Profile, Role


class InMemoryAssessmentStore:
    def __init__(self, assessments: Iterable[Assessment] = ()) -> None:
        self._assessments = list(assessments)

    def add(self, assessment: Assessment) -> None:
        self._assessments.append(assessment)

    def fetch_assessments(self, query: AssessmentFilter | None = None) -> list[Assessment]:
        if query is None:
            return list(self._assessments)
        return [item for item in self._assessments if query.matches(item)]


class InMemoryProfileDirectory:
    def __init__(self, profiles: Iterable[Profile] = ()) -> None:
        self._profiles = {profile.id: profile for profile in profiles}

    def resolve_names(self, ids: Iterable[str]) -> dict[str, str]:
        return {
            profile_id: self._profiles[profile_id].full_name
            for profile_id in ids
            if profile_id in self._profiles
        }

    def get_profiles(self, ids: Iterable[str]) -> dict[str, Profile]:
        return {profile_id: self._profiles[profile_id] for profile_id in ids if profile_id in self._profiles}

    def list_profiles(self, role: Role | None = None) -> list[Profile]:
        return [profile for profile in self._profiles.values() if role is None or profile.role == role]
