"""Assessment store and profile directory adapters."""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from ..schemas import Assessment, AssessmentFilter, Profile, Role
from .files import JsonlAssessmentStore, JsonProfileDirectory, StoreReadError
from .memory import InMemoryAssessmentStore, InMemoryProfileDirectory


@runtime_checkable
class AssessmentStore(Protocol):
    """Persistent assessment store contract.

    Implementations return every row matching the filter in one call and
    raise :class:`StoreReadError` instead of returning partial data.
    """

    def fetch_assessments(self, query: AssessmentFilter | None = None) -> list[Assessment]:
        """Return assessments matching the filter (all rows when ``None``)."""


@runtime_checkable
class ProfileDirectory(Protocol):
    """Profile/team directory contract."""

    def resolve_names(self, ids: Iterable[str]) -> dict[str, str]:
        """Map known ids to display names; unknown ids are omitted."""

    def get_profiles(self, ids: Iterable[str]) -> dict[str, Profile]:
        """Map known ids to profiles."""

    def list_profiles(self, role: Role | None = None) -> list[Profile]:
        """Return every profile, optionally restricted to a role."""


__all__ = [
    "AssessmentStore",
    "InMemoryAssessmentStore",
    "InMemoryProfileDirectory",
    "JsonProfileDirectory",
    "JsonlAssessmentStore",
    "ProfileDirectory",
    "StoreReadError",
]
