"""Pydantic schema definitions for assessment rows, profiles and configuration."""

from __future__ import annotations

from .assessment import Assessment, AssessmentFilter
from .profile import Profile, Role

__all__ = [
    "Assessment",
    "AssessmentFilter",
    "Profile",
    "Role",
]
