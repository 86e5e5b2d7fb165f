from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["admin", "manager", "trainer"]


class Profile(BaseModel):
    """Directory entry for a platform user."""

    id: str
    full_name: str
    role: Role = "trainer"
    team_id: str | None = None
    team_name: str | None = None
    reporting_manager_id: str | None = None

    model_config = ConfigDict(extra="ignore")
