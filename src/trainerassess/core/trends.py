"""Month-over-month trend classification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .scoring import round_half_up

TrendDirection = Literal["up", "down", "stable"]


@dataclass
class TrendConfig:
    """Dead-band on the 1-5 scale below which a change is treated as noise."""

    dead_band: float = 0.1


@dataclass(frozen=True, slots=True)
class Trend:
    direction: TrendDirection
    percentage: float


STABLE = Trend(direction="stable", percentage=0.0)


class TrendClassifier:
    """Compare a current average against the previous period's."""

    def __init__(self, *, config: TrendConfig | None = None) -> None:
        self._config = config or TrendConfig()

    def classify(self, current: float | None, previous: float | None) -> Trend:
        # None and 0 both mean "no assessments"; ratings start at 1
        if not current or not previous or previous < 0:
            return STABLE

        # inputs are 2-place averages; compare the delta at the same precision
        change = round_half_up(current - previous, 2)
        percentage = round_half_up(change / previous * 100, 1)

        if change > self._config.dead_band:
            direction: TrendDirection = "up"
        elif change < -self._config.dead_band:
            direction = "down"
        else:
            direction = "stable"
        return Trend(direction=direction, percentage=percentage)
