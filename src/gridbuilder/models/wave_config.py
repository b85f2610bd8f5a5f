"""Per-wave configuration model and its enumerations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gridbuilder.constants import DEFAULT_INVERT_COUNT


class StartType(str, Enum):
    """How the wave is started."""

    FLYING = "flying"
    STANDING = "standing"


class SortKey(str, Enum):
    """Primary ordering of drivers within a wave."""

    POSITION = "position"
    BEST_TIME = "bestTime"
    SECOND_BEST = "secondBest"
    BEST_SECOND_BEST = "bestSecondBest"
    POINTS_TOTAL = "pointsTotal"
    POINTS_AVERAGE = "pointsAverage"


class GridOrder(str, Enum):
    """Ordering of class blocks within a wave."""

    STRAIGHT = "straight"
    FASTEST_FIRST = "fastestFirst"
    SLOWEST_FIRST = "slowestFirst"


class TieBreaker(str, Enum):
    """Criteria that can separate two drivers with equal primary values."""

    BEST_TIME = "bestTime"
    SECOND_BEST = "secondBest"
    BEST_POSITION_IN_CLASS = "bestPositionInClass"
    BEST_POSITION = "bestPosition"
    ALPHABETICAL = "alphabetical"
    MANUAL = "manual"


class WaveConfig(BaseModel):
    """User-authored rules for building one wave.

    ``sort_by``, ``grid_order`` and the tie-breaker slots keep unrecognised
    strings as-is; the builder treats those as no-ops instead of failing.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    wave_number: int = 1
    start_type: StartType = StartType.FLYING
    classes: tuple[str, ...] = ()
    sort_by: SortKey | str = Field(default=SortKey.BEST_TIME, union_mode="left_to_right")
    grid_order: GridOrder | str = Field(default=GridOrder.STRAIGHT, union_mode="left_to_right")
    inverted: bool = False
    invert_all: bool = False
    invert_count: int = Field(default=DEFAULT_INVERT_COUNT, ge=0)
    empty_positions: int = Field(default=0, ge=0)
    empty_positions_between_classes: int = Field(default=0, ge=0)
    tie_breaker_1: TieBreaker | str | None = Field(
        default=TieBreaker.BEST_TIME, union_mode="left_to_right",
    )
    tie_breaker_2: TieBreaker | str | None = Field(
        default=TieBreaker.BEST_POSITION_IN_CLASS, union_mode="left_to_right",
    )
    tie_breaker_3: TieBreaker | str | None = Field(
        default=TieBreaker.ALPHABETICAL, union_mode="left_to_right",
    )

    @property
    def tie_breakers(self) -> tuple[TieBreaker | str | None, ...]:
        """The three tie-breaker slots in evaluation order."""
        return (self.tie_breaker_1, self.tie_breaker_2, self.tie_breaker_3)
