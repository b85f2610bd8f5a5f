"""Built grid models: entries and waves."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from gridbuilder.models.driver import ConsolidatedDriver
from gridbuilder.models.wave_config import WaveConfig


class DriverEntry(BaseModel):
    """A grid slot occupied by a driver."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["driver"] = "driver"
    class_name: str
    number: str
    name: str
    best_time: str = ""
    second_best: str = ""
    points: float = 0
    position: int | None = None
    source: str = ""
    driver: ConsolidatedDriver

    @property
    def is_empty(self) -> bool:
        return False


class EmptyPosition(BaseModel):
    """A deliberately unoccupied grid slot."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["empty"] = "empty"

    @property
    def is_empty(self) -> bool:
        return True


GridEntry = Annotated[DriverEntry | EmptyPosition, Field(discriminator="kind")]


class Wave(BaseModel):
    """One built wave: its configuration, ordered entries and trailing gap."""

    model_config = ConfigDict(frozen=True)

    config: WaveConfig
    entries: tuple[GridEntry, ...] = ()
    empty_positions: int = 0

    @property
    def driver_entries(self) -> list[DriverEntry]:
        """Entries that hold a driver, in grid order."""
        return [e for e in self.entries if isinstance(e, DriverEntry)]

    @property
    def total_positions(self) -> int:
        """Grid slots used by this wave, including the trailing gap."""
        return len(self.entries) + self.empty_positions
