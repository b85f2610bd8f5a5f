"""Consolidated driver models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TimeRecord(BaseModel):
    """A lap time together with the result file it came from."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    time: str
    file_name: str


class FileResult(BaseModel):
    """One result file's row for a single driver."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    file_name: str
    class_name: str | None = Field(default=None, alias="class")
    best_time: str = ""
    second_best: str = ""
    position: int | None = None
    points: float = 0
    position_in_class: int | None = None


class ConsolidatedDriver(BaseModel):
    """One real-world driver merged across every uploaded result file.

    Identity is the ``(name, number)`` pair; see :attr:`key`.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    name: str
    number: str
    class_name: str = Field(default="", alias="class")
    files: tuple[FileResult, ...] = ()
    best_overall_time: TimeRecord | None = None
    second_best_overall_time: TimeRecord | None = None
    total_points: float = 0
    points_count: int = 0
    average_points: float = 0
    positions: tuple[int, ...] = ()
    positions_in_class: tuple[int, ...] = ()
    best_position: int | None = None
    best_position_in_class: int | None = None
    average_position_in_class: float | None = None

    @property
    def key(self) -> tuple[str, str]:
        """Composite identity used to detect duplicates."""
        return (self.name, self.number)

    @property
    def file_count(self) -> int:
        return len(self.files)
