"""Normalized result rows handed over by the file-parsing stage."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResultRow(BaseModel):
    """One driver's line in one result file, headers already normalized."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    driver: str = ""
    number: str = ""
    class_name: str | None = Field(default=None, alias="class")
    best_time: str = ""
    second_best: str = ""
    position: int | None = None
    points: float | None = None
    position_in_class: int | None = None


class ResultFile(BaseModel):
    """All rows parsed from a single uploaded file."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    file_name: str
    rows: tuple[ResultRow, ...] = ()
