"""Custom exceptions for the grid builder."""

from __future__ import annotations


class GridBuilderError(Exception):
    """Base exception for all grid builder errors."""


class GridValidationError(GridBuilderError):
    """Raised when raw driver or wave data fails model validation."""


class WaveConfigError(GridBuilderError):
    """Raised when a strict build is given inconsistent wave configurations."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))


class DriverDataError(GridBuilderError):
    """Raised when a strict consolidation finds conflicting driver records."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))
