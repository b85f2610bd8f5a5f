"""Tie-break evaluation and the cascading comparator.

Every comparison returns a plain ``int`` (negative when ``a`` sorts first),
so the results are safe to feed to :func:`functools.cmp_to_key` even when
both sides are ``inf``.
"""

from __future__ import annotations

import unicodedata

from gridbuilder.constants import MISSING_POSITION
from gridbuilder.models.grid import DriverEntry
from gridbuilder.models.wave_config import TieBreaker, WaveConfig
from gridbuilder.timing import parse_time_to_seconds


def compare_values(a: float, b: float) -> int:
    """Three-way compare: -1, 0 or 1."""
    return (a > b) - (a < b)


def position_or_missing(value: int | None) -> int:
    """Return the position, or the worst-rank sentinel when absent."""
    return value or MISSING_POSITION


def _name_key(entry: DriverEntry) -> tuple[str, str]:
    """Accent-insensitive name first, then the exact case-folded name."""
    folded = entry.name.casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base, folded)


def evaluate_tie_breaker(
    a: DriverEntry,
    b: DriverEntry,
    criterion: TieBreaker | str | None,
) -> int:
    """Compare two entries under a single tie-break criterion.

    Unknown criteria (and ``manual``) compare equal so the caller's stable
    sort keeps the existing relative order.
    """
    match criterion:
        case TieBreaker.BEST_TIME:
            return compare_values(
                parse_time_to_seconds(a.best_time), parse_time_to_seconds(b.best_time),
            )
        case TieBreaker.SECOND_BEST:
            return compare_values(
                parse_time_to_seconds(a.second_best), parse_time_to_seconds(b.second_best),
            )
        case TieBreaker.BEST_POSITION_IN_CLASS:
            return compare_values(
                position_or_missing(a.driver.best_position_in_class),
                position_or_missing(b.driver.best_position_in_class),
            )
        case TieBreaker.BEST_POSITION:
            return compare_values(
                position_or_missing(a.driver.best_position),
                position_or_missing(b.driver.best_position),
            )
        case TieBreaker.ALPHABETICAL:
            name_a, name_b = _name_key(a), _name_key(b)
            return (name_a > name_b) - (name_a < name_b)
        case TieBreaker.MANUAL:
            return 0
        case _:
            return 0


def apply_cascading_tie_breakers(a: DriverEntry, b: DriverEntry, config: WaveConfig) -> int:
    """Apply the wave's tie-breakers in order; 0 if still tied after all of them."""
    for criterion in config.tie_breakers:
        if criterion is None:
            continue
        result = evaluate_tie_breaker(a, b, criterion)
        if result != 0:
            return result
    return 0
