"""Proficiency Scale — total order over skill tiers for range checks.

Invariants:
    - UNKNOWN < BRONZE < SILVER < GOLD < PLATINUM < DIAMOND
    - Subject values that are unset or unrecognised rank as UNKNOWN (0)
    - An unset lower bound ranks as UNKNOWN, an unset upper bound as DIAMOND:
      a project with no declared bounds accepts any proficiency
    - An upper bound of UNKNOWN is the column default and also means "unset"
    - Total function: never raises

Design Decisions:
    - Rank table keyed by enum value string: rows and payloads may carry raw strings
"""

from teammatch.core.domain_types import Proficiency

PROFICIENCY_RANK: dict[str, int] = {
    tier.value: index for index, tier in enumerate(Proficiency)
}
MIN_RANK = PROFICIENCY_RANK[Proficiency.UNKNOWN.value]
MAX_RANK = PROFICIENCY_RANK[Proficiency.DIAMOND.value]


def _lookup(value: Proficiency | str | None) -> int | None:
    if value is None:
        return None
    key = value.value if isinstance(value, Proficiency) else str(value).upper()
    return PROFICIENCY_RANK.get(key)


def rank(value: Proficiency | str | None) -> int:
    """Rank of a subject tier; unknown input ranks as UNKNOWN."""
    found = _lookup(value)
    return MIN_RANK if found is None else found


def rank_lower_bound(value: Proficiency | str | None) -> int:
    found = _lookup(value)
    return MIN_RANK if found is None else found


def rank_upper_bound(value: Proficiency | str | None) -> int:
    found = _lookup(value)
    # UNKNOWN ceiling is the column default, same as unset
    return MAX_RANK if not found else found


def in_range(
    value: Proficiency | str | None,
    minimum: Proficiency | str | None,
    maximum: Proficiency | str | None,
) -> bool:
    """True when rank(minimum) <= rank(value) <= rank(maximum)."""
    return rank_lower_bound(minimum) <= rank(value) <= rank_upper_bound(maximum)
