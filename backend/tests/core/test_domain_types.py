"""Domain Types — enum values and position normalisation.

Tests cover:
    - Enum values match persisted strings verbatim
    - Proficiency declaration order is the ranking order
    - normalize_positions: dedupe, order kept, invalid values dropped
"""

from teammatch.core.domain_types import (
    ApplicationStatus, Difficulty, Position, Proficiency, normalize_positions,
)


def test_position_values_are_persisted_strings():
    assert [p.value for p in Position] == ["BACKEND", "FRONTEND", "PM", "MOBILE", "AI"]


def test_proficiency_declared_lowest_to_highest():
    assert [p.value for p in Proficiency] == [
        "UNKNOWN", "BRONZE", "SILVER", "GOLD", "PLATINUM", "DIAMOND",
    ]


def test_application_status_values():
    assert {s.value for s in ApplicationStatus} == {"PENDING", "ACCEPTED", "REJECTED"}


def test_difficulty_has_unknown_default_value():
    assert Difficulty("UNKNOWN") is Difficulty.UNKNOWN


def test_str_enums_compare_equal_to_raw_strings():
    assert Position.BACKEND == "BACKEND"


# ─── normalize_positions ─────────────────────────────────────────

def test_normalize_positions_dedupes_keeping_first_occurrence():
    assert normalize_positions(["PM", "BACKEND", "PM"]) == [Position.PM, Position.BACKEND]


def test_normalize_positions_drops_unknown_values():
    assert normalize_positions(["BACKEND", "DESIGNER"]) == [Position.BACKEND]


def test_normalize_positions_accepts_enums_and_none():
    assert normalize_positions([Position.AI]) == [Position.AI]
    assert normalize_positions(None) == []
