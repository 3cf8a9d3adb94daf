"""Proficiency Scale — tests for the total order and range checks.

Tests cover:
    - rank follows declaration order; unset/unknown subject ranks as UNKNOWN
    - Unset bounds are open: every tier is in range UNKNOWN..DIAMOND and None..None
    - UNKNOWN as upper bound behaves like unset
    - Inclusive boundaries
"""

import pytest

from teammatch.core.domain_types import Proficiency
from teammatch.core.proficiency_scale import (
    MAX_RANK, MIN_RANK, in_range, rank, rank_lower_bound, rank_upper_bound,
)


def test_rank_follows_declaration_order():
    ranks = [rank(p) for p in Proficiency]
    assert ranks == sorted(ranks)
    assert ranks[0] == MIN_RANK and ranks[-1] == MAX_RANK


def test_rank_of_unset_or_unrecognised_subject_is_unknown():
    assert rank(None) == rank(Proficiency.UNKNOWN)
    assert rank("LEGENDARY") == MIN_RANK


def test_rank_accepts_raw_strings_case_insensitively():
    assert rank("gold") == rank(Proficiency.GOLD)


def test_unset_bounds_are_open():
    assert rank_lower_bound(None) == MIN_RANK
    assert rank_upper_bound(None) == MAX_RANK


def test_unknown_upper_bound_means_unset():
    assert rank_upper_bound(Proficiency.UNKNOWN) == MAX_RANK


@pytest.mark.parametrize("tier", list(Proficiency))
def test_every_tier_in_full_range(tier):
    assert in_range(tier, Proficiency.UNKNOWN, Proficiency.DIAMOND)
    assert in_range(tier, None, None)


def test_boundaries_are_inclusive():
    assert in_range(Proficiency.SILVER, Proficiency.SILVER, Proficiency.GOLD)
    assert in_range(Proficiency.GOLD, Proficiency.SILVER, Proficiency.GOLD)


def test_outside_range():
    assert not in_range(Proficiency.BRONZE, Proficiency.SILVER, Proficiency.GOLD)
    assert not in_range(Proficiency.DIAMOND, Proficiency.SILVER, Proficiency.GOLD)


def test_unset_subject_fails_a_raised_floor():
    assert not in_range(None, Proficiency.BRONZE, None)
