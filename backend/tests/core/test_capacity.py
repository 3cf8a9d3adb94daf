"""Capacity Accounting — tests for occupancy and per-position room.

Tests cover:
    - occupancy counts every role of every member, once per member
    - limit 0 is unlimited regardless of occupancy
    - Boundary: occupancy == limit means full
    - full_positions keeps request order
    - exceeded_positions only reports strictly-over limits
    - remaining_slots: None for unlimited, never negative
"""

from teammatch.core.capacity import (
    exceeded_positions, full_positions, has_room, occupancy, remaining_slots,
)
from teammatch.core.domain_types import Position

from snapshot_factories import make_member, make_project


def test_occupancy_has_every_position():
    assert occupancy([]) == {p: 0 for p in Position}


def test_member_with_several_roles_counts_for_each():
    project = make_project()
    members = [
        make_member(project, Position.BACKEND, Position.FRONTEND),
        make_member(project, Position.BACKEND),
    ]
    counts = occupancy(members)
    assert counts[Position.BACKEND] == 2
    assert counts[Position.FRONTEND] == 1
    assert counts[Position.PM] == 0


def test_duplicate_role_entries_count_once():
    project = make_project()
    counts = occupancy([make_member(project, Position.AI, Position.AI)])
    assert counts[Position.AI] == 1


def test_unlimited_position_always_has_room():
    project = make_project()
    members = [make_member(project, Position.BACKEND) for _ in range(50)]
    assert has_room(project, Position.BACKEND, members)


def test_position_at_limit_is_full():
    project = make_project(limits={Position.BACKEND: 2})
    members = [make_member(project, Position.BACKEND) for _ in range(2)]
    assert not has_room(project, Position.BACKEND, members)


def test_position_below_limit_has_room():
    project = make_project(limits={Position.BACKEND: 2})
    assert has_room(project, Position.BACKEND, [make_member(project, Position.BACKEND)])


def test_full_positions_keeps_request_order():
    project = make_project(limits={Position.PM: 1, Position.AI: 1})
    members = [make_member(project, Position.PM, Position.AI)]
    assert full_positions(
        project, [Position.AI, Position.BACKEND, Position.PM], members,
    ) == [Position.AI, Position.PM]


def test_exceeded_positions_ignores_exactly_full():
    project = make_project(limits={Position.BACKEND: 1, Position.PM: 1})
    members = [
        make_member(project, Position.BACKEND),
        make_member(project, Position.PM),
        make_member(project, Position.PM),
    ]
    assert exceeded_positions(project, members) == [Position.PM]


def test_remaining_slots():
    project = make_project(limits={Position.BACKEND: 3})
    remaining = remaining_slots(project, [make_member(project, Position.BACKEND)])
    assert remaining[Position.BACKEND] == 2
    assert remaining[Position.FRONTEND] is None
