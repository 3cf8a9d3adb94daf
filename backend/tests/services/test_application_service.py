"""Application Service — apply / accept / reject / withdraw against a real session.

Invariants:
    - Scenario A: eligible user gets a PENDING application
    - Scenario B: once the only backend seat is accepted, the next applicant is
      refused with exactly ["BACKEND is full"]
    - A second apply for the same pair is a Conflict, not an ineligibility
    - Accept creates one member; re-accept never duplicates it
    - Accepting into a seat filled meanwhile fails with POSITION_FULL and leaves
      no member behind
    - Non-owners cannot decide; non-applicants cannot withdraw

Design Decisions:
    - Services built on the shared test session with a frozen clock
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from teammatch.core.application_lifecycle import Transition
from teammatch.core.domain_types import ApplicationStatus, Position
from teammatch.core.errors import (
    ConflictError, ForbiddenError, IneligibleApplicationError,
    InvalidStateError, PositionFullError, ResourceNotFoundError,
)
from teammatch.infrastructure.repositories import (
    SqlApplicationRepository, SqlMemberRepository, SqlProjectRepository,
)
from teammatch.models.project_member import ProjectMember
from teammatch.services.application_service import ApplicationService

BACKEND = [Position.BACKEND]


@pytest.fixture
def service(test_db, clock):
    return ApplicationService(test_db, clock)


async def _member_count(db, project_id) -> int:
    result = await db.execute(
        select(func.count()).select_from(ProjectMember)
        .where(ProjectMember.project_id == project_id)
    )
    return result.scalar_one()


# ─── Eligibility and apply ───────────────────────────────────────

async def test_scenario_a_apply_creates_pending(service, project, alice):
    verdict = await service.check_eligibility(alice, project, BACKEND)
    assert verdict.ok

    view = await service.apply(alice, project, BACKEND, "Hi!")
    assert view["status"] == "PENDING"
    assert view["applied_position"] == ["BACKEND"]
    assert view["cover_letter"] == "Hi!"


async def test_scenario_b_full_after_accept(service, project, owner, alice, bob):
    await service.apply(alice, project, BACKEND)
    await service.accept(owner, project, alice)

    verdict = await service.check_eligibility(bob, project, BACKEND)
    assert not verdict.ok
    assert verdict.reasons == ["BACKEND is full"]

    with pytest.raises(IneligibleApplicationError) as exc:
        await service.apply(bob, project, BACKEND)
    assert exc.value.reasons == ["BACKEND is full"]


async def test_owner_cannot_apply(service, project, owner):
    verdict = await service.check_eligibility(owner, project, [Position.PM])
    assert "owner cannot apply to own project" in verdict.reasons


async def test_second_apply_is_a_conflict(service, project, alice):
    await service.apply(alice, project, BACKEND)
    with pytest.raises(ConflictError) as exc:
        await service.apply(alice, project, BACKEND)
    assert exc.value.code == "DUPLICATE_APPLICATION"
    assert exc.value.http_status == 409
    assert exc.value.reasons == ["already applied"]


async def test_member_applying_again_is_a_conflict(service, project, owner, alice):
    await service.apply(alice, project, BACKEND)
    await service.accept(owner, project, alice)
    with pytest.raises(ConflictError) as exc:
        await service.apply(alice, project, BACKEND)
    assert "already a member" in exc.value.reasons


async def test_duplicate_is_still_a_reason_in_the_precheck(service, project, alice):
    await service.apply(alice, project, BACKEND)
    verdict = await service.check_eligibility(alice, project, BACKEND)
    assert verdict.reasons == ["already applied"]


async def test_out_of_range_user_refused(service, project, diana):
    with pytest.raises(IneligibleApplicationError) as exc:
        await service.apply(diana, project, [Position.AI])
    assert exc.value.reasons == ["proficiency out of accepted range"]


async def test_unknown_project_is_not_found(service, alice):
    with pytest.raises(ResourceNotFoundError):
        await service.check_eligibility(alice, uuid4(), BACKEND)


# ─── Owner decisions ─────────────────────────────────────────────

async def test_accept_creates_member_with_applied_roles(
    service, test_db, project, owner, bob,
):
    await service.apply(bob, project, [Position.BACKEND, Position.FRONTEND])
    view = await service.accept(owner, project, bob)
    assert view["status"] == "ACCEPTED"

    member = await SqlMemberRepository(test_db).get(bob, project)
    assert member.role == (Position.BACKEND, Position.FRONTEND)


async def test_reaccept_is_idempotent(service, test_db, project, owner, alice):
    await service.apply(alice, project, BACKEND)
    await service.accept(owner, project, alice)
    view = await service.accept(owner, project, alice)
    assert view["status"] == "ACCEPTED"
    assert await _member_count(test_db, project) == 1


async def test_accept_second_pending_into_full_seat(
    service, test_db, project, owner, alice, bob,
):
    await service.apply(alice, project, BACKEND)
    await service.apply(bob, project, BACKEND)
    await service.accept(owner, project, alice)

    with pytest.raises(PositionFullError):
        await service.accept(owner, project, bob)
    application = await SqlApplicationRepository(test_db).get(bob, project)
    assert application.status == ApplicationStatus.PENDING
    assert await _member_count(test_db, project) == 1


async def test_capacity_recheck_after_insert_rolls_back(
    service, test_db, project, alice, bob,
):
    await service.apply(alice, project, BACKEND)
    await SqlMemberRepository(test_db).create(bob, project, BACKEND)
    await test_db.commit()

    snapshot = await SqlProjectRepository(test_db).get(project)
    application = await SqlApplicationRepository(test_db).get(alice, project)
    transition = Transition(
        new_status=ApplicationStatus.ACCEPTED,
        create_member=True,
        member_role=(Position.BACKEND,),
    )
    with pytest.raises(PositionFullError):
        await service._apply_transition(snapshot, application, transition)

    assert await SqlMemberRepository(test_db).get(alice, project) is None
    again = await SqlApplicationRepository(test_db).get(alice, project)
    assert again.status == ApplicationStatus.PENDING


async def test_reject_pending(service, test_db, project, owner, alice):
    await service.apply(alice, project, BACKEND)
    view = await service.reject(owner, project, alice)
    assert view["status"] == "REJECTED"
    assert await _member_count(test_db, project) == 0


async def test_accept_after_reject_is_invalid(service, project, owner, alice):
    await service.apply(alice, project, BACKEND)
    await service.reject(owner, project, alice)
    with pytest.raises(InvalidStateError):
        await service.accept(owner, project, alice)


async def test_status_back_to_pending_is_invalid(service, project, owner, alice):
    await service.apply(alice, project, BACKEND)
    with pytest.raises(InvalidStateError):
        await service.update_status(owner, project, alice, ApplicationStatus.PENDING)


async def test_non_owner_cannot_decide(service, project, alice, bob):
    await service.apply(alice, project, BACKEND)
    with pytest.raises(ForbiddenError):
        await service.accept(bob, project, alice)


async def test_decide_missing_application_is_not_found(service, project, owner, bob):
    with pytest.raises(ResourceNotFoundError):
        await service.reject(owner, project, bob)


# ─── Withdrawal ──────────────────────────────────────────────────

async def test_withdraw_pending_allows_reapply(service, project, alice):
    await service.apply(alice, project, BACKEND)
    await service.withdraw(alice, project)
    view = await service.apply(alice, project, BACKEND)
    assert view["status"] == "PENDING"


async def test_withdraw_accepted_is_invalid(service, project, owner, alice):
    await service.apply(alice, project, BACKEND)
    await service.accept(owner, project, alice)
    with pytest.raises(InvalidStateError):
        await service.withdraw(alice, project)


async def test_withdraw_someone_elses_application_is_forbidden(
    service, project, alice, bob,
):
    await service.apply(alice, project, BACKEND)
    with pytest.raises(ForbiddenError):
        await service.withdraw(bob, project, alice)


async def test_withdraw_without_application_is_not_found(service, project, alice):
    with pytest.raises(ResourceNotFoundError):
        await service.withdraw(alice, project)
