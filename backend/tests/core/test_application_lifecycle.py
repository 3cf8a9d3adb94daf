"""Application Lifecycle — tests for pure transition planning.

Tests cover:
    - plan_create only from an ok verdict; reasons carried on refusal
    - An existing application or membership refuses with a conflict
    - plan_accept creates exactly one member with role = applied_position
    - Re-accepting, or accepting an existing member, never adds a member
    - Accept re-validates capacity against other members
    - Reject/withdraw only from PENDING
    - Moving back to PENDING is invalid
    - Owner/applicant authorization
"""

import pytest

from teammatch.core.application_lifecycle import (
    Transition, ensure_applicant, ensure_owner, plan_accept, plan_create,
    plan_reject, plan_status_change, plan_withdraw,
)
from teammatch.core.domain_types import ApplicationStatus, Position
from teammatch.core.eligibility import EligibilityResult
from teammatch.core.errors import (
    ConflictError, DuplicateApplicationError, ForbiddenError,
    IneligibleApplicationError, InvalidStateError, PositionFullError,
)

from snapshot_factories import (
    make_application, make_member, make_project, new_user_id,
)


# ─── plan_create ─────────────────────────────────────────────────

def test_create_from_ok_verdict_is_pending():
    assert plan_create(EligibilityResult(True, [])).new_status == ApplicationStatus.PENDING


def test_create_from_refused_verdict_raises_with_reasons():
    reasons = ["PM is full", "proficiency out of accepted range"]
    with pytest.raises(IneligibleApplicationError) as exc:
        plan_create(EligibilityResult(False, reasons))
    assert exc.value.reasons == reasons
    assert exc.value.http_status == 422


@pytest.mark.parametrize("duplicate", ["already applied", "already a member"])
def test_create_over_existing_pair_is_conflict_with_all_reasons(duplicate):
    with pytest.raises(DuplicateApplicationError) as exc:
        plan_create(EligibilityResult(False, [duplicate, "PM is full"]))
    assert isinstance(exc.value, ConflictError)
    assert exc.value.http_status == 409
    assert exc.value.reasons == [duplicate, "PM is full"]


# ─── plan_accept ─────────────────────────────────────────────────

def test_accept_pending_creates_member_with_applied_roles():
    project = make_project()
    app = make_application(project, Position.BACKEND, Position.AI)
    transition = plan_accept(app, project, [], None)
    assert transition == Transition(
        new_status=ApplicationStatus.ACCEPTED,
        create_member=True,
        member_role=(Position.BACKEND, Position.AI),
    )


def test_accept_when_already_member_does_not_create_second_member():
    project = make_project()
    app = make_application(project, status=ApplicationStatus.ACCEPTED)
    membership = make_member(project, Position.BACKEND, user_id=app.user_id)
    transition = plan_accept(app, project, [membership], membership)
    assert not transition.create_member
    assert transition.is_noop


def test_accept_pending_of_existing_member_only_updates_status():
    project = make_project()
    app = make_application(project)
    membership = make_member(project, Position.BACKEND, user_id=app.user_id)
    transition = plan_accept(app, project, [membership], membership)
    assert transition.new_status == ApplicationStatus.ACCEPTED
    assert not transition.create_member


def test_accept_rejected_is_invalid():
    project = make_project()
    app = make_application(project, status=ApplicationStatus.REJECTED)
    with pytest.raises(InvalidStateError):
        plan_accept(app, project, [], None)


def test_accept_into_full_position_raises():
    project = make_project(limits={Position.BACKEND: 1})
    app = make_application(project, Position.BACKEND)
    members = [make_member(project, Position.BACKEND)]
    with pytest.raises(PositionFullError) as exc:
        plan_accept(app, project, members, None)
    assert exc.value.code == "POSITION_FULL"
    assert exc.value.positions == ["BACKEND"]


def test_accept_last_free_slot():
    project = make_project(limits={Position.BACKEND: 2})
    app = make_application(project, Position.BACKEND)
    members = [make_member(project, Position.BACKEND)]
    assert plan_accept(app, project, members, None).create_member


# ─── plan_reject / plan_withdraw ─────────────────────────────────

def test_reject_pending():
    project = make_project()
    transition = plan_reject(make_application(project))
    assert transition.new_status == ApplicationStatus.REJECTED
    assert not transition.create_member


@pytest.mark.parametrize(
    "status", [ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED],
)
def test_reject_decided_application_is_invalid(status):
    with pytest.raises(InvalidStateError):
        plan_reject(make_application(make_project(), status=status))


def test_withdraw_pending_deletes():
    transition = plan_withdraw(make_application(make_project()))
    assert transition.delete_application
    assert transition.new_status is None


@pytest.mark.parametrize(
    "status", [ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED],
)
def test_withdraw_decided_application_is_invalid(status):
    with pytest.raises(InvalidStateError) as exc:
        plan_withdraw(make_application(make_project(), status=status))
    assert exc.value.current_status == status.value


# ─── plan_status_change ──────────────────────────────────────────

def test_status_change_back_to_pending_is_invalid():
    project = make_project()
    app = make_application(project, status=ApplicationStatus.ACCEPTED)
    with pytest.raises(InvalidStateError):
        plan_status_change(ApplicationStatus.PENDING, app, project, [], None)


def test_status_change_dispatches_accept():
    project = make_project()
    transition = plan_status_change(
        ApplicationStatus.ACCEPTED, make_application(project), project, [], None,
    )
    assert transition.create_member


# ─── Authorization ───────────────────────────────────────────────

def test_ensure_owner_rejects_other_actor():
    project = make_project()
    with pytest.raises(ForbiddenError) as exc:
        ensure_owner(project, new_user_id(), "change application status")
    assert exc.value.http_status == 403


def test_ensure_owner_accepts_owner():
    project = make_project()
    ensure_owner(project, project.owner_id, "update this project")


def test_ensure_applicant_rejects_owner():
    project = make_project()
    app = make_application(project)
    with pytest.raises(ForbiddenError):
        ensure_applicant(app, project.owner_id)
