"""Application Lifecycle — state machine for application status and its side effects.

Invariants:
    - All functions are PURE: they return a Transition, the shell performs the writes
    - States: PENDING (initial), ACCEPTED (terminal), REJECTED (terminal)
    - create:   none -> PENDING, only when eligibility ok; an existing
                application or membership is a Conflict, not an ineligibility
    - accept:   PENDING -> ACCEPTED, creates a member with role = applied_position
                ACCEPTED -> ACCEPTED is a no-op that never creates a second member
    - reject:   PENDING -> REJECTED, no side effect
    - withdraw: PENDING -> deleted; any other status is InvalidState
    - Authorization (ForbiddenError) is checked separately from state (InvalidStateError)

Design Decisions:
    - Transition as data: the shell applies it inside one transaction, so the
      decision stays testable without a database
    - Capacity re-validated on accept against the member list of the same transaction
"""

from collections.abc import Iterable
from dataclasses import dataclass

from teammatch.core.capacity import full_positions
from teammatch.core.domain_types import ApplicationStatus, Position, UserId
from teammatch.core.eligibility import (
    REASON_ALREADY_APPLIED, REASON_ALREADY_MEMBER, EligibilityResult,
)
from teammatch.core.errors import (
    DuplicateApplicationError, ErrorContext, ForbiddenError,
    IneligibleApplicationError, InvalidStateError, PositionFullError,
)
from teammatch.core.snapshots import (
    ApplicationSnapshot, MemberSnapshot, ProjectSnapshot,
)


@dataclass(frozen=True)
class Transition:
    """What the shell must write to complete a lifecycle step."""
    new_status: ApplicationStatus | None
    create_member: bool = False
    member_role: tuple[Position, ...] = ()
    delete_application: bool = False

    @property
    def is_noop(self) -> bool:
        return (
            self.new_status is None
            and not self.create_member
            and not self.delete_application
        )


def _context(application: ApplicationSnapshot, actor_id=None) -> ErrorContext:
    return ErrorContext(
        user_id=str(application.user_id),
        project_id=str(application.project_id),
        actor_id=str(actor_id) if actor_id is not None else None,
    )


# ─── Authorization ──────────────────────────────────────────────

def ensure_owner(project: ProjectSnapshot, actor_id: UserId, action: str) -> None:
    """Raise ForbiddenError unless actor owns the project."""
    if project.owner_id != actor_id:
        raise ForbiddenError(action, ErrorContext(
            project_id=str(project.id), actor_id=str(actor_id),
        ))


def ensure_applicant(application: ApplicationSnapshot, actor_id: UserId) -> None:
    """Raise ForbiddenError unless actor is the applicant."""
    if application.user_id != actor_id:
        raise ForbiddenError(
            "withdraw this application", _context(application, actor_id),
        )


# ─── Transitions ────────────────────────────────────────────────

def plan_create(eligibility: EligibilityResult) -> Transition:
    """none -> PENDING, guarded by a successful eligibility verdict.

    An existing application or membership is a conflict; every other refusal
    is an ineligibility. Both carry the full reason list.
    """
    if REASON_ALREADY_APPLIED in eligibility.reasons or (
        REASON_ALREADY_MEMBER in eligibility.reasons
    ):
        raise DuplicateApplicationError(eligibility.reasons)
    if not eligibility.ok:
        raise IneligibleApplicationError(eligibility.reasons)
    return Transition(new_status=ApplicationStatus.PENDING)


def plan_accept(
    application: ApplicationSnapshot,
    project: ProjectSnapshot,
    members: Iterable[MemberSnapshot],
    existing_membership: MemberSnapshot | None,
) -> Transition:
    """PENDING|ACCEPTED -> ACCEPTED; add a member only if none exists yet."""
    if application.status == ApplicationStatus.REJECTED:
        raise InvalidStateError(
            "Rejected applications cannot be accepted",
            application.status.value, _context(application),
        )
    if existing_membership is not None:
        new_status = (
            None if application.status == ApplicationStatus.ACCEPTED
            else ApplicationStatus.ACCEPTED
        )
        return Transition(new_status=new_status)

    others = [m for m in members if m.user_id != application.user_id]
    full = full_positions(project, application.applied_position, others)
    if full:
        raise PositionFullError([p.value for p in full], _context(application))

    new_status = (
        None if application.status == ApplicationStatus.ACCEPTED
        else ApplicationStatus.ACCEPTED
    )
    return Transition(
        new_status=new_status,
        create_member=True,
        member_role=tuple(application.applied_position),
    )


def plan_reject(application: ApplicationSnapshot) -> Transition:
    """PENDING -> REJECTED."""
    if application.status != ApplicationStatus.PENDING:
        raise InvalidStateError(
            f"Only pending applications can be rejected "
            f"(current: {application.status.value})",
            application.status.value, _context(application),
        )
    return Transition(new_status=ApplicationStatus.REJECTED)


def plan_withdraw(application: ApplicationSnapshot) -> Transition:
    """PENDING -> deleted."""
    if application.status != ApplicationStatus.PENDING:
        raise InvalidStateError(
            f"Only pending applications can be withdrawn "
            f"(current: {application.status.value})",
            application.status.value, _context(application),
        )
    return Transition(new_status=None, delete_application=True)


def plan_status_change(
    target: ApplicationStatus,
    application: ApplicationSnapshot,
    project: ProjectSnapshot,
    members: Iterable[MemberSnapshot],
    existing_membership: MemberSnapshot | None,
) -> Transition:
    """Dispatch an owner's requested status to accept/reject."""
    if target == ApplicationStatus.ACCEPTED:
        return plan_accept(application, project, members, existing_membership)
    if target == ApplicationStatus.REJECTED:
        return plan_reject(application)
    raise InvalidStateError(
        "Applications cannot be moved back to PENDING",
        application.status.value, _context(application),
    )
