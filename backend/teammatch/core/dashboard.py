"""Dashboard Composition — read-side views of projects, members and applications.

Invariants:
    - All functions are PURE: views are built from snapshots fetched by the shell
    - No eligibility or capacity DECISIONS here; occupancy is shown, never enforced
    - No extra filtering: every bundle/application passed in appears in the output,
      in the order given
    - owned projects use the detail view (members + applications nested);
      member projects and application parents use the summary view

Design Decisions:
    - ProjectBundle groups a project with its rows so views need no lookups
    - Views are plain dicts shaped like schemas/project.py response models;
      the route's response_model does the final validation
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from teammatch.core.capacity import occupancy
from teammatch.core.domain_types import Position, UserId
from teammatch.core.snapshots import (
    ApplicationSnapshot, MemberSnapshot, ProjectSnapshot, UserSnapshot,
)


@dataclass(frozen=True)
class ProjectBundle:
    project: ProjectSnapshot
    members: tuple[MemberSnapshot, ...] = ()
    applications: tuple[ApplicationSnapshot, ...] = ()
    applicants: Mapping[UserId, UserSnapshot] = field(default_factory=dict)


def _positions(values: Iterable[Position]) -> list[str]:
    return [p.value for p in values]


def project_summary(bundle: ProjectBundle) -> dict:
    """Summary view: configuration plus occupancy counters."""
    project = bundle.project
    counts = occupancy(bundle.members)
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "difficulty": project.difficulty.value,
        "is_open": project.is_open,
        "recruitment_start": project.recruitment_start,
        "recruitment_end": project.recruitment_end,
        "project_start": project.project_start,
        "project_end": project.project_end,
        "limits": {p.value: project.limit_for(p) for p in Position},
        "current": {p.value: counts[p] for p in Position},
        "min_proficiency": (
            project.min_proficiency.value if project.min_proficiency else None
        ),
        "max_proficiency": (
            project.max_proficiency.value if project.max_proficiency else None
        ),
        "owner_id": project.owner_id,
        "member_count": len(bundle.members),
        "application_count": len(bundle.applications),
    }


def member_view(member: MemberSnapshot) -> dict:
    return {
        "user_id": member.user_id,
        "project_id": member.project_id,
        "role": _positions(member.role),
        "joined_at": member.joined_at,
    }


def application_view(
    application: ApplicationSnapshot,
    parent: ProjectBundle | None = None,
    applicant: UserSnapshot | None = None,
) -> dict:
    view = {
        "user_id": application.user_id,
        "project_id": application.project_id,
        "applied_position": _positions(application.applied_position),
        "status": application.status.value,
        "cover_letter": application.cover_letter,
        "created_at": application.created_at,
        "updated_at": application.updated_at,
        "project": project_summary(parent) if parent is not None else None,
        "applicant": None,
    }
    if applicant is not None:
        proficiency = applicant.proficiency
        view["applicant"] = {
            "id": applicant.id,
            "positions": _positions(applicant.positions),
            "proficiency": getattr(proficiency, "value", proficiency),
        }
    return view


def project_detail(bundle: ProjectBundle) -> dict:
    """Detail view: summary plus nested member and application lists."""
    view = project_summary(bundle)
    view["members"] = [member_view(m) for m in bundle.members]
    view["applications"] = [
        application_view(a, applicant=bundle.applicants.get(a.user_id))
        for a in bundle.applications
    ]
    return view


def build_owner_dashboard(owned: Iterable[ProjectBundle]) -> dict:
    return {"owned_projects": [project_detail(b) for b in owned]}


def build_member_dashboard(
    member_projects: Iterable[ProjectBundle],
    applications: Iterable[tuple[ApplicationSnapshot, ProjectBundle | None]],
) -> dict:
    return {
        "member_projects": [project_summary(b) for b in member_projects],
        "my_applications": [
            application_view(app, parent) for app, parent in applications
        ],
    }


def build_dashboard(
    owned: Iterable[ProjectBundle],
    member_projects: Iterable[ProjectBundle],
    applications: Iterable[tuple[ApplicationSnapshot, ProjectBundle | None]],
) -> dict:
    """Full per-user dashboard: owned, member-of, and own applications."""
    return {
        **build_owner_dashboard(owned),
        **build_member_dashboard(member_projects, applications),
    }
