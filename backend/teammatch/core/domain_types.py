"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ProjectId wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching
    - Position and Proficiency values match the persisted column values verbatim

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ProjectId = NewType("ProjectId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class Position(str, Enum):
    """Role categories a project recruits for."""
    BACKEND = "BACKEND"
    FRONTEND = "FRONTEND"
    PM = "PM"
    MOBILE = "MOBILE"
    AI = "AI"


class Proficiency(str, Enum):
    """Skill tiers, declared lowest to highest."""
    UNKNOWN = "UNKNOWN"
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    DIAMOND = "DIAMOND"


class ApplicationStatus(str, Enum):
    """Application lifecycle states — maps to DB `status` column."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Difficulty(str, Enum):
    """Informational project difficulty. Never used in decisions."""
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    UNKNOWN = "UNKNOWN"


def normalize_positions(values) -> list[Position]:
    """Coerce an iterable of position strings/enums to unique Positions, order kept.

    Unrecognised values are dropped (legacy rows may carry retired roles).
    """
    seen: list[Position] = []
    for value in values or ():
        try:
            position = Position(value)
        except ValueError:
            continue
        if position not in seen:
            seen.append(position)
    return seen
