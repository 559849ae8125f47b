"""Shared enums for mix-team formation."""

from __future__ import annotations

from enum import Enum


class RatingType(str, Enum):
    """Which rating ladder drives team formation."""

    FACEIT = "faceit"
    PREMIER = "premier"

    @property
    def default_rating(self) -> int:
        if self is RatingType.PREMIER:
            return 5
        return 1000


class RatingSource(str, Enum):
    """Which participant field produced an effective rating."""

    MANUAL = "manual"
    PROFILE = "profile"
    LEGACY_PARTICIPANT = "legacy_participant"
    LEGACY_PARTICIPANT_ALT = "legacy_participant_alt"
    LEGACY_USER = "legacy_user"
    DEFAULT = "default"


class FormationAlgorithm(str, Enum):
    """Seeding strategy used for a formation run."""

    OPTIMAL_PAIRS = "optimal_pairs"
    SMART_SNAKE = "smart_snake"


__all__ = [
    "FormationAlgorithm",
    "RatingSource",
    "RatingType",
]
