"""Effective-rating resolution for mix participants."""

from __future__ import annotations

import math
import numbers
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from domain.mix.common import Participant, RawRating, TeamDraft
from domain.mix.protocol import RatingSource, RatingType

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Legacy columns (faceit_rating, premier_rank, premier_rating and the user_*
# variants) predate the manual/profile split. Nothing in the current schema
# writes them; they stay in the chain so old registrations keep their rank.
_FACEIT_CHAIN: tuple[tuple[str, RatingSource], ...] = (
    ("faceit_elo", RatingSource.MANUAL),
    ("user_faceit_elo", RatingSource.PROFILE),
    ("faceit_rating", RatingSource.LEGACY_PARTICIPANT),
    ("user_faceit_rating", RatingSource.LEGACY_USER),
)

_PREMIER_CHAIN: tuple[tuple[str, RatingSource], ...] = (
    ("cs2_premier_rank", RatingSource.MANUAL),
    ("user_premier_rank", RatingSource.PROFILE),
    ("premier_rank", RatingSource.LEGACY_PARTICIPANT),
    ("premier_rating", RatingSource.LEGACY_PARTICIPANT_ALT),
    ("user_premier_rating", RatingSource.LEGACY_USER),
)


@dataclass(frozen=True)
class RatingResolution:
    """Effective rating plus the field it was taken from."""

    rating: int
    source: RatingSource

    @property
    def is_manual(self) -> bool:
        return self.source is RatingSource.MANUAL


def parse_positive_int(value: RawRating) -> int | None:
    """Parse a raw rating field, returning None unless it is a positive integer.

    Strings contribute their leading digit run; floats, ``Decimal`` (NUMERIC
    columns) and other real numbers are truncated.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, Decimal):
        if not value.is_finite():
            return None
        parsed = int(value)
    elif isinstance(value, numbers.Real):
        if not math.isfinite(value):
            return None
        parsed = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return None
        parsed = int(match.group(1))
    else:
        return None
    return parsed if parsed > 0 else None


def _chain_for(rating_type: RatingType) -> tuple[tuple[str, RatingSource], ...]:
    if rating_type is RatingType.PREMIER:
        return _PREMIER_CHAIN
    return _FACEIT_CHAIN


def resolve_rating(participant: Participant, rating_type: RatingType) -> RatingResolution:
    """Walk the source-priority chain and return the first usable rating."""
    rating_type = RatingType(rating_type)
    for field_name, source in _chain_for(rating_type):
        parsed = parse_positive_int(getattr(participant, field_name))
        if parsed is not None:
            return RatingResolution(rating=parsed, source=source)
    return RatingResolution(rating=rating_type.default_rating, source=RatingSource.DEFAULT)


def normalize_rating(participant: Participant, rating_type: RatingType) -> int:
    """Effective integer rating of a participant for one rating type."""
    return resolve_rating(participant, rating_type).rating


def total_rating(members: Iterable[Participant], rating_type: RatingType) -> int:
    return sum(normalize_rating(member, rating_type) for member in members)


def average_rating(members: Sequence[Participant], rating_type: RatingType) -> float:
    if not members:
        return 0.0
    return total_rating(members, rating_type) / len(members)


def team_average(team: TeamDraft, rating_type: RatingType) -> float:
    return average_rating(team.members, rating_type)


def sort_by_rating(
    participants: Iterable[Participant],
    rating_type: RatingType,
) -> list[Participant]:
    """Stable descending sort; equal ratings keep input order."""
    return sorted(
        participants,
        key=lambda participant: normalize_rating(participant, rating_type),
        reverse=True,
    )


__all__ = [
    "RatingResolution",
    "average_rating",
    "normalize_rating",
    "parse_positive_int",
    "resolve_rating",
    "sort_by_rating",
    "team_average",
    "total_rating",
]
