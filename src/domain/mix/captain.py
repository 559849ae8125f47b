"""Captain selection by effective rating."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.mix.common import Participant
from domain.mix.protocol import RatingType
from domain.mix.ratings import resolve_rating


@dataclass(frozen=True)
class CaptainSelection:
    captain: Participant | None
    rating: int | None
    used_manual_rating: bool


def select_captain(members: Sequence[Participant], rating_type: RatingType) -> CaptainSelection:
    """Pick the highest-rated member; the first one seen wins a tie."""
    best: Participant | None = None
    best_rating: int | None = None
    best_is_manual = False

    for member in members:
        resolution = resolve_rating(member, rating_type)
        if best_rating is None or resolution.rating > best_rating:
            best = member
            best_rating = resolution.rating
            best_is_manual = resolution.is_manual

    return CaptainSelection(captain=best, rating=best_rating, used_manual_rating=best_is_manual)


__all__ = ["CaptainSelection", "select_captain"]
