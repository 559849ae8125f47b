"""Snake-draft team formation for teams of three or more."""

from __future__ import annotations

from collections.abc import Sequence

from domain.mix.common import Participant, TeamDraft
from domain.mix.protocol import RatingType
from domain.mix.ratings import sort_by_rating


def snake_order(team_count: int, rounds: int) -> list[int]:
    """Team index for each pick: forward on even rounds, reverse on odd ones."""
    order: list[int] = []
    for round_index in range(rounds):
        indices = range(team_count)
        if round_index % 2 == 1:
            indices = reversed(indices)
        order.extend(indices)
    return order


def form_snake_teams(
    participants: Sequence[Participant],
    team_size: int,
    rating_type: RatingType,
) -> list[TeamDraft]:
    """Distribute players strongest-first in serpentine order.

    Only ``(n // team_size) * team_size`` of the highest-rated players are used.
    """
    if team_size <= 0:
        raise ValueError("team_size must be greater than 0")

    full_teams = len(participants) // team_size
    if full_teams == 0:
        return []

    ranked = sort_by_rating(participants, rating_type)[: full_teams * team_size]
    teams = [TeamDraft() for _ in range(full_teams)]
    for participant, team_index in zip(ranked, snake_order(full_teams, team_size)):
        teams[team_index].add(participant)

    return teams


__all__ = ["form_snake_teams", "snake_order"]
