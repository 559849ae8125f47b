"""Tests for serpentine team seeding."""

from __future__ import annotations

import pytest

from domain.mix.common import Participant
from domain.mix.protocol import RatingType
from domain.mix.snake import form_snake_teams, snake_order


def _pool(*ratings: int) -> list[Participant]:
    return [
        Participant(participant_id=index, name=f"p{index}", user_faceit_elo=rating)
        for index, rating in enumerate(ratings, start=1)
    ]


def _ratings(team) -> list[int]:
    return [member.user_faceit_elo for member in team.members]


def test_snake_order_alternates_direction() -> None:
    assert snake_order(3, 3) == [0, 1, 2, 2, 1, 0, 0, 1, 2]
    assert snake_order(2, 4) == [0, 1, 1, 0, 0, 1, 1, 0]


def test_two_teams_of_five_follow_serpentine_distribution() -> None:
    pool = _pool(*range(100, 0, -10))
    teams = form_snake_teams(pool, 5, RatingType.FACEIT)

    assert [_ratings(team) for team in teams] == [
        [100, 70, 60, 30, 20],
        [90, 80, 50, 40, 10],
    ]


def test_input_is_ranked_before_drafting() -> None:
    pool = _pool(1200, 3000, 1800, 2500, 900, 2100)
    teams = form_snake_teams(pool, 3, RatingType.FACEIT)

    assert [_ratings(team) for team in teams] == [
        [3000, 1800, 1200],
        [2500, 2100, 900],
    ]


def test_remainder_is_excluded_from_the_lowest_ranks() -> None:
    pool = _pool(500, 1500, 1400, 1300, 1200, 1100, 1000)
    teams = form_snake_teams(pool, 3, RatingType.FACEIT)

    assert len(teams) == 2
    placed = sorted(rating for team in teams for rating in _ratings(team))
    assert placed == [1000, 1100, 1200, 1300, 1400, 1500]


def test_equal_ratings_keep_input_order() -> None:
    pool = _pool(*([1000] * 6))
    teams = form_snake_teams(pool, 3, RatingType.FACEIT)

    assert [team.member_ids() for team in teams] == [[1, 4, 5], [2, 3, 6]]


def test_too_few_players_yields_no_teams() -> None:
    assert form_snake_teams(_pool(1000, 1000), 3, RatingType.FACEIT) == []


def test_invalid_team_size_raises() -> None:
    with pytest.raises(ValueError, match="team_size must be greater than 0"):
        form_snake_teams(_pool(1000), 0, RatingType.FACEIT)
