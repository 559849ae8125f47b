"""End-to-end tests for mix-team formation."""

from __future__ import annotations

import json
import random

import pytest

from domain.mix import formation
from domain.mix.common import Participant, TeamDraft
from domain.mix.config import FormationParameters
from domain.mix.errors import (
    EmptyTeamCaptainSelection,
    InsufficientParticipants,
    InsufficientTeamsForBracket,
    TeamFormationError,
)
from domain.mix.events import CaptainAssigned, RatingResolved, TeamsSeeded
from domain.mix.formation import form_teams
from domain.mix.protocol import FormationAlgorithm, RatingType
from domain.mix.ratings import normalize_rating


def _pool(*ratings: int) -> list[Participant]:
    return [
        Participant(participant_id=index, name=f"player{index}", user_faceit_elo=rating)
        for index, rating in enumerate(ratings, start=1)
    ]


def test_four_player_pairs_scenario() -> None:
    participants = _pool(2000, 1000, 1500, 1200)
    result = form_teams(participants, 2, RatingType.FACEIT)

    summary = result.summary
    assert summary.algorithm == FormationAlgorithm.OPTIMAL_PAIRS
    assert summary.global_average == pytest.approx(1425.0)
    assert summary.teams_created == 2
    assert summary.participants_in_teams == 4
    assert summary.participants_not_in_teams == 0
    assert summary.balance_percent == pytest.approx(150 / 1425 * 100)
    assert summary.balance_iterations == 0
    assert summary.is_balanced is True

    assert [[member.rating for member in team.members] for team in result.teams] == [
        [2000, 1000],
        [1500, 1200],
    ]
    assert [team.average_rating for team in result.teams] == [pytest.approx(1500.0), pytest.approx(1350.0)]
    assert [team.captain_rating for team in result.teams] == [2000, 1500]
    assert [team.name for team in result.teams] == ["player1 team", "player3 team"]


def test_ten_equal_players_scenario() -> None:
    participants = _pool(*([1000] * 10))
    result = form_teams(participants, 5, RatingType.FACEIT)

    assert result.summary.algorithm == FormationAlgorithm.SMART_SNAKE
    assert len(result.teams) == 2
    assert all(len(team.members) == 5 for team in result.teams)
    assert result.summary.balance_percent == pytest.approx(0.0)
    assert [team.captain.participant_id for team in result.teams] == [1, 2]
    assert [team.members[0].is_captain for team in result.teams] == [True, True]


def test_seven_players_cannot_fill_a_bracket() -> None:
    with pytest.raises(InsufficientTeamsForBracket) as exc_info:
        form_teams(_pool(*([1000] * 7)), 5, RatingType.FACEIT)

    error = exc_info.value
    assert isinstance(error, InsufficientParticipants)
    assert error.required == 10
    assert error.actual == 7
    assert error.shortfall == 3


def test_fewer_players_than_team_size() -> None:
    with pytest.raises(InsufficientParticipants) as exc_info:
        form_teams(_pool(1000, 1000, 1000), 5, RatingType.FACEIT)

    assert not isinstance(exc_info.value, InsufficientTeamsForBracket)
    assert exc_info.value.shortfall == 2
    assert isinstance(exc_info.value, TeamFormationError)


def test_bracket_check_boundary_for_pairs() -> None:
    with pytest.raises(InsufficientTeamsForBracket):
        form_teams(_pool(1000, 1200, 1400), 2, RatingType.FACEIT)


def test_team_size_below_two_is_rejected() -> None:
    with pytest.raises(ValueError, match="team_size must be >= 2"):
        form_teams(_pool(1000, 1000), 1, RatingType.FACEIT)


def test_single_team_allowed_when_min_teams_is_one() -> None:
    result = form_teams(
        _pool(*range(1000, 1700, 100)),
        5,
        RatingType.FACEIT,
        parameters=FormationParameters(min_teams=1),
    )
    assert len(result.teams) == 1
    assert sorted(participant.participant_id for participant in result.excluded) == [1, 2]


@pytest.mark.parametrize(("size", "team_size"), [(23, 5), (17, 2), (20, 4), (31, 3)])
def test_counts_membership_and_captains(size: int, team_size: int) -> None:
    rng = random.Random(size * team_size)
    participants = _pool(*(rng.randint(300, 3500) for _ in range(size)))
    result = form_teams(participants, team_size, RatingType.FACEIT)

    expected_teams = size // team_size
    assert len(result.teams) == expected_teams
    assert len(result.excluded) == size - expected_teams * team_size
    assert result.summary.participants_not_in_teams == len(result.excluded)

    placed_ids = [member.participant.participant_id for team in result.teams for member in team.members]
    excluded_ids = [participant.participant_id for participant in result.excluded]
    assert len(placed_ids) == len(set(placed_ids))
    assert set(placed_ids).isdisjoint(excluded_ids)
    assert len(placed_ids) + len(excluded_ids) == size

    for team in result.teams:
        assert len(team.members) == team_size
        captains = [member for member in team.members if member.is_captain]
        assert len(captains) == 1
        assert captains[0].participant is team.captain
        assert team.captain_rating == max(member.rating for member in team.members)
        first_best = next(m for m in team.members if m.rating == team.captain_rating)
        assert first_best.participant is team.captain

    if result.excluded:
        lowest_placed = min(member.rating for team in result.teams for member in team.members)
        assert max(normalize_rating(p, RatingType.FACEIT) for p in result.excluded) <= lowest_placed


def test_reporting_carries_both_rating_types() -> None:
    participants = [
        Participant(participant_id=1, name="a", user_faceit_elo=2000, user_premier_rank=20000),
        Participant(participant_id=2, name="b", user_faceit_elo=1000, user_premier_rank=10000),
        Participant(participant_id=3, name="c", user_faceit_elo=1500),
        Participant(participant_id=4, name="d", user_faceit_elo=1200, cs2_premier_rank=12000),
    ]
    result = form_teams(participants, 2, "faceit")  # type: ignore[arg-type]

    first, second = result.teams
    assert first.average_faceit_rating == pytest.approx(1500.0)
    assert first.average_premier_rating == pytest.approx(15000.0)
    assert second.average_faceit_rating == pytest.approx(1350.0)
    assert second.average_premier_rating == pytest.approx((5 + 12000) / 2)
    assert [member.premier_rating for member in second.members] == [5, 12000]


def test_captain_stats_count_manual_ratings() -> None:
    participants = [
        Participant(participant_id=1, name="a", faceit_elo=2200),
        Participant(participant_id=2, name="b", user_faceit_elo=1000),
        Participant(participant_id=3, name="c", user_faceit_elo=1600),
        Participant(participant_id=4, name="d", user_faceit_elo=1400),
    ]
    result = form_teams(participants, 2, RatingType.FACEIT)
    stats = result.summary.captain_stats

    assert stats.total == 2
    assert stats.with_manual_rating == 1
    assert stats.min_rating == min(team.captain_rating for team in result.teams)
    assert stats.max_rating == 2200
    assert stats.avg_rating == pytest.approx(sum(team.captain_rating for team in result.teams) / 2)
    assert [team.captain_used_manual_rating for team in result.teams].count(True) == 1


def test_unnamed_captain_falls_back_to_ordinal_name() -> None:
    participants = [Participant(participant_id=index, name="") for index in range(1, 5)]
    result = form_teams(participants, 2, RatingType.PREMIER)
    assert [team.name for team in result.teams] == ["Team 1", "Team 2"]


def test_events_are_emitted_when_requested() -> None:
    events: list[object] = []
    participants = _pool(2000, 1000, 1500, 1200)
    form_teams(participants, 2, RatingType.FACEIT, on_event=events.append)

    resolved = [event for event in events if isinstance(event, RatingResolved)]
    assert [event.participant_id for event in resolved] == [1, 2, 3, 4]
    assert sum(isinstance(event, TeamsSeeded) for event in events) == 1
    assert sum(isinstance(event, CaptainAssigned) for event in events) == 2
    assert all(event.describe() for event in events)


def test_input_snapshot_is_not_modified() -> None:
    participants = _pool(900, 2500, 1300, 1800, 2100, 1200, 1700, 1000, 3000, 1100)
    snapshot = list(participants)
    form_teams(participants, 5, RatingType.FACEIT)
    assert participants == snapshot


def test_result_serializes_to_json() -> None:
    result = form_teams(_pool(2000, 1000, 1500, 1200, 1300), 2, RatingType.FACEIT)
    payload = json.loads(json.dumps(result.as_dict()))

    assert payload["summary"]["algorithm"] == "optimal_pairs"
    assert payload["summary"]["rating_type"] == "faceit"
    assert payload["summary"]["participants_not_in_teams"] == 1
    assert payload["excluded_participant_ids"] == [2]
    assert len(payload["teams"]) == 2
    assert sum(member["is_captain"] for member in payload["teams"][0]["members"]) == 1


def test_duplicate_participant_ids_are_rejected() -> None:
    participants = _pool(1000, 1100, 1200, 1300, 1400, 1500)
    participants[1] = Participant(participant_id=1, name="copy", user_faceit_elo=1100)

    with pytest.raises(ValueError, match=r"Duplicate participant ids: \[1\]"):
        form_teams(participants, 2, RatingType.FACEIT)


def test_empty_seeded_team_breaks_captain_selection(monkeypatch: pytest.MonkeyPatch) -> None:
    def seed_with_empty_team(
        placed: list[Participant], team_size: int, rating_type: RatingType
    ) -> list[TeamDraft]:
        return [TeamDraft(list(placed[:team_size])), TeamDraft()]

    monkeypatch.setattr(formation, "form_snake_teams", seed_with_empty_team)

    with pytest.raises(EmptyTeamCaptainSelection) as exc_info:
        form_teams(_pool(*([1000] * 6)), 3, RatingType.FACEIT)

    assert exc_info.value.team_index == 1
    assert isinstance(exc_info.value, AssertionError)
    assert not isinstance(exc_info.value, TeamFormationError)


def test_shuffled_formation_is_repeatable_for_a_seed() -> None:
    participants = _pool(900, 2500, 1300, 1800, 2100, 1200, 1700, 1000, 3000, 1100, 1600, 1400)

    first = form_teams(participants, 5, RatingType.FACEIT, rng=random.Random(17))
    second = form_teams(participants, 5, RatingType.FACEIT, rng=random.Random(17))

    assert first.as_dict() == second.as_dict()
    assert first.summary.shuffled is True
    assert form_teams(participants, 5, RatingType.FACEIT).summary.shuffled is False


@pytest.mark.parametrize("seed", range(8))
@pytest.mark.parametrize(("size", "team_size"), [(23, 5), (17, 2)])
def test_shuffled_formation_keeps_team_invariants(seed: int, size: int, team_size: int) -> None:
    pool_rng = random.Random(size)
    participants = _pool(*(pool_rng.randint(300, 3500) for _ in range(size)))
    result = form_teams(participants, team_size, RatingType.FACEIT, rng=random.Random(seed))

    assert len(result.teams) == size // team_size
    placed_ids = {member.participant.participant_id for team in result.teams for member in team.members}
    excluded_ids = {participant.participant_id for participant in result.excluded}
    assert len(placed_ids) == len(result.teams) * team_size
    assert placed_ids.isdisjoint(excluded_ids)
    assert len(placed_ids) + len(excluded_ids) == size

    for team in result.teams:
        assert len(team.members) == team_size
        assert sum(member.is_captain for member in team.members) == 1
        assert team.captain_rating == max(member.rating for member in team.members)

    assert result.summary.balance_percent <= result.summary.initial_balance_percent + 1e-9


def test_shuffle_does_not_touch_the_input() -> None:
    participants = _pool(900, 2500, 1300, 1800, 2100, 1200)
    snapshot = list(participants)
    form_teams(participants, 2, RatingType.FACEIT, rng=random.Random(3))
    assert participants == snapshot
