"""Top-level mix-team formation."""

from __future__ import annotations

import random
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from domain.mix.balance import check_team_balance, optimize_balance
from domain.mix.captain import select_captain
from domain.mix.common import Participant, TeamDraft
from domain.mix.config import FormationParameters
from domain.mix.errors import (
    EmptyTeamCaptainSelection,
    InsufficientParticipants,
    InsufficientTeamsForBracket,
)
from domain.mix.events import CaptainAssigned, EventCallback, RatingResolved, TeamsSeeded
from domain.mix.pairs import form_pairs
from domain.mix.protocol import FormationAlgorithm, RatingType
from domain.mix.ratings import average_rating, normalize_rating, resolve_rating, sort_by_rating
from domain.mix.snake import form_snake_teams


@dataclass(frozen=True)
class TeamMember:
    participant: Participant
    rating: int
    faceit_rating: int
    premier_rating: int
    is_captain: bool

    def as_dict(self) -> dict[str, Any]:
        return {
            "participant_id": self.participant.participant_id,
            "user_id": self.participant.user_id,
            "name": self.participant.name,
            "rating": self.rating,
            "faceit_rating": self.faceit_rating,
            "premier_rating": self.premier_rating,
            "is_captain": self.is_captain,
        }


@dataclass(frozen=True)
class FormedTeam:
    name: str
    members: tuple[TeamMember, ...]
    average_rating: float
    average_faceit_rating: float
    average_premier_rating: float
    captain: Participant
    captain_rating: int
    captain_used_manual_rating: bool

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "members": [member.as_dict() for member in self.members],
            "average_rating": round(self.average_rating, 2),
            "average_faceit_rating": round(self.average_faceit_rating, 2),
            "average_premier_rating": round(self.average_premier_rating, 2),
            "captain_participant_id": self.captain.participant_id,
            "captain_rating": self.captain_rating,
            "captain_used_manual_rating": self.captain_used_manual_rating,
        }


@dataclass(frozen=True)
class CaptainStats:
    total: int
    with_manual_rating: int
    min_rating: int
    avg_rating: float
    max_rating: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "with_manual_rating": self.with_manual_rating,
            "min_rating": self.min_rating,
            "avg_rating": round(self.avg_rating, 2),
            "max_rating": self.max_rating,
        }


@dataclass(frozen=True)
class FormationSummary:
    total_participants: int
    participants_in_teams: int
    participants_not_in_teams: int
    teams_created: int
    team_size: int
    rating_type: RatingType
    algorithm: FormationAlgorithm
    global_average: float
    initial_balance_percent: float
    balance_percent: float
    balance_iterations: int
    is_balanced: bool
    shuffled: bool
    captain_stats: CaptainStats

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_participants": self.total_participants,
            "participants_in_teams": self.participants_in_teams,
            "participants_not_in_teams": self.participants_not_in_teams,
            "teams_created": self.teams_created,
            "team_size": self.team_size,
            "rating_type": self.rating_type.value,
            "algorithm": self.algorithm.value,
            "global_average": round(self.global_average, 2),
            "initial_balance_percent": round(self.initial_balance_percent, 2),
            "balance_percent": round(self.balance_percent, 2),
            "balance_iterations": self.balance_iterations,
            "is_balanced": self.is_balanced,
            "shuffled": self.shuffled,
            "captain_stats": self.captain_stats.as_dict(),
        }


@dataclass(frozen=True)
class FormationResult:
    teams: tuple[FormedTeam, ...]
    excluded: tuple[Participant, ...]
    summary: FormationSummary

    def as_dict(self) -> dict[str, Any]:
        return {
            "teams": [team.as_dict() for team in self.teams],
            "excluded_participant_ids": [participant.participant_id for participant in self.excluded],
            "summary": self.summary.as_dict(),
        }


def form_teams(
    participants: Sequence[Participant],
    team_size: int,
    rating_type: RatingType,
    *,
    parameters: FormationParameters | None = None,
    on_event: EventCallback | None = None,
    rng: random.Random | None = None,
) -> FormationResult:
    """Split a participant snapshot into balanced teams with captains.

    Without ``rng`` the pool is ranked by rating (ties keep input order) and the
    lowest-rated remainder sits out. With ``rng`` the pool is shuffled instead,
    so who sits out and the seeding order are random but reproducible for a
    seeded generator.

    Raises ``InsufficientParticipants`` when not even one team can be formed and
    ``InsufficientTeamsForBracket`` when fewer than ``parameters.min_teams``
    teams can. No partial result is ever returned.
    """
    params = parameters or FormationParameters()
    rating_type = RatingType(rating_type)
    if team_size < 2:
        raise ValueError("team_size must be >= 2")

    id_counts = Counter(participant.participant_id for participant in participants)
    duplicates = sorted(pid for pid, count in id_counts.items() if count > 1)
    if duplicates:
        raise ValueError(f"Duplicate participant ids: {duplicates}")

    total = len(participants)
    if total < team_size:
        raise InsufficientParticipants(required=team_size, actual=total)

    full_teams = total // team_size
    if full_teams < params.min_teams:
        raise InsufficientTeamsForBracket(
            required=params.min_teams * team_size,
            actual=total,
            min_teams=params.min_teams,
        )

    if on_event is not None:
        for participant in participants:
            resolution = resolve_rating(participant, rating_type)
            on_event(
                RatingResolved(
                    participant_id=participant.participant_id,
                    name=participant.name,
                    rating_type=rating_type,
                    rating=resolution.rating,
                    source=resolution.source,
                )
            )

    global_average = average_rating(participants, rating_type)
    placed_count = full_teams * team_size
    if rng is None:
        ranked = sort_by_rating(participants, rating_type)
    else:
        ranked = list(participants)
        rng.shuffle(ranked)
    placed, excluded = ranked[:placed_count], ranked[placed_count:]

    if team_size == 2:
        algorithm = FormationAlgorithm.OPTIMAL_PAIRS
        drafts = form_pairs(placed, rating_type, global_average)
    else:
        algorithm = FormationAlgorithm.SMART_SNAKE
        drafts = form_snake_teams(placed, team_size, rating_type)

    if on_event is not None:
        on_event(
            TeamsSeeded(
                algorithm=algorithm,
                team_count=len(drafts),
                placed=placed_count,
                excluded=len(excluded),
                global_average=global_average,
                shuffled=rng is not None,
            )
        )

    initial = check_team_balance(drafts, rating_type, global_average, params.balance_target_percent)
    outcome = optimize_balance(
        drafts,
        rating_type,
        global_average,
        params.max_iterations,
        target_percent=params.balance_target_percent,
        on_event=on_event,
    )

    teams = tuple(
        _finalize_team(index, draft, rating_type, on_event)
        for index, draft in enumerate(outcome.teams)
    )

    summary = FormationSummary(
        total_participants=total,
        participants_in_teams=placed_count,
        participants_not_in_teams=len(excluded),
        teams_created=len(teams),
        team_size=team_size,
        rating_type=rating_type,
        algorithm=algorithm,
        global_average=global_average,
        initial_balance_percent=initial.balance_percent,
        balance_percent=outcome.balance_percent,
        balance_iterations=outcome.iterations,
        is_balanced=outcome.balance_percent <= params.balance_target_percent,
        shuffled=rng is not None,
        captain_stats=_captain_stats(teams),
    )
    return FormationResult(teams=teams, excluded=tuple(excluded), summary=summary)


def _finalize_team(
    index: int,
    draft: TeamDraft,
    rating_type: RatingType,
    on_event: EventCallback | None,
) -> FormedTeam:
    selection = select_captain(draft.members, rating_type)
    if selection.captain is None or selection.rating is None:
        raise EmptyTeamCaptainSelection(index)

    captain = selection.captain
    captain_name = captain.name.strip()
    name = f"{captain_name} team" if captain_name else f"Team {index + 1}"

    members = tuple(
        TeamMember(
            participant=member,
            rating=normalize_rating(member, rating_type),
            faceit_rating=normalize_rating(member, RatingType.FACEIT),
            premier_rating=normalize_rating(member, RatingType.PREMIER),
            is_captain=member is captain,
        )
        for member in draft.members
    )

    if on_event is not None:
        on_event(
            CaptainAssigned(
                team_index=index,
                team_name=name,
                participant_id=captain.participant_id,
                rating=selection.rating,
                used_manual_rating=selection.used_manual_rating,
            )
        )

    return FormedTeam(
        name=name,
        members=members,
        average_rating=average_rating(draft.members, rating_type),
        average_faceit_rating=average_rating(draft.members, RatingType.FACEIT),
        average_premier_rating=average_rating(draft.members, RatingType.PREMIER),
        captain=captain,
        captain_rating=selection.rating,
        captain_used_manual_rating=selection.used_manual_rating,
    )


def _captain_stats(teams: Sequence[FormedTeam]) -> CaptainStats:
    ratings = [team.captain_rating for team in teams]
    if not ratings:
        return CaptainStats(total=0, with_manual_rating=0, min_rating=0, avg_rating=0.0, max_rating=0)
    return CaptainStats(
        total=len(ratings),
        with_manual_rating=sum(1 for team in teams if team.captain_used_manual_rating),
        min_rating=min(ratings),
        avg_rating=sum(ratings) / len(ratings),
        max_rating=max(ratings),
    )


__all__ = [
    "CaptainStats",
    "FormationResult",
    "FormationSummary",
    "FormedTeam",
    "TeamMember",
    "form_teams",
]
