"""Read-only participant snapshots for mix-team formation."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Boolean, Column, Integer, MetaData, String, Table, func, select
from sqlalchemy.orm import Session

from domain.mix.common import Participant, participant_from_mapping
from domain.mix.protocol import RatingType

DEFAULT_TEAM_SIZE = 5

_metadata = MetaData()

_tournaments = Table(
    "tournaments",
    _metadata,
    Column("id", Integer),
    Column("name", String),
    Column("format", String),
    Column("team_size", Integer),
    Column("mix_rating_type", String),
)

_participants = Table(
    "tournament_participants",
    _metadata,
    Column("id", Integer),
    Column("tournament_id", Integer),
    Column("user_id", Integer),
    Column("name", String),
    Column("in_team", Boolean),
    Column("faceit_elo", Integer),
    Column("cs2_premier_rank", Integer),
    Column("faceit_rating", Integer),
    Column("premier_rank", Integer),
    Column("premier_rating", Integer),
)

_users = Table(
    "users",
    _metadata,
    Column("id", Integer),
    Column("username", String),
    Column("faceit_elo", Integer),
    Column("cs2_premier_rank", Integer),
    Column("faceit_rating", Integer),
    Column("premier_rating", Integer),
)


@dataclass(frozen=True)
class MixSettings:
    tournament_id: int
    name: str
    team_size: int
    rating_type: RatingType


@dataclass(frozen=True)
class ParticipantRoster:
    """All registrations split by whether they already sit in a team."""

    all: tuple[Participant, ...]
    in_team: tuple[Participant, ...]
    not_in_team: tuple[Participant, ...]


def fetch_mix_settings(session: Session, tournament_id: int) -> MixSettings:
    """Load team size and rating type for a mix tournament."""
    row = (
        session.execute(
            select(
                _tournaments.c.id,
                _tournaments.c.name,
                _tournaments.c.format,
                _tournaments.c.team_size,
                _tournaments.c.mix_rating_type,
            ).where(_tournaments.c.id == tournament_id)
        )
        .mappings()
        .first()
    )
    if row is None:
        raise LookupError(f"tournament_id={tournament_id} not found")
    if row["format"] != "mix":
        raise ValueError(
            f"tournament_id={tournament_id} has format={row['format']!r}; "
            "team formation is only available for mix tournaments"
        )

    team_size = row["team_size"] or DEFAULT_TEAM_SIZE
    rating_type_value = (row["mix_rating_type"] or RatingType.FACEIT.value).strip().lower()
    try:
        rating_type = RatingType(rating_type_value)
    except ValueError as exc:
        raise ValueError(
            f"tournament_id={tournament_id} has unsupported mix_rating_type={rating_type_value!r}"
        ) from exc

    return MixSettings(
        tournament_id=int(row["id"]),
        name=str(row["name"] or ""),
        team_size=int(team_size),
        rating_type=rating_type,
    )


def fetch_tournament_participants(session: Session, tournament_id: int) -> list[Participant]:
    """Fetch every registration for a tournament joined with profile ratings, by id."""
    statement = (
        select(
            _participants.c.id.label("participant_id"),
            _participants.c.user_id,
            func.coalesce(_participants.c.name, _users.c.username).label("name"),
            func.coalesce(_participants.c.in_team, False).label("in_team"),
            _participants.c.faceit_elo,
            _participants.c.cs2_premier_rank,
            _participants.c.faceit_rating,
            _participants.c.premier_rank,
            _participants.c.premier_rating,
            _users.c.faceit_elo.label("user_faceit_elo"),
            _users.c.cs2_premier_rank.label("user_premier_rank"),
            _users.c.faceit_rating.label("user_faceit_rating"),
            _users.c.premier_rating.label("user_premier_rating"),
        )
        .select_from(_participants.outerjoin(_users, _participants.c.user_id == _users.c.id))
        .where(_participants.c.tournament_id == tournament_id)
        .order_by(_participants.c.id)
    )

    rows = session.execute(statement).mappings().all()
    return [participant_from_mapping(dict(row)) for row in rows]


def fetch_participant_roster(session: Session, tournament_id: int) -> ParticipantRoster:
    participants = fetch_tournament_participants(session, tournament_id)
    return ParticipantRoster(
        all=tuple(participants),
        in_team=tuple(participant for participant in participants if participant.in_team),
        not_in_team=tuple(participant for participant in participants if not participant.in_team),
    )


__all__ = [
    "MixSettings",
    "ParticipantRoster",
    "fetch_mix_settings",
    "fetch_participant_roster",
    "fetch_tournament_participants",
]
