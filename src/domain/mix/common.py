"""Shared types for mix-team formation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

RawRating = int | float | Decimal | str | None


@dataclass(frozen=True)
class Participant:
    """Snapshot of one tournament registration joined with its user profile.

    ``faceit_elo`` and ``cs2_premier_rank`` are entered manually against the
    registration; the ``user_*`` rank fields come from the profile. The
    remaining rating fields only exist for rows written by the old schema.
    """

    participant_id: int
    name: str
    user_id: int | None = None
    in_team: bool = False
    faceit_elo: RawRating = None
    cs2_premier_rank: RawRating = None
    user_faceit_elo: RawRating = None
    user_premier_rank: RawRating = None
    faceit_rating: RawRating = None
    user_faceit_rating: RawRating = None
    premier_rank: RawRating = None
    premier_rating: RawRating = None
    user_premier_rating: RawRating = None


_PARTICIPANT_RATING_FIELDS = (
    "faceit_elo",
    "cs2_premier_rank",
    "user_faceit_elo",
    "user_premier_rank",
    "faceit_rating",
    "user_faceit_rating",
    "premier_rank",
    "premier_rating",
    "user_premier_rating",
)


def participant_from_mapping(row: dict[str, Any]) -> Participant:
    """Build a participant from a loosely-typed mapping (JSON object or DB row)."""
    participant_id = row.get("participant_id", row.get("id"))
    if participant_id is None:
        raise ValueError(f"participant row is missing participant_id: {row!r}")

    name = row.get("name") or row.get("username") or ""
    user_id = row.get("user_id")
    return Participant(
        participant_id=int(participant_id),
        name=str(name),
        user_id=None if user_id is None else int(user_id),
        in_team=bool(row.get("in_team", False)),
        **{field_name: row.get(field_name) for field_name in _PARTICIPANT_RATING_FIELDS},
    )


def participants_from_json(text: str) -> list[Participant]:
    """Parse a JSON array of participant objects, or ``{"participants": [...]}``."""
    payload = json.loads(text)
    if isinstance(payload, dict):
        payload = payload.get("participants")
    if not isinstance(payload, list):
        raise ValueError("expected a JSON array of participants")

    participants = [participant_from_mapping(row) for row in payload]
    ids = [participant.participant_id for participant in participants]
    if len(ids) != len(set(ids)):
        raise ValueError(f"Duplicate participant ids in payload: {ids}")
    return participants


@dataclass
class TeamDraft:
    """Mutable team used while seeding and balancing.

    Totals are derived from ``members`` on access so they stay correct after
    every swap.
    """

    members: list[Participant] = field(default_factory=list)

    def add(self, participant: Participant) -> None:
        self.members.append(participant)

    def member_ids(self) -> list[int]:
        return [member.participant_id for member in self.members]

    def __len__(self) -> int:
        return len(self.members)


__all__ = [
    "Participant",
    "RawRating",
    "TeamDraft",
    "participant_from_mapping",
    "participants_from_json",
]
