"""Database repository helpers."""

from repositories.participants import (
    MixSettings,
    ParticipantRoster,
    fetch_mix_settings,
    fetch_participant_roster,
    fetch_tournament_participants,
)

__all__ = [
    "MixSettings",
    "ParticipantRoster",
    "fetch_mix_settings",
    "fetch_participant_roster",
    "fetch_tournament_participants",
]
