"""Balanced mix-team formation."""

from domain.mix.balance import (
    BalanceOutcome,
    BalanceReport,
    check_team_balance,
    optimize_balance,
)
from domain.mix.captain import CaptainSelection, select_captain
from domain.mix.common import Participant, TeamDraft, participant_from_mapping, participants_from_json
from domain.mix.config import FormationParameters, FormationSystemConfig, load_formation_configs
from domain.mix.errors import (
    EmptyTeamCaptainSelection,
    InsufficientParticipants,
    InsufficientTeamsForBracket,
    TeamFormationError,
)
from domain.mix.formation import (
    CaptainStats,
    FormationResult,
    FormationSummary,
    FormedTeam,
    TeamMember,
    form_teams,
)
from domain.mix.pairs import form_pairs
from domain.mix.protocol import FormationAlgorithm, RatingSource, RatingType
from domain.mix.ratings import RatingResolution, normalize_rating, resolve_rating
from domain.mix.snake import form_snake_teams

__all__ = [
    "BalanceOutcome",
    "BalanceReport",
    "CaptainSelection",
    "CaptainStats",
    "EmptyTeamCaptainSelection",
    "FormationAlgorithm",
    "FormationParameters",
    "FormationResult",
    "FormationSummary",
    "FormationSystemConfig",
    "FormedTeam",
    "InsufficientParticipants",
    "InsufficientTeamsForBracket",
    "Participant",
    "RatingResolution",
    "RatingSource",
    "RatingType",
    "TeamDraft",
    "TeamFormationError",
    "TeamMember",
    "check_team_balance",
    "form_pairs",
    "form_snake_teams",
    "form_teams",
    "load_formation_configs",
    "normalize_rating",
    "optimize_balance",
    "participant_from_mapping",
    "participants_from_json",
    "resolve_rating",
    "select_captain",
]
