"""Precondition failures raised by team formation."""

from __future__ import annotations


class TeamFormationError(Exception):
    """Base class for formation requests that cannot be satisfied."""


class InsufficientParticipants(TeamFormationError):
    """Not enough participants for the requested teams."""

    def __init__(self, required: int, actual: int, message: str | None = None) -> None:
        self.required = required
        self.actual = actual
        super().__init__(
            message
            or f"Not enough participants: need at least {required}, have {actual}"
        )

    @property
    def shortfall(self) -> int:
        return max(self.required - self.actual, 0)


class InsufficientTeamsForBracket(InsufficientParticipants):
    """Enough players for a team, but not for the teams a bracket needs."""

    def __init__(self, required: int, actual: int, *, min_teams: int = 2) -> None:
        self.min_teams = min_teams
        super().__init__(
            required,
            actual,
            f"Not enough participants for {min_teams} teams: "
            f"need at least {required}, have {actual}",
        )


class EmptyTeamCaptainSelection(AssertionError):
    """A seeded team came out empty; the seeding step is broken."""

    def __init__(self, team_index: int) -> None:
        self.team_index = team_index
        super().__init__(f"team index {team_index} has no members to pick a captain from")


__all__ = [
    "EmptyTeamCaptainSelection",
    "InsufficientParticipants",
    "InsufficientTeamsForBracket",
    "TeamFormationError",
]
