"""Observability events emitted during a formation run.

Callers pass ``on_event`` to receive these; the engine never prints.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from domain.mix.protocol import FormationAlgorithm, RatingSource, RatingType


@dataclass(frozen=True)
class RatingResolved:
    participant_id: int
    name: str
    rating_type: RatingType
    rating: int
    source: RatingSource

    def describe(self) -> str:
        return (
            f"rating participant={self.participant_id} name={self.name!r} "
            f"type={self.rating_type.value} rating={self.rating} source={self.source.value}"
        )


@dataclass(frozen=True)
class TeamsSeeded:
    algorithm: FormationAlgorithm
    team_count: int
    placed: int
    excluded: int
    global_average: float
    shuffled: bool = False

    def describe(self) -> str:
        return (
            f"seeded algorithm={self.algorithm.value} teams={self.team_count} "
            f"placed={self.placed} excluded={self.excluded} "
            f"global_average={self.global_average:.2f} shuffled={'yes' if self.shuffled else 'no'}"
        )


@dataclass(frozen=True)
class SwapCommitted:
    iteration: int
    strong_team_index: int
    weak_team_index: int
    outgoing_participant_id: int
    incoming_participant_id: int
    balance_before: float
    balance_after: float

    def describe(self) -> str:
        return (
            f"swap iteration={self.iteration} "
            f"team{self.strong_team_index + 1}:{self.outgoing_participant_id} <-> "
            f"team{self.weak_team_index + 1}:{self.incoming_participant_id} "
            f"balance={self.balance_before:.2f}%->{self.balance_after:.2f}%"
        )


@dataclass(frozen=True)
class BalanceFinished:
    balance_percent: float
    iterations: int
    target_percent: float

    def describe(self) -> str:
        status = "balanced" if self.balance_percent <= self.target_percent else "above_target"
        return (
            f"balance final={self.balance_percent:.2f}% target={self.target_percent:.2f}% "
            f"iterations={self.iterations} status={status}"
        )


@dataclass(frozen=True)
class CaptainAssigned:
    team_index: int
    team_name: str
    participant_id: int
    rating: int
    used_manual_rating: bool

    def describe(self) -> str:
        manual = " manual" if self.used_manual_rating else ""
        return (
            f"captain team={self.team_name!r} participant={self.participant_id} "
            f"rating={self.rating}{manual}"
        )


FormationEvent = RatingResolved | TeamsSeeded | SwapCommitted | BalanceFinished | CaptainAssigned
EventCallback = Callable[[FormationEvent], None]


def echo_events(echo: Callable[[str], None]) -> EventCallback:
    """Adapt a plain line printer (for example ``typer.echo``) into an event callback."""

    def callback(event: FormationEvent) -> None:
        echo(event.describe())

    return callback


__all__ = [
    "BalanceFinished",
    "CaptainAssigned",
    "EventCallback",
    "FormationEvent",
    "RatingResolved",
    "SwapCommitted",
    "TeamsSeeded",
    "echo_events",
]
