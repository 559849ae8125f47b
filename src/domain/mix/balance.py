"""Team balance metric and the swap-based balancer."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.mix.common import TeamDraft
from domain.mix.events import BalanceFinished, EventCallback, SwapCommitted
from domain.mix.protocol import RatingType
from domain.mix.ratings import normalize_rating, team_average

DEFAULT_MAX_ITERATIONS = 50
DEFAULT_TARGET_PERCENT = 20.0


@dataclass(frozen=True)
class BalanceReport:
    team_averages: tuple[float, ...]
    min_average: float
    max_average: float
    balance_percent: float
    is_balanced: bool


@dataclass(frozen=True)
class BalanceOutcome:
    teams: list[TeamDraft]
    balance_percent: float
    iterations: int


def balance_percent_from_averages(averages: Sequence[float], global_average: float) -> float:
    """Spread between the best and worst team as a percentage of the global average."""
    if len(averages) < 2 or global_average <= 0:
        return 0.0
    return (max(averages) - min(averages)) / global_average * 100


def check_team_balance(
    teams: Sequence[TeamDraft],
    rating_type: RatingType,
    global_average: float,
    target_percent: float = DEFAULT_TARGET_PERCENT,
) -> BalanceReport:
    averages = tuple(team_average(team, rating_type) for team in teams)
    percent = balance_percent_from_averages(averages, global_average)
    return BalanceReport(
        team_averages=averages,
        min_average=min(averages, default=0.0),
        max_average=max(averages, default=0.0),
        balance_percent=percent,
        is_balanced=percent <= target_percent,
    )


def optimize_balance(
    teams: list[TeamDraft],
    rating_type: RatingType,
    global_average: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    *,
    target_percent: float = DEFAULT_TARGET_PERCENT,
    on_event: EventCallback | None = None,
) -> BalanceOutcome:
    """Hill-climb by swapping one player between the strongest and weakest team.

    Each iteration starts from the strong team's lowest-rated member and the weak
    team's highest-rated member and commits the first swap that lowers the
    balance percentage. Iterations without a swap still count toward
    ``max_iterations``. Balance therefore never gets worse, but skewed
    pools can stall above ``target_percent``. ``teams`` is modified in place.
    """
    if max_iterations < 0:
        raise ValueError("max_iterations must be >= 0")

    iterations = 0
    for iteration in range(1, max_iterations + 1):
        averages = [team_average(team, rating_type) for team in teams]
        current = balance_percent_from_averages(averages, global_average)
        if current <= target_percent:
            break
        iterations = iteration

        strong_index = averages.index(max(averages))
        weak_index = averages.index(min(averages))
        strong_team = teams[strong_index]
        weak_team = teams[weak_index]

        swap = _find_improving_swap(
            strong_team,
            weak_team,
            rating_type,
            averages=averages,
            strong_index=strong_index,
            weak_index=weak_index,
            global_average=global_average,
            current=current,
        )
        if swap is None:
            continue

        strong_slot, weak_slot, trial = swap
        outgoing = strong_team.members[strong_slot]
        incoming = weak_team.members[weak_slot]
        strong_team.members[strong_slot] = incoming
        weak_team.members[weak_slot] = outgoing
        if on_event is not None:
            on_event(
                SwapCommitted(
                    iteration=iteration,
                    strong_team_index=strong_index,
                    weak_team_index=weak_index,
                    outgoing_participant_id=outgoing.participant_id,
                    incoming_participant_id=incoming.participant_id,
                    balance_before=current,
                    balance_after=trial,
                )
            )

    final = check_team_balance(teams, rating_type, global_average, target_percent)
    if on_event is not None:
        on_event(
            BalanceFinished(
                balance_percent=final.balance_percent,
                iterations=iterations,
                target_percent=target_percent,
            )
        )
    return BalanceOutcome(teams=teams, balance_percent=final.balance_percent, iterations=iterations)


def _find_improving_swap(
    strong_team: TeamDraft,
    weak_team: TeamDraft,
    rating_type: RatingType,
    *,
    averages: Sequence[float],
    strong_index: int,
    weak_index: int,
    global_average: float,
    current: float,
) -> tuple[int, int, float] | None:
    """First (strong slot, weak slot, new balance) that strictly lowers the balance.

    Strong-team members are tried weakest first and weak-team members strongest
    first; only swaps that move rating from the strong team to the weak one
    are simulated.
    """
    strong_ratings = [normalize_rating(member, rating_type) for member in strong_team.members]
    weak_ratings = [normalize_rating(member, rating_type) for member in weak_team.members]
    strong_total = sum(strong_ratings)
    weak_total = sum(weak_ratings)

    strong_slots = sorted(range(len(strong_ratings)), key=lambda slot: strong_ratings[slot])
    weak_slots = sorted(range(len(weak_ratings)), key=lambda slot: weak_ratings[slot], reverse=True)

    trial_averages = list(averages)
    for strong_slot in strong_slots:
        for weak_slot in weak_slots:
            delta = strong_ratings[strong_slot] - weak_ratings[weak_slot]
            if delta <= 0:
                continue

            trial_averages[strong_index] = (strong_total - delta) / len(strong_ratings)
            trial_averages[weak_index] = (weak_total + delta) / len(weak_ratings)
            trial = balance_percent_from_averages(trial_averages, global_average)
            if trial < current:
                return strong_slot, weak_slot, trial

    return None


__all__ = [
    "BalanceOutcome",
    "BalanceReport",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_TARGET_PERCENT",
    "balance_percent_from_averages",
    "check_team_balance",
    "optimize_balance",
]
