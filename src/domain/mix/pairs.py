"""Two-player team formation by greedy pairing."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.mix.common import Participant, TeamDraft
from domain.mix.protocol import RatingType
from domain.mix.ratings import normalize_rating


@dataclass(frozen=True)
class PairCandidate:
    first: Participant
    second: Participant
    combined_rating: int
    deviation: float


def build_pair_candidates(
    participants: Sequence[Participant],
    rating_type: RatingType,
    global_average: float,
) -> list[PairCandidate]:
    """Every unordered pair, ranked by distance from twice the global average.

    The sort is stable, so equal deviations keep (i, j) enumeration order.
    """
    target = global_average * 2
    ratings = [normalize_rating(participant, rating_type) for participant in participants]

    candidates: list[PairCandidate] = []
    for i in range(len(participants)):
        for j in range(i + 1, len(participants)):
            combined = ratings[i] + ratings[j]
            candidates.append(
                PairCandidate(
                    first=participants[i],
                    second=participants[j],
                    combined_rating=combined,
                    deviation=abs(combined - target),
                )
            )

    candidates.sort(key=lambda candidate: candidate.deviation)
    return candidates


def form_pairs(
    participants: Sequence[Participant],
    rating_type: RatingType,
    global_average: float,
) -> list[TeamDraft]:
    """Greedily commit the closest non-overlapping pairs.

    This approximates a minimum-deviation matching; it is not optimal.
    """
    pair_count = len(participants) // 2
    teams: list[TeamDraft] = []
    used_ids: set[int] = set()

    for candidate in build_pair_candidates(participants, rating_type, global_average):
        if len(teams) >= pair_count:
            break
        first_id = candidate.first.participant_id
        second_id = candidate.second.participant_id
        if first_id in used_ids or second_id in used_ids:
            continue

        teams.append(TeamDraft(members=[candidate.first, candidate.second]))
        used_ids.add(first_id)
        used_ids.add(second_id)

    return teams


__all__ = ["PairCandidate", "build_pair_candidates", "form_pairs"]
