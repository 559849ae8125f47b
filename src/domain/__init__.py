"""Domain modules for mix-team formation."""

from domain.mix.common import Participant
from domain.mix.protocol import FormationAlgorithm, RatingType

__all__ = ["FormationAlgorithm", "Participant", "RatingType"]
