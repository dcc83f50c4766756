"""
Score Tier Classification

Maps a numeric score onto one of four display tiers (error, warning,
primary, success) together with the colour and gradient tokens the
presentation layer renders for it.

Boundaries are inclusive on the lower bound of each tier, so the tiers
cover the whole number line with no gaps or overlaps:

    success >= 80 > primary >= 60 > warning >= 40 > error
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from core.exceptions import InvalidRangeError, ValidationError
from core.logging import get_logger

from .constants import TIER_PRIMARY_MIN, TIER_SUCCESS_MIN, TIER_WARNING_MIN

logger = get_logger(__name__, domain="d5_scoring")


class ScoreTier(Enum):
    """Display tier for a score"""

    ERROR = "error"
    WARNING = "warning"
    PRIMARY = "primary"
    SUCCESS = "success"

    @property
    def rank(self) -> int:
        """Ordering rank (higher = better score)"""
        order = {
            ScoreTier.ERROR: 0,
            ScoreTier.WARNING: 1,
            ScoreTier.PRIMARY: 2,
            ScoreTier.SUCCESS: 3,
        }
        return order[self]

    @property
    def color(self) -> str:
        """Hex colour token for charts"""
        colors = {
            ScoreTier.SUCCESS: "#4caf50",
            ScoreTier.PRIMARY: "#3f51b5",
            ScoreTier.WARNING: "#ff9800",
            ScoreTier.ERROR: "#f44336",
        }
        return colors[self]

    @property
    def gradient(self) -> str:
        """Gradient token for progress bars"""
        gradients = {
            ScoreTier.SUCCESS: "linear-gradient(90deg, #4caf50 0%, #8bc34a 100%)",
            ScoreTier.PRIMARY: "linear-gradient(90deg, #3f51b5 0%, #2196f3 100%)",
            ScoreTier.WARNING: "linear-gradient(90deg, #ff9800 0%, #ffeb3b 100%)",
            ScoreTier.ERROR: "linear-gradient(90deg, #f44336 0%, #ff9800 100%)",
        }
        return gradients[self]

    @property
    def performance_label(self) -> str:
        """Adverb used when describing agent performance"""
        labels = {
            ScoreTier.SUCCESS: "excellently",
            ScoreTier.PRIMARY: "well",
            ScoreTier.WARNING: "adequately",
            ScoreTier.ERROR: "poorly",
        }
        return labels[self]


@dataclass(frozen=True)
class TierThreshold:
    """Inclusive lower bound of a tier"""

    tier: ScoreTier
    min_score: float


class ScoreTierClassifier:
    """
    Classifies scores into display tiers

    The thresholds are fixed by default; a custom set may be passed for
    experiments but must be strictly descending and end with ERROR as the
    catch-all tier.
    """

    def __init__(self, thresholds: List[TierThreshold] = None):
        self.thresholds = thresholds or [
            TierThreshold(ScoreTier.SUCCESS, TIER_SUCCESS_MIN),
            TierThreshold(ScoreTier.PRIMARY, TIER_PRIMARY_MIN),
            TierThreshold(ScoreTier.WARNING, TIER_WARNING_MIN),
        ]
        self._validate()

    def _validate(self):
        bounds = [threshold.min_score for threshold in self.thresholds]
        if any(lower >= upper for upper, lower in zip(bounds, bounds[1:])):
            raise ValidationError("Tier thresholds must be strictly descending", field="thresholds")
        if any(threshold.tier == ScoreTier.ERROR for threshold in self.thresholds):
            raise ValidationError("ERROR is the catch-all tier and takes no threshold", field="thresholds")

    def classify(self, score: float) -> ScoreTier:
        """
        Classify a score

        Scores outside [0, 100] are classified with the same thresholds.

        Raises:
            InvalidRangeError: If score is NaN
        """
        if math.isnan(score):
            raise InvalidRangeError("score", score, 0, 100)

        for threshold in self.thresholds:
            if score >= threshold.min_score:
                return threshold.tier
        return ScoreTier.ERROR

    def distribution(self, scores: List[float]) -> Dict[ScoreTier, int]:
        """Count scores per tier"""
        counts = {tier: 0 for tier in ScoreTier}
        for score in scores:
            counts[self.classify(score)] += 1
        logger.debug(f"Classified {len(scores)} scores into tiers")
        return counts


_default_classifier = ScoreTierClassifier()


def classify_score(score: float) -> ScoreTier:
    """Classify a score with the standard thresholds"""
    return _default_classifier.classify(score)


def performance_label(score: float) -> str:
    """Describe a score as excellently / well / adequately / poorly"""
    return classify_score(score).performance_label
