"""
Constrained Factor Synthesis

Generates a breakdown of weighted sub-factors that reproduces a target
composite score:

- weights are drawn at random, normalized and quantized to hundredths so
  that they always sum to exactly 1.00 with every factor keeping a weight
  of at least 0.01
- values for all but the last factor are drawn from the range that keeps
  the rest of the target reachable inside [0, 100]
- the last value is solved exactly from what is left and clamped

The only sources of deviation between the realized weighted sum and the
target are display rounding of the values (one decimal) and the final
clamp, which together stay within SYNTHESIS_TOLERANCE.
"""

import math
import random
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import yaml

from core.config import settings
from core.exceptions import (
    ConfigurationError,
    InsufficientVocabularyError,
    InvalidRangeError,
    ValidationError,
)
from core.logging import get_logger
from core.utils import clamp, is_finite_number, round_half_up

from .constants import MAX_SCORE, MIN_SCORE, VALUE_PRECISION, WEIGHT_UNITS
from .types import EntityType, Factor, FactorBreakdown

logger = get_logger(__name__, domain="d5_scoring")


@lru_cache(maxsize=4)
def _load_vocabularies(path: str) -> Dict[str, Any]:
    """Load factor vocabularies from YAML."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Factor vocabulary file not found: {path}", setting="factor_vocabulary_path")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid factor vocabulary file {path}: {e}", setting="factor_vocabulary_path")

    if not isinstance(data, dict) or not data.get("default"):
        raise ConfigurationError(f"Factor vocabulary file {path} has no 'default' list")

    lists = [data["default"], *(data.get("entities") or {}).values()]
    for names in lists:
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Duplicate factor names in {path}: {names}")

    return data


def load_factor_vocabulary(
    entity_type: Union[EntityType, str, None] = None, path: Union[str, Path, None] = None
) -> Tuple[str, ...]:
    """
    Get the factor names for an entity type

    Falls back to the default vocabulary when the entity has no list of
    its own.
    """
    data = _load_vocabularies(str(path or settings.vocabulary_path))

    if entity_type is not None:
        entity = EntityType.parse(entity_type)
        names = (data.get("entities") or {}).get(entity.value)
        if names:
            return tuple(names)

    return tuple(data["default"])


def normalize_weights(raw_weights: Sequence[float]) -> List[float]:
    """
    Scale nonnegative weights so they sum to 1

    The last weight takes whatever is left so the sum is exact rather than
    approximately 1. All-zero input falls back to equal weights.
    """
    count = len(raw_weights)
    total = math.fsum(raw_weights)
    if total <= 0:
        return [1.0 / count] * count

    shares = [weight / total for weight in raw_weights[:-1]]
    shares.append(max(0.0, 1.0 - math.fsum(shares)))
    return shares


def apportion_weights(shares: Sequence[float], units: int = WEIGHT_UNITS) -> List[float]:
    """
    Quantize normalized weights to 1/units steps

    Every factor gets one unit up front, the remaining units are shared out
    by largest remainder (ties go to the earlier factor). The result always
    sums to exactly `units` units and no weight rounds down to zero.
    """
    count = len(shares)
    if count > units:
        raise InvalidRangeError("count", count, 1, units)

    spare = units - count
    quotas = [share * spare for share in shares]
    allocation = [1 + math.floor(quota) for quota in quotas]

    leftover = max(0, units - sum(allocation))
    by_remainder = sorted(range(count), key=lambda i: (-(quotas[i] - math.floor(quotas[i])), i))
    for index in by_remainder[:leftover]:
        allocation[index] += 1

    return [units_given / units for units_given in allocation]


def value_bounds(remaining_target: float, weight: float, remaining_weight_after: float) -> Tuple[float, float]:
    """
    Range of values for a factor that keeps the rest of the target reachable

    After this factor takes `weight * value`, the factors still to come hold
    `remaining_weight_after` of the weight and can contribute anywhere in
    [0, 100 * remaining_weight_after]. The returned range is clamped to [0, 100].
    """
    if weight <= 0:
        return MIN_SCORE, MAX_SCORE

    low = (remaining_target - MAX_SCORE * remaining_weight_after) / weight
    high = remaining_target / weight
    return clamp(low, MIN_SCORE, MAX_SCORE), clamp(high, MIN_SCORE, MAX_SCORE)


def solve_final_value(target_score: float, spent: float, remaining_weight: float) -> float:
    """
    Exact value for the last factor, before clamping

    Args:
        target_score: Composite score to reproduce
        spent: Weighted sum already contributed by the earlier factors
        remaining_weight: Weight of the last factor

    Raises:
        ValidationError: If no weight is left to solve with
    """
    if remaining_weight <= 0:
        raise ValidationError("No weight left for the final factor", field="weight")
    return (target_score - spent) / remaining_weight


def composite_from_factors(factors: Iterable[Factor], precision: Optional[int] = None) -> float:
    """
    Re-derive a composite score from a factor breakdown

    Weighted sum divided by total weight, so breakdowns whose weights do not
    quite sum to one still produce a score on the 0-100 scale.
    """
    factors = list(factors)
    total_weight = math.fsum(factor.weight for factor in factors)
    if total_weight <= 0:
        return 0.0

    score = math.fsum(factor.contribution for factor in factors) / total_weight
    if precision is not None:
        return round_half_up(score, precision)
    return score


class FactorSynthesizer:
    """
    Produces factor breakdowns constrained to reproduce a target score

    Randomness comes only from the injected `random.Random`, so a seeded
    synthesizer replays the same breakdowns.
    """

    def __init__(
        self,
        vocabulary: Optional[Sequence[str]] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            vocabulary: Distinct factor names to draw from (default vocabulary if None)
            rng: Random source to use
            seed: Seed for a private random source when rng is not given
        """
        names = tuple(vocabulary) if vocabulary is not None else load_factor_vocabulary()
        if len(set(names)) != len(names):
            raise ValidationError("Factor vocabulary contains duplicate names", field="vocabulary")

        self.vocabulary = names
        if rng is not None:
            self.rng = rng
        else:
            self.rng = random.Random(seed if seed is not None else settings.random_seed)

    def _validate_request(self, count: int, target_score: float) -> None:
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise InvalidRangeError("count", count, 1)
        if not is_finite_number(target_score) or not MIN_SCORE <= target_score <= MAX_SCORE:
            raise InvalidRangeError("target_score", target_score, MIN_SCORE, MAX_SCORE)
        if count > len(self.vocabulary):
            raise InsufficientVocabularyError(count, len(self.vocabulary))

    def draw_weights(self, count: int) -> List[float]:
        """Random weights quantized to hundredths, summing to exactly 1"""
        raw = [self.rng.random() for _ in range(count)]
        return apportion_weights(normalize_weights(raw))

    def synthesize(self, count: int, target_score: float) -> FactorBreakdown:
        """
        Generate `count` weighted factors whose weighted sum reproduces `target_score`

        Raises:
            InvalidRangeError: count < 1 or target_score outside [0, 100]
            InsufficientVocabularyError: count exceeds the vocabulary size
        """
        self._validate_request(count, target_score)

        names = self.rng.sample(self.vocabulary, count)
        weights = self.draw_weights(count)

        values: List[float] = []
        spent = 0.0
        spent_weight = 0.0

        for weight in weights[:-1]:
            remaining_after = 1.0 - spent_weight - weight
            low, high = value_bounds(target_score - spent, weight, remaining_after)
            value = clamp(round_half_up(self.rng.uniform(low, high), VALUE_PRECISION), MIN_SCORE, MAX_SCORE)

            values.append(value)
            spent += weight * value
            spent_weight += weight

        remaining_weight = 1.0 - spent_weight
        solved = solve_final_value(target_score, spent, remaining_weight)
        final_value = clamp(solved, MIN_SCORE, MAX_SCORE)
        clamp_adjustment = abs(solved - final_value)
        if clamp_adjustment > 0:
            logger.debug(
                f"Clamped final factor by {clamp_adjustment:.4f} while synthesizing target {target_score}"
            )
        values.append(round_half_up(final_value, VALUE_PRECISION))

        breakdown = FactorBreakdown(
            factors=tuple(Factor(name=n, weight=w, value=v) for n, w, v in zip(names, weights, values)),
            target_score=float(target_score),
            clamp_adjustment=round(clamp_adjustment, 6),
        )

        logger.debug(
            f"Synthesized {count} factors for target {target_score} "
            f"(realized {breakdown.weighted_sum:.3f})"
        )
        return breakdown


def synthesize_factors(
    count: int,
    target_score: float,
    rng: Optional[random.Random] = None,
    vocabulary: Optional[Sequence[str]] = None,
) -> FactorBreakdown:
    """Quick function to synthesize a single breakdown"""
    return FactorSynthesizer(vocabulary=vocabulary, rng=rng).synthesize(count, target_score)
