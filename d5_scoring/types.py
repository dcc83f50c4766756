"""
Scoring Types and Enumerations

Type definitions for the scoring system: entity kinds, the categorical
vocabularies carried on score records, and the immutable factor breakdown
that explains a composite score.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from core.exceptions import ValidationError

from .constants import MAX_SCORE, MIN_SCORE, WEIGHT_SUM_TOLERANCE


class EntityType(Enum):
    """Kinds of entity that carry a composite score"""

    LEAD = "lead"
    PROPERTY = "property"
    AGENT = "agent"

    @classmethod
    def parse(cls, value: Any) -> "EntityType":
        """Accept an EntityType or its string value"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            allowed = [member.value for member in cls]
            raise ValidationError(
                f"Invalid entity type {value!r}. Must be one of: {allowed}",
                field="entity_type",
            )


class LeadStatus(Enum):
    """Pipeline stage of a lead"""

    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    NEGOTIATION = "negotiation"
    CLOSED = "closed"
    LOST = "lost"

    @property
    def is_converted(self) -> bool:
        """Stages counted as converted in conversion-rate KPIs"""
        return self in (LeadStatus.QUALIFIED, LeadStatus.NEGOTIATION, LeadStatus.CLOSED)


class LeadSource(Enum):
    """Where a lead came from"""

    WEBSITE = "website"
    REFERRAL = "referral"
    SOCIAL = "social"
    ADVERTISEMENT = "advertisement"
    DIRECT = "direct"
    OTHER = "other"


class PropertyType(Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    LAND = "land"


class PropertyStatus(Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"


class AgentPeriod(Enum):
    """Evaluation window for an agent score"""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class Factor:
    """A named, weighted sub-score contributing to a composite score"""

    name: str
    weight: float
    value: float

    @property
    def contribution(self) -> float:
        """Weighted contribution to the composite score"""
        return self.weight * self.value

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "weight": self.weight, "value": self.value}


@dataclass(frozen=True)
class FactorBreakdown:
    """
    Immutable, ordered set of factors explaining a composite score

    The breakdown remembers the target it was synthesized for and how far
    the final factor had to be clamped to stay within bounds, so callers
    can see how closely the realized weighted sum tracks the target.
    """

    factors: Tuple[Factor, ...]
    target_score: float
    clamp_adjustment: float = 0.0

    def __iter__(self) -> Iterator[Factor]:
        return iter(self.factors)

    def __len__(self) -> int:
        return len(self.factors)

    @property
    def names(self) -> List[str]:
        return [factor.name for factor in self.factors]

    @property
    def total_weight(self) -> float:
        return math.fsum(factor.weight for factor in self.factors)

    @property
    def weighted_sum(self) -> float:
        """Composite score realized by the factor values"""
        return math.fsum(factor.contribution for factor in self.factors)

    @property
    def deviation(self) -> float:
        """Absolute gap between the realized weighted sum and the target"""
        return abs(self.weighted_sum - self.target_score)

    def get(self, name: str) -> Optional[Factor]:
        for factor in self.factors:
            if factor.name == name:
                return factor
        return None

    def validate(self, tolerance: Optional[float] = None) -> None:
        """
        Check the breakdown invariants

        Args:
            tolerance: Allowed |weighted_sum - target_score|; skipped when None

        Raises:
            ValidationError: If any invariant is broken
        """
        if not self.factors:
            raise ValidationError("Breakdown must contain at least one factor", field="factors")

        names = self.names
        if len(set(names)) != len(names):
            raise ValidationError("Factor names must be unique", field="factors", names=names)

        for factor in self.factors:
            if not 0 < factor.weight <= 1:
                raise ValidationError(
                    f"Factor '{factor.name}' weight {factor.weight} outside (0, 1]", field="weight"
                )
            if not MIN_SCORE <= factor.value <= MAX_SCORE:
                raise ValidationError(
                    f"Factor '{factor.name}' value {factor.value} outside [0, 100]", field="value"
                )

        if abs(self.total_weight - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValidationError(
                f"Factor weights sum to {self.total_weight}, expected 1", field="weight"
            )

        if tolerance is not None and self.deviation > tolerance:
            raise ValidationError(
                f"Weighted sum {self.weighted_sum:.3f} deviates from target {self.target_score} "
                f"by more than {tolerance}",
                field="factors",
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_score": self.target_score,
            "weighted_sum": round(self.weighted_sum, 4),
            "clamp_adjustment": self.clamp_adjustment,
            "factors": [factor.to_dict() for factor in self.factors],
        }
