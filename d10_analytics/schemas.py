"""
Analytics Schemas

Pydantic models for the aggregate records handed over by the aggregation
backend, the dense chart-ready series built from them, and the derived KPIs.

Gap-filling is typed: count fields are plain ints that default to 0
(no observations), average fields are Optional[float] that default to None
(undefined). The two must never be collapsed into one default.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ValidationError
from d5_scoring.tiers import ScoreTier

DimensionValue = Union[int, str]

# Backend (camelCase) name -> record field for the optional per-group values
SOURCE_FIELDS = {
    "averageScore": "average_score",
    "converted": "converted",
    "highScores": "high_scores",
    "mediumScores": "medium_scores",
    "lowScores": "low_scores",
    "averagePrice": "average_price",
}


class AggregateRecord(BaseModel):
    """A pre-grouped count/average keyed by one or more dimension values"""

    model_config = ConfigDict(frozen=True)

    key: Dict[str, Optional[DimensionValue]] = Field(default_factory=dict, description="Composite key dimensions")
    count: int = Field(default=0, ge=0, description="Number of observations in the group")
    average_score: Optional[float] = Field(default=None, description="Mean score of the group")
    converted: Optional[int] = Field(default=None, ge=0, description="Converted observations in the group")
    high_scores: Optional[int] = Field(default=None, ge=0, description="Observations scoring 80 or more")
    medium_scores: Optional[int] = Field(default=None, ge=0, description="Observations scoring 50 to 79")
    low_scores: Optional[int] = Field(default=None, ge=0, description="Observations scoring below 50")
    average_price: Optional[float] = Field(default=None, description="Mean listing price of the group")

    def matches(self, **dimensions: DimensionValue) -> bool:
        """Exact equality on every requested dimension"""
        return all(name in self.key and self.key[name] == value for name, value in dimensions.items())

    def dimension(self, name: str) -> Optional[DimensionValue]:
        return self.key.get(name)

    @classmethod
    def from_source(cls, raw: Dict[str, Any], dimension: str = "category") -> "AggregateRecord":
        """
        Build a record from the backend's `{_id, count, averageScore}` shape

        A mapping `_id` becomes the composite key as is; a scalar `_id` becomes
        a single-dimension key named by `dimension`. A null dimension value is
        kept as None and never matches a lookup.

        Raises:
            ValidationError: If the record cannot be read (e.g. a negative count)
        """
        identity = raw.get("_id", raw.get("key"))
        if isinstance(identity, dict):
            key = dict(identity)
        elif identity is None:
            key = {}
        else:
            key = {dimension: identity}

        fields = {"key": key, "count": raw.get("count") or 0}
        for source_name, field_name in SOURCE_FIELDS.items():
            value = raw.get(source_name, raw.get(field_name))
            if value is not None:
                fields[field_name] = value

        try:
            return cls(**fields)
        except PydanticValidationError as e:
            first = e.errors()[0]
            raise ValidationError(
                f"Malformed aggregate record: {first['msg']}",
                field=".".join(str(part) for part in first["loc"]),
                key=key,
            ) from e


class ScoreStats(BaseModel):
    """The aggregate collections behind the score dashboard"""

    average_scores: List[AggregateRecord] = Field(default_factory=list, description="Keyed by {type}")
    lead_stats: List[AggregateRecord] = Field(default_factory=list, description="Keyed by {status}")
    property_stats: List[AggregateRecord] = Field(default_factory=list, description="Keyed by {type}")
    agent_stats: List[AggregateRecord] = Field(default_factory=list, description="Keyed by {period}")
    score_trend: List[AggregateRecord] = Field(default_factory=list, description="Keyed by {month, year, type}")
    score_distribution: List[AggregateRecord] = Field(default_factory=list, description="Keyed by {range, type}")

    @classmethod
    def from_source(cls, payload: Dict[str, Any]) -> "ScoreStats":
        """Parse a backend stats payload (camelCase or snake_case collection names)"""
        collections = {
            "average_scores": ("averageScores", "type"),
            "lead_stats": ("leadStats", "status"),
            "property_stats": ("propertyStats", "type"),
            "agent_stats": ("agentStats", "period"),
            "score_trend": ("scoreTrend", "category"),
            "score_distribution": ("scoreDistribution", "category"),
        }

        parsed = {}
        for field_name, (source_name, dimension) in collections.items():
            raw_items = payload.get(source_name, payload.get(field_name)) or []
            parsed[field_name] = [
                item if isinstance(item, AggregateRecord) else AggregateRecord.from_source(item, dimension)
                for item in raw_items
            ]
        return cls(**parsed)


class RangeDistributionRow(BaseModel):
    """One score range with a count per entity type (absent = 0)"""

    range: str
    lead: int = 0
    property: int = 0
    agent: int = 0


class TrendRow(BaseModel):
    """One calendar month with an average per entity type (absent = None)"""

    month: str = Field(..., description="Short month name")
    month_number: int = Field(..., ge=1, le=12)
    year: int
    lead: Optional[float] = None
    property: Optional[float] = None
    agent: Optional[float] = None


class CategoryRow(BaseModel):
    """One status / type bucket with its display label"""

    category: Optional[DimensionValue] = None
    label: str
    count: int = 0
    average_score: Optional[float] = None


class DashboardSeries(BaseModel):
    """Every dense series the score dashboard renders"""

    score_distribution: List[RangeDistributionRow] = Field(default_factory=list)
    score_trend: List[TrendRow] = Field(default_factory=list)
    lead_status: List[CategoryRow] = Field(default_factory=list)
    property_types: List[CategoryRow] = Field(default_factory=list)


class TrendDirection(str, Enum):
    """Direction of a period-over-period change"""

    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class KPI(BaseModel):
    """A headline metric with its comparison baseline"""

    title: str
    value: float
    previous_value: float
    unit: Optional[str] = None
    progress_value: float = Field(..., ge=0, le=100)
    trend: TrendDirection
    percentage_change: float
    is_score_value: bool = False
    tier: Optional[ScoreTier] = None
    helper_text: str = ""


class SourceConversion(BaseModel):
    """Conversion figures for one lead source"""

    source: Optional[DimensionValue] = None
    count: int = 0
    converted: int = 0
    average_score: Optional[float] = None
    conversion_rate: float = 0.0
