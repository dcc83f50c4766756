"""
D10 Analytics KPI Derivation

Headline metrics for the score dashboard: average score per entity type,
lead conversion rate, their change against a baseline, and the trend
direction of that change.

Trend uses a fixed +/-2% deadband: a change of exactly 2% is still flat.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from core.logging import get_logger
from core.utils import clamp, first_by_key, safe_divide
from d5_scoring.tiers import ScoreTierClassifier

from .constants import BASELINE_RATIOS, CONVERTED_STATUSES, TREND_DEADBAND_PERCENT
from .schemas import KPI, AggregateRecord, SourceConversion, TrendDirection

logger = get_logger(__name__, domain="d10_analytics")

AveragesInput = Union[Mapping[str, Optional[float]], Iterable[AggregateRecord]]
CountsInput = Union[Mapping[str, int], Iterable[AggregateRecord]]


def percentage_change(current: float, previous: Optional[float]) -> float:
    """Change from previous to current in percent; 0 when there is no previous value"""
    if not previous:
        return 0.0
    return (current - previous) * 100 / previous


def classify_trend(change: float) -> TrendDirection:
    """Up above +2%, down below -2%, flat otherwise"""
    if change > TREND_DEADBAND_PERCENT:
        return TrendDirection.UP
    if change < -TREND_DEADBAND_PERCENT:
        return TrendDirection.DOWN
    return TrendDirection.FLAT


def lead_status_counts(data: CountsInput) -> Dict[str, int]:
    """Lead counts per status from a mapping or from records keyed by {status}"""
    if isinstance(data, Mapping):
        return {str(status): int(count or 0) for status, count in data.items()}

    keyed = [record for record in data if record.dimension("status") is not None]
    index = first_by_key(keyed, lambda record: record.dimension("status"))
    return {str(status): record.count for status, record in index.items()}


def averages_by_type(data: AveragesInput) -> Dict[str, Optional[float]]:
    """Average score per entity type from a mapping or from records keyed by {type}"""
    if isinstance(data, Mapping):
        return dict(data)

    keyed = [record for record in data if record.dimension("type") is not None]
    index = first_by_key(keyed, lambda record: record.dimension("type"))
    return {str(entity): record.average_score for entity, record in index.items()}


def conversion_rate(counts: CountsInput) -> float:
    """
    Share of leads in closed, qualified or negotiation, in percent

    Returns 0 when there are no leads at all.
    """
    counts = lead_status_counts(counts)
    total = sum(counts.values())
    converted = sum(counts.get(status, 0) for status in CONVERTED_STATUSES)
    return safe_divide(converted * 100, total)


def conversion_by_source(records: Iterable[AggregateRecord]) -> List[SourceConversion]:
    """Conversion rate per lead source, from records keyed by {source}"""
    keyed = [record for record in records if record.dimension("source") is not None]
    index = first_by_key(keyed, lambda record: record.dimension("source"))

    rows = []
    for source, record in index.items():
        converted = record.converted or 0
        rows.append(
            SourceConversion(
                source=source,
                count=record.count,
                converted=converted,
                average_score=record.average_score,
                conversion_rate=safe_divide(converted * 100, record.count),
            )
        )
    return rows


class KPIDeriver:
    """
    Derives dashboard KPIs from aggregate data

    When no historical baseline is supplied, the previous value is a
    stand-in of the current value scaled by a fixed ratio; it is not a
    measured trend.
    """

    def __init__(
        self,
        classifier: Optional[ScoreTierClassifier] = None,
        baseline_ratios: Optional[Dict[str, float]] = None,
    ):
        self.classifier = classifier or ScoreTierClassifier()
        self.baseline_ratios = {**BASELINE_RATIOS, **(baseline_ratios or {})}

    def build_kpi(
        self,
        title: str,
        value: float,
        previous_value: Optional[float],
        baseline_key: str,
        unit: Optional[str] = None,
        is_score_value: bool = False,
        helper_text: str = "",
    ) -> KPI:
        """Assemble one KPI, filling in a stand-in baseline if needed"""
        if previous_value is None:
            previous_value = value * self.baseline_ratios[baseline_key]

        change = percentage_change(value, previous_value)
        return KPI(
            title=title,
            value=value,
            previous_value=previous_value,
            unit=unit,
            progress_value=clamp(value, 0.0, 100.0),
            trend=classify_trend(change),
            percentage_change=change,
            is_score_value=is_score_value,
            tier=self.classifier.classify(value) if is_score_value else None,
            helper_text=helper_text,
        )

    def derive(
        self,
        averages: AveragesInput,
        status_counts: CountsInput,
        baseline: Optional[Mapping[str, float]] = None,
    ) -> List[KPI]:
        """
        Derive the headline KPIs

        Args:
            averages: Average score per entity type
            status_counts: Lead count per status
            baseline: Optional measured previous values keyed by
                lead / property / agent / conversion

        Returns:
            Average Lead Score, Conversion Rate, Avg. Property Score and
            Agent Performance KPIs, in that order
        """
        averages = averages_by_type(averages)
        baseline = baseline or {}

        def average(entity: str) -> float:
            return averages.get(entity) or 0.0

        kpis = [
            self.build_kpi(
                "Average Lead Score",
                average("lead"),
                baseline.get("lead"),
                "lead",
                is_score_value=True,
                helper_text="Average score of all leads in the system",
            ),
            self.build_kpi(
                "Conversion Rate",
                conversion_rate(status_counts),
                baseline.get("conversion"),
                "conversion",
                unit="%",
                helper_text="Percentage of leads that convert to sales",
            ),
            self.build_kpi(
                "Avg. Property Score",
                average("property"),
                baseline.get("property"),
                "property",
                is_score_value=True,
                helper_text="Average score of all properties in the system",
            ),
            self.build_kpi(
                "Agent Performance",
                average("agent"),
                baseline.get("agent"),
                "agent",
                is_score_value=True,
                helper_text="Average performance score of all agents",
            ),
        ]

        logger.info(f"Derived {len(kpis)} KPIs", extra={"measured_baseline": bool(baseline)})
        return kpis


def derive(
    averages: AveragesInput,
    status_counts: CountsInput,
    baseline: Optional[Mapping[str, Any]] = None,
) -> List[KPI]:
    """Quick function to derive KPIs with the default classifier"""
    return KPIDeriver().derive(averages, status_counts, baseline)
