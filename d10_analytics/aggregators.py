"""
D10 Analytics Aggregate Reshaping

Turns the sparse grouped records produced by the aggregation backend into
dense, display-ready series:

- score distribution: one row per canonical score range, counts per type
- score trend: one row per trailing calendar month, averages per type
- category distribution: one row per status / property-type record

Lookups match on exact equality of every key dimension. When the input
holds the same key twice, the first record in input order wins.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.config import settings
from core.logging import get_logger
from core.utils import trailing_months

from .constants import (
    LEAD_STATUS_LABELS,
    PROPERTY_TYPE_LABELS,
    SCORE_RANGES,
    SERIES_TYPES,
    UNKNOWN_RANGE,
)
from .schemas import (
    AggregateRecord,
    CategoryRow,
    DashboardSeries,
    RangeDistributionRow,
    ScoreStats,
    TrendRow,
)

logger = get_logger(__name__, domain="d10_analytics")


def score_range_label(score: float) -> str:
    """
    Canonical range bucket for a score

    Mirrors how the backend groups scores: each bucket is open at the top
    except the last, which includes 100. Anything else is "unknown".
    """
    if score < 0:
        return UNKNOWN_RANGE
    if score < 20:
        return SCORE_RANGES[0]
    if score < 40:
        return SCORE_RANGES[1]
    if score < 60:
        return SCORE_RANGES[2]
    if score < 80:
        return SCORE_RANGES[3]
    if score <= 100:
        return SCORE_RANGES[4]
    return UNKNOWN_RANGE


class AggregateReshaper:
    """
    Reshapes grouped aggregate records into dense chart series

    Stateless: the same input always yields the same output.
    """

    def __init__(self, trend_window_months: Optional[int] = None):
        self.trend_window_months = trend_window_months or settings.trend_window_months
        self.logger = logger.bind(component="AggregateReshaper")

    def index_records(
        self, records: Iterable[AggregateRecord], dimensions: Sequence[str]
    ) -> Dict[Tuple, AggregateRecord]:
        """
        Index records by the given key dimensions, first match wins

        Records missing any of the dimensions, or holding a null for one, are
        skipped.
        """
        index: Dict[Tuple, AggregateRecord] = {}
        for record in records:
            if any(record.key.get(name) is None for name in dimensions):
                continue
            key = tuple(record.key[name] for name in dimensions)
            if key in index:
                self.logger.debug(f"Ignoring duplicate aggregate key {dict(zip(dimensions, key))}")
                continue
            index[key] = record
        return index

    def range_distribution(self, records: Iterable[AggregateRecord]) -> List[RangeDistributionRow]:
        """
        Dense score distribution: 5 ranges x 3 types

        Missing combinations are 0: absence of a count means no observations.
        """
        index = self.index_records(records, ("range", "type"))

        rows = []
        for range_label in SCORE_RANGES:
            counts = {}
            for series in SERIES_TYPES:
                record = index.get((range_label, series))
                counts[series] = record.count if record is not None else 0
            rows.append(RangeDistributionRow(range=range_label, **counts))

        return rows

    def score_trend(
        self, records: Iterable[AggregateRecord], reference_date: Optional[date] = None
    ) -> List[TrendRow]:
        """
        Dense average-score trend over the trailing months

        The axis ends at the reference month (today by default). Missing
        combinations are None: an average over zero observations is undefined
        and must not be shown as a real zero.
        """
        reference = reference_date or date.today()
        index = self.index_records(records, ("month", "year", "type"))

        rows = []
        for label, month, year in trailing_months(reference, self.trend_window_months):
            averages = {}
            for series in SERIES_TYPES:
                record = index.get((month, year, series))
                averages[series] = record.average_score if record is not None else None
            rows.append(TrendRow(month=label, month_number=month, year=year, **averages))

        return rows

    def category_distribution(
        self,
        records: Iterable[AggregateRecord],
        dimension: str,
        labels: Optional[Dict[str, str]] = None,
    ) -> List[CategoryRow]:
        """
        One row per input record with its category relabelled for display

        Categories missing from `labels` pass through unchanged; count and
        average score are carried over verbatim.
        """
        labels = labels or {}

        rows = []
        for record in records:
            category = record.dimension(dimension)
            if category is None:
                label = "Unknown"
            else:
                label = labels.get(category, str(category))
            rows.append(
                CategoryRow(
                    category=category,
                    label=label,
                    count=record.count,
                    average_score=record.average_score,
                )
            )

        return rows

    def lead_status_distribution(self, records: Iterable[AggregateRecord]) -> List[CategoryRow]:
        return self.category_distribution(records, "status", LEAD_STATUS_LABELS)

    def property_type_distribution(self, records: Iterable[AggregateRecord]) -> List[CategoryRow]:
        return self.category_distribution(records, "type", PROPERTY_TYPE_LABELS)

    def reshape(self, stats: ScoreStats, reference_date: Optional[date] = None) -> DashboardSeries:
        """Build every dashboard series from one stats payload"""
        series = DashboardSeries(
            score_distribution=self.range_distribution(stats.score_distribution),
            score_trend=self.score_trend(stats.score_trend, reference_date),
            lead_status=self.lead_status_distribution(stats.lead_stats),
            property_types=self.property_type_distribution(stats.property_stats),
        )

        self.logger.info(
            f"Reshaped {len(stats.score_distribution)} distribution and "
            f"{len(stats.score_trend)} trend records into dashboard series"
        )
        return series


def reshape(stats: ScoreStats, reference_date: Optional[date] = None) -> DashboardSeries:
    """Quick function to reshape a stats payload with default settings"""
    return AggregateReshaper().reshape(stats, reference_date)
