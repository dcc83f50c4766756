"""
D10 Analytics Module

Reshapes sparse score aggregates into dense dashboard series and derives
the headline KPIs shown above them.
"""

from .aggregators import AggregateReshaper, reshape, score_range_label
from .kpi import KPIDeriver, classify_trend, conversion_by_source, conversion_rate, derive, percentage_change
from .schemas import (
    KPI,
    AggregateRecord,
    CategoryRow,
    DashboardSeries,
    RangeDistributionRow,
    ScoreStats,
    SourceConversion,
    TrendDirection,
    TrendRow,
)

__version__ = "1.0.0"

__all__ = [
    # Reshaping
    "AggregateReshaper",
    "reshape",
    "score_range_label",
    # KPIs
    "KPIDeriver",
    "derive",
    "classify_trend",
    "conversion_rate",
    "conversion_by_source",
    "percentage_change",
    # Schemas
    "AggregateRecord",
    "ScoreStats",
    "RangeDistributionRow",
    "TrendRow",
    "CategoryRow",
    "DashboardSeries",
    "KPI",
    "TrendDirection",
    "SourceConversion",
]
