"""
Score Stats Generator

Generates synthetic aggregate collections in the shape the aggregation
backend returns them, so the reshaper and KPI derivation can run without a
backend. Trend averages rise gently across the trailing months.
"""

import random
from datetime import date
from typing import Dict, List, Optional, Tuple

from core.config import settings
from core.logging import get_logger
from core.utils import trailing_months
from d10_analytics.constants import SCORE_RANGES, SERIES_TYPES
from d10_analytics.schemas import AggregateRecord, ScoreStats

logger = get_logger(__name__, domain="generators")

# (count range, average score range) per category, inclusive
AVERAGE_SCORE_PROFILE: Dict[str, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    "lead": ((30, 79), (60, 75)),
    "property": ((20, 49), (70, 85)),
    "agent": ((10, 29), (65, 80)),
}

LEAD_STATUS_PROFILE: Dict[str, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    "new": ((10, 29), (50, 70)),
    "contacted": ((15, 29), (60, 75)),
    "qualified": ((8, 17), (70, 85)),
    "negotiation": ((5, 12), (75, 90)),
    "closed": ((3, 7), (80, 95)),
    "lost": ((5, 14), (40, 60)),
}

PROPERTY_TYPE_PROFILE: Dict[str, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    "residential": ((10, 29), (70, 85)),
    "commercial": ((5, 19), (75, 90)),
    "land": ((5, 14), (65, 80)),
}

AGENT_PERIOD_PROFILE: Dict[str, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    "monthly": ((10, 29), (65, 80)),
}

# Trend: (base low, base high, rise per month, count range)
TREND_PROFILE: Dict[str, Tuple[float, float, float, Tuple[int, int]]] = {
    "lead": (55, 65, 2.0, (5, 14)),
    "property": (65, 80, 1.0, (3, 7)),
    "agent": (60, 75, 1.5, (2, 6)),
}

DISTRIBUTION_COUNTS: Dict[str, Tuple[int, int]] = {
    "0-20": (1, 3),
    "21-40": (3, 7),
    "41-60": (5, 14),
    "61-80": (10, 24),
    "81-100": (5, 14),
}


class ScoreStatsGenerator:
    """Generates realistic, deterministic score aggregates"""

    def __init__(self, seed: Optional[int] = None, reference_date: Optional[date] = None):
        self.seed = seed if seed is not None else settings.random_seed
        self.random = random.Random(self.seed)
        self.reference_date = reference_date or date.today()
        self.trend_window_months = settings.trend_window_months

    def _score(self, low: float, high: float) -> int:
        """Random integer score between low and high"""
        return self.random.randint(int(low), int(high))

    def _category_records(
        self, profile: Dict[str, Tuple[Tuple[int, int], Tuple[int, int]]], dimension: str
    ) -> List[AggregateRecord]:
        records = []
        for category, (count_range, score_range) in profile.items():
            records.append(
                AggregateRecord(
                    key={dimension: category},
                    count=self.random.randint(*count_range),
                    average_score=self._score(*score_range),
                )
            )
        return records

    def generate_score_trend(self) -> List[AggregateRecord]:
        """One record per trailing month and entity type, oldest first"""
        months = trailing_months(self.reference_date, self.trend_window_months)

        records = []
        for step, (_, month, year) in enumerate(months):
            for series in SERIES_TYPES:
                low, high, rise, count_range = TREND_PROFILE[series]
                records.append(
                    AggregateRecord(
                        key={"month": month, "year": year, "type": series},
                        count=self.random.randint(*count_range),
                        average_score=self._score(low + step * rise, high + step * rise),
                    )
                )
        return records

    def generate_score_distribution(self) -> List[AggregateRecord]:
        """One record per score range and entity type"""
        records = []
        for range_label in SCORE_RANGES:
            for series in SERIES_TYPES:
                records.append(
                    AggregateRecord(
                        key={"range": range_label, "type": series},
                        count=self.random.randint(*DISTRIBUTION_COUNTS[range_label]),
                    )
                )
        return records

    def generate(self) -> ScoreStats:
        """Generate every aggregate collection behind the score dashboard"""
        stats = ScoreStats(
            average_scores=self._category_records(AVERAGE_SCORE_PROFILE, "type"),
            lead_stats=self._category_records(LEAD_STATUS_PROFILE, "status"),
            property_stats=self._category_records(PROPERTY_TYPE_PROFILE, "type"),
            agent_stats=self._category_records(AGENT_PERIOD_PROFILE, "period"),
            score_trend=self.generate_score_trend(),
            score_distribution=self.generate_score_distribution(),
        )

        logger.debug(
            f"Generated score stats with {len(stats.score_trend)} trend and "
            f"{len(stats.score_distribution)} distribution records"
        )
        return stats
