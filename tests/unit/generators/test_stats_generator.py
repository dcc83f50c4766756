"""
Tests for the aggregate stats generator
"""

import pytest

from d10_analytics.aggregators import AggregateReshaper
from d10_analytics.constants import SCORE_RANGES
from d10_analytics.kpi import KPIDeriver
from generators.stats_generator import ScoreStatsGenerator

pytestmark = pytest.mark.unit


class TestScoreStatsGenerator:
    @pytest.fixture
    def stats(self, reference_date):
        return ScoreStatsGenerator(seed=42, reference_date=reference_date).generate()

    def test_deterministic(self, reference_date):
        first = ScoreStatsGenerator(seed=3, reference_date=reference_date).generate()
        second = ScoreStatsGenerator(seed=3, reference_date=reference_date).generate()
        assert first == second

    def test_collection_shapes(self, stats):
        assert {record.key["type"] for record in stats.average_scores} == {"lead", "property", "agent"}
        assert len(stats.lead_stats) == 6
        assert len(stats.property_stats) == 3
        assert len(stats.score_trend) == 18
        assert len(stats.score_distribution) == 15

    def test_trend_ends_at_reference_month(self, stats):
        last = stats.score_trend[-1].key
        assert (last["month"], last["year"]) == (3, 2024)

    def test_distribution_covers_every_range(self, stats):
        ranges = {record.key["range"] for record in stats.score_distribution}
        assert ranges == set(SCORE_RANGES)
        assert all(record.count >= 1 for record in stats.score_distribution)

    def test_averages_within_score_scale(self, stats):
        for record in stats.average_scores + stats.lead_stats + stats.score_trend:
            assert 0 <= record.average_score <= 100

    def test_feeds_reshaper_and_kpis(self, stats, reference_date):
        series = AggregateReshaper().reshape(stats, reference_date)
        assert all(row.lead is not None for row in series.score_trend)
        assert sum(row.lead for row in series.score_distribution) > 0

        kpis = KPIDeriver().derive(stats.average_scores, stats.lead_stats)
        assert 0 < kpis[1].value < 100
