"""
Tests for analytics schemas

Covers parsing of the backend record shapes and the typed gap-fill
defaults of the dense rows.
"""

import pytest
from pydantic import ValidationError

from core.exceptions import ValidationError as ScoreBoardValidationError
from d10_analytics.schemas import KPI, AggregateRecord, RangeDistributionRow, ScoreStats, TrendDirection, TrendRow

pytestmark = pytest.mark.unit


class TestAggregateRecord:
    def test_from_source_scalar_id(self):
        record = AggregateRecord.from_source({"_id": "closed", "count": 4, "averageScore": 88.5}, "status")
        assert record.key == {"status": "closed"}
        assert record.count == 4
        assert record.average_score == 88.5

    def test_from_source_composite_id(self):
        raw = {"_id": {"month": 5, "year": 2024, "type": "agent"}, "count": 2, "averageScore": 61.0}
        record = AggregateRecord.from_source(raw)
        assert record.matches(month=5, year=2024, type="agent")
        assert not record.matches(month=5, year=2023)

    def test_from_source_snake_case(self):
        record = AggregateRecord.from_source({"key": {"range": "0-20"}, "count": 1, "average_score": 12.0})
        assert record.dimension("range") == "0-20"
        assert record.average_score == 12.0

    def test_missing_dimension(self):
        assert AggregateRecord(key={}).dimension("type") is None

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            AggregateRecord(key={"type": "lead"}, count=-1)

    def test_frozen(self):
        record = AggregateRecord(key={"type": "lead"}, count=1)
        with pytest.raises(ValidationError):
            record.count = 2


class TestScoreStats:
    def test_from_source_maps_collections(self):
        stats = ScoreStats.from_source(
            {
                "averageScores": [{"_id": "lead", "count": 40, "averageScore": 67.0}],
                "leadStats": [{"_id": "new", "count": 12}],
                "propertyStats": [{"_id": "land", "count": 5}],
                "agentStats": [{"_id": "monthly", "count": 9}],
            }
        )
        assert stats.average_scores[0].key == {"type": "lead"}
        assert stats.lead_stats[0].key == {"status": "new"}
        assert stats.property_stats[0].key == {"type": "land"}
        assert stats.agent_stats[0].key == {"period": "monthly"}
        assert stats.score_trend == []
        assert stats.score_distribution == []


class TestDenseRows:
    def test_distribution_defaults_to_zero(self):
        row = RangeDistributionRow(range="0-20")
        assert (row.lead, row.property, row.agent) == (0, 0, 0)

    def test_trend_defaults_to_none(self):
        row = TrendRow(month="Jan", month_number=1, year=2024)
        assert (row.lead, row.property, row.agent) == (None, None, None)

    def test_trend_month_number_range(self):
        with pytest.raises(ValidationError):
            TrendRow(month="Jan", month_number=13, year=2024)


class TestKPIModel:
    def test_progress_bounds(self):
        with pytest.raises(ValidationError):
            KPI(
                title="Average Lead Score",
                value=120.0,
                previous_value=100.0,
                progress_value=120.0,
                trend=TrendDirection.UP,
                percentage_change=20.0,
            )

    def test_json_dump(self):
        kpi = KPI(
            title="Conversion Rate",
            value=30.0,
            previous_value=27.0,
            unit="%",
            progress_value=30.0,
            trend=TrendDirection.UP,
            percentage_change=11.1,
        )
        data = kpi.model_dump(mode="json")
        assert data["trend"] == "up"
        assert data["tier"] is None


class TestBackendRecordShapes:
    """Records as the aggregation backend actually emits them"""

    def test_null_dimension_in_composite_key(self):
        record = AggregateRecord.from_source({"_id": {"range": "0-20", "type": None}, "count": 2})
        assert record.key == {"range": "0-20", "type": None}
        assert record.count == 2
        assert not record.matches(range="0-20", type="lead")

    def test_null_count_defaults_to_zero(self):
        record = AggregateRecord.from_source({"_id": "lead", "count": None}, "type")
        assert record.count == 0

    def test_score_band_counts_are_kept(self):
        raw = {
            "_id": "lead",
            "count": 40,
            "averageScore": 67.0,
            "highScores": 12,
            "mediumScores": 20,
            "lowScores": 8,
        }
        record = AggregateRecord.from_source(raw, "type")
        assert (record.high_scores, record.medium_scores, record.low_scores) == (12, 20, 8)

    def test_average_price_is_kept(self):
        raw = {"_id": "commercial", "count": 3, "averageScore": 82.0, "averagePrice": 4500000.0}
        record = AggregateRecord.from_source(raw, "type")
        assert record.average_price == 4500000.0
        assert record.high_scores is None

    def test_malformed_record_raises_domain_error(self):
        with pytest.raises(ScoreBoardValidationError) as exc_info:
            AggregateRecord.from_source({"_id": "lead", "count": -3}, "type")
        assert exc_info.value.error_code == "VALIDATION_ERROR"
        assert exc_info.value.details["field"] == "count"

    def test_stats_payload_with_null_dimensions(self):
        stats = ScoreStats.from_source(
            {
                "scoreDistribution": [{"_id": {"range": "0-20", "type": None}, "count": 2}],
                "scoreTrend": [{"_id": {"month": None, "year": 2024, "type": "lead"}, "count": 1, "averageScore": 55.0}],
            }
        )
        assert stats.score_distribution[0].dimension("type") is None
        assert stats.score_trend[0].dimension("month") is None
