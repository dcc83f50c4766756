"""
Tests for the score record generator

Covers determinism, entity details, the factor breakdown attached to
every record and argument validation.
"""

from datetime import timedelta

import pytest

from core.exceptions import InvalidRangeError, ValidationError
from d5_scoring.constants import SYNTHESIS_TOLERANCE
from d5_scoring.factors import FactorSynthesizer, load_factor_vocabulary
from d5_scoring.types import EntityType, LeadStatus, PropertyStatus, PropertyType
from generators.record_generator import LeadDetails, PropertyDetails, RecordGenerator

pytestmark = pytest.mark.unit


class TestRecordGenerator:
    """Test suite for RecordGenerator"""

    @pytest.fixture
    def generator(self, reference_time):
        return RecordGenerator(seed=42, reference_time=reference_time)

    def test_deterministic(self, reference_time):
        first = RecordGenerator(seed=7, reference_time=reference_time).generate_all(3)
        second = RecordGenerator(seed=7, reference_time=reference_time).generate_all(3)
        assert [record.to_dict() for record in first] == [record.to_dict() for record in second]

    def test_different_seeds_differ(self, reference_time):
        first = RecordGenerator(seed=1, reference_time=reference_time).generate("lead", 5)
        second = RecordGenerator(seed=2, reference_time=reference_time).generate("lead", 5)
        assert [r.id for r in first] != [r.id for r in second]

    @pytest.mark.parametrize("entity", list(EntityType))
    def test_breakdown_reproduces_score(self, generator, entity):
        for record in generator.generate(entity, 25):
            assert record.entity_type == entity
            assert 30 <= record.score <= 95
            assert record.score == int(record.score)
            assert len(record.factors) == 4
            assert record.factors.target_score == record.score
            record.factors.validate(tolerance=SYNTHESIS_TOLERANCE)
            assert set(record.factors.names) <= set(load_factor_vocabulary(entity))

    def test_lead_details(self, generator):
        for record in generator.generate("lead", 30):
            details = record.details
            assert isinstance(details, LeadDetails)
            assert details.budget["min"] <= details.budget["max"]
            assert details.phone.startswith("+91 ")
            assert "@" in details.email
            assert isinstance(details.status, LeadStatus)
            assert len(details.interested_in) == 1

    def test_property_details(self, generator):
        for record in generator.generate("property", 30):
            details = record.details
            assert isinstance(details, PropertyDetails)
            assert details.location["city"] == "Hyderabad"
            assert 2 <= len(details.amenities) <= 5
            assert len(set(details.amenities)) == len(details.amenities)
            assert set(details.amenities) <= set(generator.amenities[details.type])
            low, high = generator.price_ranges[details.type]
            assert low <= details.price <= high
            assert isinstance(details.status, PropertyStatus)

    def test_land_names(self, generator):
        assert generator.generate_property_name("Kondapur", PropertyType.LAND).startswith("Kondapur ")
        assert generator.generate_property_name("Kondapur", PropertyType.LAND).endswith(" Plot")

    def test_agent_performance_bounded(self, generator):
        for record in generator.generate("agent", 30):
            performance = record.details.performance
            assert 0 <= performance["conversion_rate"] <= 100
            assert 0 <= performance["customer_satisfaction"] <= 100
            assert 1 <= performance["response_time"] <= 24
            assert record.notes.startswith(record.details.user.first_name)

    def test_created_at_within_history(self, generator, reference_time):
        for record in generator.generate_all(10):
            assert reference_time - timedelta(days=180) < record.created_at <= reference_time
            assert record.updated_at == reference_time

    def test_generate_all_order(self, generator):
        records = generator.generate_all(2)
        assert [record.entity_type.value for record in records] == [
            "lead", "lead", "property", "property", "agent", "agent",
        ]

    def test_generate_top_sorted(self, generator):
        records = generator.generate_top("property", 8)
        scores = [record.score for record in records]
        assert len(records) == 8
        assert scores == sorted(scores, reverse=True)

    def test_zero_count(self, generator):
        assert generator.generate("lead", 0) == []

    def test_negative_count(self, generator):
        with pytest.raises(InvalidRangeError):
            generator.generate("lead", -1)

    def test_unknown_entity(self, generator):
        with pytest.raises(ValidationError):
            generator.generate("building", 1)

    def test_shared_synthesizer(self, reference_time, rng):
        synthesizer = FactorSynthesizer(vocabulary=["A", "B", "C", "D"], rng=rng)
        generator = RecordGenerator(rng=rng, synthesizer=synthesizer, reference_time=reference_time)
        record = generator.generate("agent", 1)[0]
        assert sorted(record.factors.names) == ["A", "B", "C", "D"]

    def test_to_dict_is_plain(self, generator):
        data = generator.generate("lead", 1)[0].to_dict()
        assert data["entity_type"] == "lead"
        assert isinstance(data["details"]["status"], str)
        assert isinstance(data["details"]["source"], str)
        assert isinstance(data["details"]["assigned_to"], dict)
        assert len(data["factors"]["factors"]) == 4
