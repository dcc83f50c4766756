"""
Root conftest.py for all tests
Provides common fixtures and configuration
"""
import os
import random
import sys
from datetime import date, datetime, timezone

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest

from d10_analytics.schemas import AggregateRecord


@pytest.fixture
def rng():
    """Seeded random source for reproducible synthesis"""
    return random.Random(42)


@pytest.fixture
def reference_date():
    """Fixed 'today' for month-window calculations"""
    return date(2024, 3, 15)


@pytest.fixture
def reference_time():
    """Fixed 'now' for generated timestamps"""
    return datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_record():
    """Factory for aggregate records: make_record(count, average, **key)"""

    def _make(count=0, average_score=None, converted=None, **key):
        return AggregateRecord(key=key, count=count, average_score=average_score, converted=converted)

    return _make
