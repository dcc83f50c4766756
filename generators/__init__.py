"""
Score Data Generators

Deterministic generators for score records and aggregate statistics,
used for demos, the CLI and tests.
"""

from .record_generator import AgentDetails, LeadDetails, PropertyDetails, RecordGenerator, ScoreRecord, UserRef
from .stats_generator import ScoreStatsGenerator

__version__ = "1.0.0"

__all__ = [
    # Record generation
    "RecordGenerator",
    "ScoreRecord",
    "LeadDetails",
    "PropertyDetails",
    "AgentDetails",
    "UserRef",
    # Aggregate generation
    "ScoreStatsGenerator",
]
