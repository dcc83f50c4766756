"""
D5 Scoring Module

Composite score tiers and constrained factor synthesis for lead,
property and agent scores.
"""

from .factors import FactorSynthesizer, composite_from_factors, load_factor_vocabulary, synthesize_factors
from .tiers import ScoreTier, ScoreTierClassifier, classify_score, performance_label
from .types import EntityType, Factor, FactorBreakdown, LeadStatus, PropertyType

__version__ = "1.0.0"

__all__ = [
    # Synthesis
    "FactorSynthesizer",
    "synthesize_factors",
    "composite_from_factors",
    "load_factor_vocabulary",
    # Tiers
    "ScoreTier",
    "ScoreTierClassifier",
    "classify_score",
    "performance_label",
    # Types
    "EntityType",
    "Factor",
    "FactorBreakdown",
    "LeadStatus",
    "PropertyType",
]
