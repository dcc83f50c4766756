"""Core utilities and configuration for ScoreBoard"""
from core.config import settings
from core.exceptions import (
    ConfigurationError,
    InsufficientVocabularyError,
    InvalidRangeError,
    ScoreBoardError,
    ValidationError,
)
from core.logging import get_logger

__all__ = [
    "settings",
    "get_logger",
    "ScoreBoardError",
    "ValidationError",
    "InvalidRangeError",
    "InsufficientVocabularyError",
    "ConfigurationError",
]
