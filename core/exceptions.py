"""
Custom exceptions for ScoreBoard
Provides structured error handling across all domains
"""
from typing import Any, Dict, Optional


class ScoreBoardError(Exception):
    """Base exception for all ScoreBoard errors"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for CLI / API output"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(ScoreBoardError):
    """Raised when input validation fails"""

    def __init__(self, message: str, field: Optional[str] = None, error_code: str = "VALIDATION_ERROR", **details):
        super().__init__(
            message=message,
            error_code=error_code,
            details={"field": field, **details} if field else details,
        )


class InvalidRangeError(ValidationError):
    """Raised when a score or count falls outside its allowed range"""

    def __init__(self, field: str, value: Any, minimum: Any = None, maximum: Any = None):
        if maximum is None:
            bounds = f">= {minimum}"
        else:
            bounds = f"between {minimum} and {maximum}"
        super().__init__(
            message=f"{field} must be {bounds}, got {value!r}",
            field=field,
            error_code="INVALID_RANGE",
            value=value,
            minimum=minimum,
            maximum=maximum,
        )


class InsufficientVocabularyError(ValidationError):
    """Raised when more distinct factor names are requested than the vocabulary holds"""

    def __init__(self, requested: int, available: int):
        super().__init__(
            message=f"Requested {requested} factors but the vocabulary only has {available} names",
            field="count",
            error_code="INSUFFICIENT_VOCABULARY",
            requested=requested,
            available=available,
        )


class ConfigurationError(ScoreBoardError):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting} if setting else {},
        )
