"""
Configuration management using Pydantic Settings
Handles environment variables and validation
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

DEFAULT_FACTOR_VOCABULARY_PATH = Path(__file__).parent.parent / "config" / "score_factors.yaml"


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Environment
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    # Application
    app_name: str = "ScoreBoard"
    app_version: str = "0.1.0"

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text

    # Synthesis
    random_seed: Optional[int] = Field(default=None, description="Seed for reproducible synthesis")
    factor_vocabulary_path: Optional[str] = Field(default=None)
    factors_per_record: int = Field(default=4, ge=1)

    # Record generation
    record_score_min: int = Field(default=30, ge=0, le=100)
    record_score_max: int = Field(default=95, ge=0, le=100)
    record_history_days: int = Field(default=180, ge=1)

    # Reshaping
    trend_window_months: int = Field(default=6, ge=1, le=24)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @model_validator(mode="after")
    def validate_score_roll_range(self):
        """Score roll bounds must not be inverted"""
        if self.record_score_min > self.record_score_max:
            raise ValueError("record_score_min cannot exceed record_score_max")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def vocabulary_path(self) -> Path:
        """Resolved location of the factor vocabulary file"""
        if self.factor_vocabulary_path:
            return Path(self.factor_vocabulary_path)
        return DEFAULT_FACTOR_VOCABULARY_PATH

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
