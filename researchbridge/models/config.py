"""
Configuration Models

Pydantic models for system configuration validation, including the
scoring policy tables (weights, boosts, override thresholds, blocklist).
"""

import json
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationInfo, field_validator


# Known historical/public figures that bibliographic databases index works
# *about*. Matching is substring based and deliberately left as-is.
DEFAULT_BLOCKLIST: tuple[str, ...] = (
    "hitler",
    "benjamin netanyahu",
    "napoleon",
    "alexander the great",
    "julius caesar",
    "socrates",
    "plato",
    "aristotle",
    "jesus",
    "muhammad",
    "gandhi",
    "churchill",
    "stalin",
    "lenin",
    "mao",
    "confucius",
    "buddha",
    "newton",
    "einstein",
    "darwin",
    "freud",
)


class KeywordBoost(BaseModel):
    """Bounded additive boost for matched external keywords."""

    per_match: float = Field(gt=0.0)
    cap: float = Field(default=1.5, gt=0.0)

    def amount(self, match_count: int) -> float:
        """Boost for ``match_count`` matches (0 when nothing matched)."""
        if match_count <= 0:
            return 0.0
        return min(self.cap, self.per_match * match_count)


class ResearcherWeights(BaseModel):
    """Weighted-sum coefficients for the researcher pipeline."""

    relevance: float = 1.5
    productivity: float = 0.7
    impact: float = 0.9
    accessibility: float = 0.4


class ProfessorWeights(BaseModel):
    """Weighted-sum coefficients for the professor pipeline.

    ``busy`` is subtracted: heavily affiliated professors are down-ranked.
    """

    openness: float = 1.4
    fit: float = 1.1
    activity: float = 0.8
    busy: float = 0.6


class ResearcherPolicy(BaseModel):
    """Researcher scoring policy table."""

    weights: ResearcherWeights = Field(default_factory=ResearcherWeights)
    keyword_boost: KeywordBoost = Field(
        default_factory=lambda: KeywordBoost(per_match=0.3, cap=1.5)
    )
    blocklist: list[str] = Field(default_factory=lambda: list(DEFAULT_BLOCKLIST))
    blocklist_score: float = -100.0
    no_institution_factor: float = Field(default=0.05, gt=0.0, le=1.0)
    citation_ratio_threshold: float = Field(default=20.0, gt=0.0)
    citation_anomaly_factor: float = Field(default=0.2, gt=0.0, le=1.0)
    high_confidence_signals: int = Field(default=4, ge=1, le=4)
    medium_confidence_signals: int = Field(default=3, ge=0, le=4)

    @field_validator("blocklist")
    @classmethod
    def normalize_blocklist(cls, v: list[str]) -> list[str]:
        """Lowercase entries and drop blanks."""
        return [entry.strip().lower() for entry in v if entry.strip()]

    @field_validator("medium_confidence_signals")
    @classmethod
    def validate_confidence_ordering(cls, v: int, info: ValidationInfo) -> int:
        """Medium threshold must sit below the high threshold."""
        high = info.data.get("high_confidence_signals", 4)
        if v >= high:
            raise ValueError(
                f"medium_confidence_signals ({v}) must be less than "
                f"high_confidence_signals ({high})"
            )
        return v


class ProfessorPolicy(BaseModel):
    """Professor scoring policy table."""

    weights: ProfessorWeights = Field(default_factory=ProfessorWeights)
    keyword_boost: KeywordBoost = Field(
        default_factory=lambda: KeywordBoost(per_match=0.4, cap=1.5)
    )
    high_confidence_signals: int = Field(default=4, ge=1, le=5)
    medium_confidence_signals: int = Field(default=2, ge=0, le=5)

    @field_validator("medium_confidence_signals")
    @classmethod
    def validate_confidence_ordering(cls, v: int, info: ValidationInfo) -> int:
        """Medium threshold must sit below the high threshold."""
        high = info.data.get("high_confidence_signals", 4)
        if v >= high:
            raise ValueError(
                f"medium_confidence_signals ({v}) must be less than "
                f"high_confidence_signals ({high})"
            )
        return v


class ScoringPolicy(BaseModel):
    """Tunable policy table for both scoring pipelines."""

    researcher: ResearcherPolicy = Field(default_factory=ResearcherPolicy)
    professor: ProfessorPolicy = Field(default_factory=ProfessorPolicy)


class SourceConfig(BaseModel):
    """External data source configuration (OpenAlex / ROR)."""

    openalex_base_url: str = "https://api.openalex.org"
    ror_base_url: str = "https://api.ror.org/v2"
    contact_email: str = "research-bridge-demo@example.com"
    request_timeout: float = Field(default=15.0, gt=0.0, le=120.0)
    max_retries: int = Field(default=3, ge=1, le=10)
    requests_per_second: float = Field(default=10.0, gt=0.0)
    ror_requests_per_second: float = Field(default=5.0, gt=0.0)
    max_concurrent_requests: int = Field(default=5, gt=0, le=20)


class DiscoveryConfig(BaseModel):
    """Discovery and recommendation tuning."""

    per_page: int = Field(default=50, gt=0, le=200)
    max_institutions: int = Field(default=10, gt=0)
    max_topics: int = Field(default=3, gt=0)
    active_years: int = Field(default=5, gt=0)
    min_works: int = Field(default=2, ge=0)
    suggestions_per_page: int = Field(default=10, gt=0)
    suggestions_limit: int = Field(default=5, gt=0)
    results_per_keyword: int = Field(default=15, gt=0)
    recommendation_min_stars: float = Field(default=4.0, ge=1.0, le=5.0)
    daily_noise: float = Field(default=0.3, ge=0.0)


class SystemParams(BaseModel):
    """System parameters configuration model."""

    scoring: ScoringPolicy = Field(default_factory=ScoringPolicy)
    sources: SourceConfig = Field(default_factory=SourceConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> "SystemParams":
        """Load system parameters from config file.

        Resolution order: explicit ``config_path``, then the
        ``RESEARCHBRIDGE_CONFIG`` environment variable (``.env`` honoured),
        then ``config/system_params.json``. Without an explicit path a
        missing file falls back to defaults. ``OPENALEX_MAILTO`` overrides
        the contact email sent to OpenAlex.

        Args:
            config_path: Path to system_params.json

        Returns:
            SystemParams: Validated configuration

        Raises:
            FileNotFoundError: If an explicitly requested config file doesn't exist
            ValueError: If config validation fails
        """
        load_dotenv()

        explicit = config_path is not None or "RESEARCHBRIDGE_CONFIG" in os.environ
        if config_path is None:
            config_path = os.environ.get(
                "RESEARCHBRIDGE_CONFIG", "config/system_params.json"
            )
        config_path = Path(config_path)

        config_data: dict = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = json.load(f)
        elif explicit:
            raise FileNotFoundError(
                f"Config file not found: {config_path}. "
                f"Copy {config_path.stem}.example.json to {config_path.name}"
            )

        params = cls(**config_data)

        mailto = os.environ.get("OPENALEX_MAILTO")
        if mailto:
            params.sources.contact_email = mailto

        return params
