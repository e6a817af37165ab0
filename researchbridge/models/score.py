"""Score data models produced by the scoring pipelines."""

from typing import Literal

from pydantic import BaseModel, Field


Confidence = Literal["Low", "Medium", "High"]


class MetricSet(BaseModel):
    """Per-entity metrics derived only from the entity's own fields.

    Attributes:
        sub_scores: Bounded 0-1 sub-scores (relevance, accessibility, openness, fit)
        population_metrics: Log-scaled metrics normalized against the batch
        signals: Boolean signals used by overrides, reasons and confidence
        counts: Raw counts kept for explanation strings
    """

    sub_scores: dict[str, float] = Field(default_factory=dict)
    population_metrics: dict[str, float] = Field(default_factory=dict)
    signals: dict[str, bool] = Field(default_factory=dict)
    counts: dict[str, int] = Field(default_factory=dict)


class MetricStats(BaseModel):
    """Batch mean and population standard deviation of one metric.

    ``std`` is never zero: empty, single-member and zero-variance batches
    default it to 1.
    """

    mean: float = 0.0
    std: float = Field(default=1.0, gt=0.0)

    def zscore(self, value: float) -> float:
        """Standardize ``value`` against this batch."""
        return (value - self.mean) / self.std


class RawScore(BaseModel):
    """Unbounded raw score of one entity plus what produced it."""

    value: float
    weighted_sum: float
    boost: float = 0.0
    keyword_matches: int = 0
    overrides: list[str] = Field(default_factory=list)


class Score(BaseModel):
    """Final, explainable score of one entity within its batch.

    Attributes:
        raw: Unbounded raw score after boosts and overrides
        stars: Half-star rating in [1.0, 5.0]
        percentile: Share of the batch strictly below this entity (0-100)
        breakdown: Named sub-scores and z-scores
        reasons: Human-readable justification strings
        confidence: Data completeness label
        label: Human-readable label for the star rating
        overrides: Override rules that fired
    """

    raw: float
    stars: float = Field(ge=1.0, le=5.0)
    percentile: float = Field(ge=0.0, le=100.0)
    breakdown: dict[str, float] = Field(default_factory=dict)
    reasons: list[str] = Field(default_factory=list)
    confidence: Confidence = "Low"
    label: str = ""
    overrides: list[str] = Field(default_factory=list)
