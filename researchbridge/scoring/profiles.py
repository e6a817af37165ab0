"""Per-domain scoring profiles.

A profile tells the generic pipeline how to extract metrics, which
metrics to normalize against the batch, how to combine them into a raw
score, and how to map and explain the result. Researcher and professor
scoring share everything else.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from researchbridge.models.config import (
    ProfessorPolicy,
    ResearcherPolicy,
    ScoringPolicy,
)
from researchbridge.models.professor import Professor
from researchbridge.models.researcher import Researcher
from researchbridge.models.score import Confidence, MetricSet, RawScore
from researchbridge.scoring import metrics as metric_extractors
from researchbridge.scoring import rating, reasons
from researchbridge.scoring.raw_score import (
    count_interest_matches,
    score_professor_raw,
    score_researcher_raw,
)

E = TypeVar("E", Researcher, Professor)


class ScoringProfile(ABC, Generic[E]):
    """Domain-specific hooks for the generic scoring pipeline."""

    name: str = ""
    population_metrics: tuple[str, ...] = ()

    @abstractmethod
    def entity_id(self, entity: E) -> str:
        """Batch key of ``entity``."""

    @abstractmethod
    def extract(self, entity: E) -> MetricSet:
        """Per-entity metrics, independent of the batch."""

    @abstractmethod
    def keyword_matches(self, entity: E, keywords: list[str]) -> int:
        """Number of normalized keywords that match ``entity``."""

    @abstractmethod
    def raw_score(
        self, metrics: MetricSet, zscores: dict[str, float], keyword_matches: int
    ) -> RawScore:
        """Weighted sum, boost and overrides."""

    @abstractmethod
    def stars(self, percentile: float) -> float:
        """Percentile to half-star rating."""

    @abstractmethod
    def label(self, stars: float) -> str:
        """Star rating to display label."""

    @abstractmethod
    def breakdown(
        self, metrics: MetricSet, zscores: dict[str, float]
    ) -> dict[str, float]:
        """Named sub-scores shown in the "why" view."""

    @abstractmethod
    def reasons(
        self, metrics: MetricSet, zscores: dict[str, float], raw: RawScore
    ) -> list[str]:
        """Ordered explanation strings."""

    @abstractmethod
    def confidence(self, metrics: MetricSet) -> Confidence:
        """Data completeness label."""


class ResearcherProfile(ScoringProfile[Researcher]):
    """Scoring profile for bibliographic researcher records."""

    name = "researcher"
    population_metrics = ("productivity", "impact")

    def __init__(self, policy: Optional[ResearcherPolicy] = None):
        self.policy = policy or ResearcherPolicy()

    def entity_id(self, entity: Researcher) -> str:
        return entity.id

    def extract(self, entity: Researcher) -> MetricSet:
        return metric_extractors.extract_researcher_metrics(entity, self.policy)

    def keyword_matches(self, entity: Researcher, keywords: list[str]) -> int:
        # Records carry no interest text; they were retrieved by these keywords
        return len(keywords)

    def raw_score(
        self, metrics: MetricSet, zscores: dict[str, float], keyword_matches: int
    ) -> RawScore:
        return score_researcher_raw(metrics, zscores, self.policy, keyword_matches)

    def stars(self, percentile: float) -> float:
        return rating.stars_from_percentile_bands(percentile)

    def label(self, stars: float) -> str:
        return rating.researcher_star_label(stars)

    def breakdown(
        self, metrics: MetricSet, zscores: dict[str, float]
    ) -> dict[str, float]:
        return {
            "relevance": metrics.sub_scores["relevance"],
            "productivity": zscores.get("productivity", 0.0),
            "impact": zscores.get("impact", 0.0),
            "accessibility": metrics.sub_scores["accessibility"],
        }

    def reasons(
        self, metrics: MetricSet, zscores: dict[str, float], raw: RawScore
    ) -> list[str]:
        return reasons.researcher_reasons(metrics, zscores, raw)

    def confidence(self, metrics: MetricSet) -> Confidence:
        return reasons.researcher_confidence(
            metrics,
            high=self.policy.high_confidence_signals,
            medium=self.policy.medium_confidence_signals,
        )


class ProfessorProfile(ScoringProfile[Professor]):
    """Scoring profile for curated roster professors."""

    name = "professor"
    population_metrics = ("activity", "busy")

    def __init__(self, policy: Optional[ProfessorPolicy] = None):
        self.policy = policy or ProfessorPolicy()

    def entity_id(self, entity: Professor) -> str:
        return entity.id

    def extract(self, entity: Professor) -> MetricSet:
        return metric_extractors.extract_professor_metrics(entity)

    def keyword_matches(self, entity: Professor, keywords: list[str]) -> int:
        return count_interest_matches(entity.interests, keywords)

    def raw_score(
        self, metrics: MetricSet, zscores: dict[str, float], keyword_matches: int
    ) -> RawScore:
        return score_professor_raw(metrics, zscores, self.policy, keyword_matches)

    def stars(self, percentile: float) -> float:
        return rating.stars_from_percentile_continuous(percentile)

    def label(self, stars: float) -> str:
        return rating.professor_star_label(stars)

    def breakdown(
        self, metrics: MetricSet, zscores: dict[str, float]
    ) -> dict[str, float]:
        return {
            "openness": metrics.sub_scores["openness"],
            "fit": metrics.sub_scores["fit"],
            "activity": zscores.get("activity", 0.0),
            "busy": zscores.get("busy", 0.0),
        }

    def reasons(
        self, metrics: MetricSet, zscores: dict[str, float], raw: RawScore
    ) -> list[str]:
        return reasons.professor_reasons(metrics, zscores, raw)

    def confidence(self, metrics: MetricSet) -> Confidence:
        return reasons.professor_confidence(
            metrics,
            high=self.policy.high_confidence_signals,
            medium=self.policy.medium_confidence_signals,
        )


def profiles_from_policy(
    policy: Optional[ScoringPolicy] = None,
) -> tuple[ResearcherProfile, ProfessorProfile]:
    """Build both profiles from one policy table."""
    policy = policy or ScoringPolicy()
    return ResearcherProfile(policy.researcher), ProfessorProfile(policy.professor)
