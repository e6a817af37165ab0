"""Data models for entities, scores and configuration."""

from researchbridge.models.config import ScoringPolicy, SystemParams
from researchbridge.models.professor import Professor, Recruitment
from researchbridge.models.researcher import Institution, Researcher
from researchbridge.models.score import MetricSet, MetricStats, RawScore, Score

__all__ = [
    "Institution",
    "MetricSet",
    "MetricStats",
    "Professor",
    "RawScore",
    "Recruitment",
    "Researcher",
    "Score",
    "ScoringPolicy",
    "SystemParams",
]
