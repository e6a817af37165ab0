"""Relative scoring and ranking engine."""

from researchbridge.scoring.pipeline import (
    score_batch,
    score_professors,
    score_researchers,
    score_single_professor,
)
from researchbridge.scoring.profiles import (
    ProfessorProfile,
    ResearcherProfile,
    ScoringProfile,
)
from researchbridge.scoring.rating import (
    professor_star_label,
    researcher_star_label,
    stars_from_percentile_bands,
    stars_from_percentile_continuous,
)

__all__ = [
    "ProfessorProfile",
    "ResearcherProfile",
    "ScoringProfile",
    "professor_star_label",
    "researcher_star_label",
    "score_batch",
    "score_professors",
    "score_researchers",
    "score_single_professor",
    "stars_from_percentile_bands",
    "stars_from_percentile_continuous",
]
