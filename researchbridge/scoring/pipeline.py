"""Generic batch scoring pipeline.

    entities -> metrics -> population stats -> raw scores
             -> percentiles -> stars -> Score

Scores are relative to the batch passed in: the same entity scored in a
different batch gets a different percentile. The pipeline is pure; it
never mutates its inputs and keeps no state between calls.
"""

from typing import Iterable, Optional, Sequence, TypeVar

from researchbridge.models.config import ProfessorPolicy, ResearcherPolicy
from researchbridge.models.professor import Professor
from researchbridge.models.researcher import Researcher
from researchbridge.models.score import Score
from researchbridge.scoring.metrics import calculate_fit_score, calculate_openness_score
from researchbridge.scoring.percentile import SINGLETON_PERCENTILE, percentile_ranks
from researchbridge.scoring.profiles import (
    ProfessorProfile,
    ResearcherProfile,
    ScoringProfile,
)
from researchbridge.scoring.rating import clamp_stars, professor_star_label, round_to_half
from researchbridge.scoring.raw_score import normalize_keywords
from researchbridge.scoring.reasons import PROFILE_FALLBACK_REASON, confidence_from_count
from researchbridge.scoring.statistics import batch_zscores, compute_population_stats
from researchbridge.utils.logger import get_logger

E = TypeVar("E", Researcher, Professor)


def score_batch(
    entities: Sequence[E],
    profile: ScoringProfile[E],
    keywords: Optional[Iterable[str]] = None,
    correlation_id: Optional[str] = None,
) -> dict[str, Score]:
    """Score every entity relative to the rest of the batch.

    Args:
        entities: The batch; ids must be unique (deduplicate first)
        profile: Domain profile (researcher or professor)
        keywords: Optional external keywords for the bounded boost
        correlation_id: Correlation ID for logging

    Returns:
        Mapping of entity id to Score, in input order. Empty for an empty batch.
    """
    if not entities:
        return {}

    logger = get_logger(
        correlation_id=correlation_id, phase="scoring", component=profile.name
    )
    normalized_keywords = normalize_keywords(keywords)

    metric_sets = [profile.extract(entity) for entity in entities]
    stats = compute_population_stats(metric_sets, profile.population_metrics)
    zscores = [batch_zscores(m, stats) for m in metric_sets]

    raw_scores = [
        profile.raw_score(
            metrics,
            z,
            profile.keyword_matches(entity, normalized_keywords)
            if normalized_keywords
            else 0,
        )
        for entity, metrics, z in zip(entities, metric_sets, zscores)
    ]
    percentiles = percentile_ranks([raw.value for raw in raw_scores])

    result: dict[str, Score] = {}
    for entity, metrics, z, raw, percentile in zip(
        entities, metric_sets, zscores, raw_scores, percentiles
    ):
        stars = profile.stars(percentile)
        result[profile.entity_id(entity)] = Score(
            raw=raw.value,
            stars=stars,
            percentile=percentile,
            breakdown=profile.breakdown(metrics, z),
            reasons=profile.reasons(metrics, z, raw),
            confidence=profile.confidence(metrics),
            label=profile.label(stars),
            overrides=raw.overrides,
        )

    logger.debug(
        "Batch scored",
        batch_size=len(entities),
        keywords=len(normalized_keywords),
        population_stats={
            name: s.model_dump() for name, s in stats.items()
        },
        overridden=sum(1 for raw in raw_scores if raw.overrides),
    )

    return result


def score_researchers(
    researchers: Sequence[Researcher],
    keywords: Optional[Iterable[str]] = None,
    policy: Optional[ResearcherPolicy] = None,
    correlation_id: Optional[str] = None,
) -> dict[str, Score]:
    """Score a batch of researchers (bibliographic records)."""
    return score_batch(
        researchers, ResearcherProfile(policy), keywords, correlation_id
    )


def score_professors(
    professors: Sequence[Professor],
    keywords: Optional[Iterable[str]] = None,
    policy: Optional[ProfessorPolicy] = None,
    correlation_id: Optional[str] = None,
) -> dict[str, Score]:
    """Score a batch of roster professors."""
    return score_batch(professors, ProfessorProfile(policy), keywords, correlation_id)


def score_single_professor(professor: Professor) -> Score:
    """Score one professor without any batch context.

    Used for profile pages where no result set exists; less informative
    than a batch score, so the percentile is pinned to the midpoint.
    """
    openness = calculate_openness_score(professor)
    fit = calculate_fit_score(professor)

    raw = openness * 40 + fit * 35 + 25
    stars = clamp_stars(round_to_half(max(1.0, min(5.0, raw / 20))))

    reasons: list[str] = []
    if openness >= 0.7:
        reasons.append("Undergrad-friendly signals")
    if fit >= 0.7:
        reasons.append("Strong research diversity")
    if professor.is_recruiting:
        reasons.append("Currently recruiting")
    if professor.email:
        reasons.append("Direct email available")

    populated = sum(
        1
        for present in (
            professor.interests,
            professor.is_recruiting,
            professor.methodology,
        )
        if present
    )

    return Score(
        raw=raw,
        stars=stars,
        percentile=SINGLETON_PERCENTILE,
        breakdown={"openness": openness, "fit": fit, "activity": 0.0, "busy": 0.0},
        reasons=reasons or [PROFILE_FALLBACK_REASON],
        confidence=confidence_from_count(populated, high=3, medium=2),
        label=professor_star_label(stars),
    )
