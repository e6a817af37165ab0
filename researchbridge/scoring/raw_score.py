"""Raw score combination: weighted sum, keyword boost, overrides.

Order of application is fixed: weighted sum, then the external keyword
boost, then overrides. Nothing here raises; all inputs are already
default-filled.
"""

from typing import Iterable, Optional

from researchbridge.models.config import ProfessorPolicy, ResearcherPolicy
from researchbridge.models.score import MetricSet, RawScore


PENALTY_FLOOR_MARGIN = 1e-6


def normalize_keywords(keywords: Optional[Iterable[str]]) -> list[str]:
    """Lowercase, strip and de-duplicate keywords, dropping blanks."""
    if not keywords:
        return []

    seen: list[str] = []
    for keyword in keywords:
        cleaned = keyword.strip().lower()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def count_interest_matches(interests: Iterable[str], keywords: list[str]) -> int:
    """Count keywords contained in, or containing, any interest string."""
    interests_lower = [i.strip().lower() for i in interests if i.strip()]
    if not interests_lower:
        return 0

    return sum(
        1
        for keyword in keywords
        if any(
            keyword in interest or interest in keyword for interest in interests_lower
        )
    )


def apply_penalty(raw: float, factor: float) -> float:
    """Scale a score down by ``factor`` (0 < factor <= 1).

    Positive scores shrink to ``raw * factor``; negative scores move
    further below zero by the same proportion, so a penalty can never
    lift an entity above where it started.
    """
    if raw >= 0:
        return raw * factor
    return raw - (1.0 - factor) * abs(raw)


def researcher_weighted_sum(
    metrics: MetricSet, zscores: dict[str, float], policy: ResearcherPolicy
) -> float:
    """Weighted combination of researcher sub-scores and z-scores.

    Bounded sub-scores are re-centred from [0, 1] onto [-1, 1].
    """
    w = policy.weights
    relevance = metrics.sub_scores.get("relevance", 0.5)
    accessibility = metrics.sub_scores.get("accessibility", 0.5)

    return (
        w.relevance * (2 * relevance - 1)
        + w.productivity * zscores.get("productivity", 0.0)
        + w.impact * zscores.get("impact", 0.0)
        + w.accessibility * (2 * accessibility - 1)
    )


def professor_weighted_sum(
    metrics: MetricSet, zscores: dict[str, float], policy: ProfessorPolicy
) -> float:
    """Weighted combination of professor sub-scores and z-scores."""
    w = policy.weights
    openness = metrics.sub_scores.get("openness", 0.0)
    fit = metrics.sub_scores.get("fit", 0.0)

    return (
        w.openness * (2 * openness - 1)
        + w.fit * (2 * fit - 1)
        + w.activity * zscores.get("activity", 0.0)
        - w.busy * zscores.get("busy", 0.0)
    )


def score_researcher_raw(
    metrics: MetricSet,
    zscores: dict[str, float],
    policy: ResearcherPolicy,
    keyword_matches: int = 0,
) -> RawScore:
    """Raw researcher score with boost and overrides applied.

    Overrides:
        1. Blocklisted name forces ``policy.blocklist_score`` and stops.
        2. Missing institution applies ``no_institution_factor``.
        3. Citation anomaly applies ``citation_anomaly_factor``
           (independent of 2).

    Non-blocklisted scores never reach ``policy.blocklist_score``.
    """
    weighted = researcher_weighted_sum(metrics, zscores, policy)
    boost = policy.keyword_boost.amount(keyword_matches)
    raw = weighted + boost
    overrides: list[str] = []

    if metrics.signals.get("blocklisted"):
        raw = policy.blocklist_score
        overrides.append("blocklisted")
    else:
        if not metrics.signals.get("has_institution"):
            raw = apply_penalty(raw, policy.no_institution_factor)
            overrides.append("no_institution")

        if metrics.signals.get("citation_anomaly"):
            raw = apply_penalty(raw, policy.citation_anomaly_factor)
            overrides.append("citation_anomaly")

        # Blocklisted names stay strictly last
        raw = max(raw, policy.blocklist_score + PENALTY_FLOOR_MARGIN)

    return RawScore(
        value=raw,
        weighted_sum=weighted,
        boost=boost,
        keyword_matches=keyword_matches,
        overrides=overrides,
    )


def score_professor_raw(
    metrics: MetricSet,
    zscores: dict[str, float],
    policy: ProfessorPolicy,
    keyword_matches: int = 0,
) -> RawScore:
    """Raw professor score: weighted sum plus keyword boost, no overrides."""
    weighted = professor_weighted_sum(metrics, zscores, policy)
    boost = policy.keyword_boost.amount(keyword_matches)

    return RawScore(
        value=weighted + boost,
        weighted_sum=weighted,
        boost=boost,
        keyword_matches=keyword_matches,
    )
