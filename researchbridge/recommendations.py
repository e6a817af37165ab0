"""Recommendation ranking on top of batch scores.

Adds a small, explicitly seeded daily noise to each raw score for
ordering only, so the "for you" list varies day to day while staying
reproducible for a given seed. Runs strictly after star mapping; the
Score records themselves are never modified.
"""

import random
from datetime import date
from typing import Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

from researchbridge.models.professor import Professor
from researchbridge.models.researcher import Researcher
from researchbridge.models.score import Score
from researchbridge.utils.keywords import matched_interests

E = TypeVar("E", Researcher, Professor)


class Recommendation(BaseModel):
    """One ranked recommendation."""

    entity_id: str
    name: str
    source: str
    score: Score
    match_score: float
    matched_interests: list[str] = Field(default_factory=list)


def daily_seed(day: Optional[date] = None) -> str:
    """Seed string for the daily shuffle (ISO date)."""
    return (day or date.today()).isoformat()


def rank_recommendations(
    entities: Sequence[E],
    scores: dict[str, Score],
    seed: str,
    noise: float = 0.3,
    min_stars: float = 4.0,
    limit: int = 8,
    user_interests: Optional[list[str]] = None,
) -> list[Recommendation]:
    """Order scored entities for a recommendation list.

    Args:
        entities: Entities of the scored batch, in batch order
        scores: Output of score_batch for the same batch
        seed: Explicit shuffle seed (e.g. daily_seed())
        noise: Maximum noise added to the raw score for ordering
        min_stars: Minimum stars to be recommended
        limit: Maximum recommendations returned
        user_interests: Interests used to report matched topics

    Returns:
        Recommendations, best first
    """
    rng = random.Random(seed)
    ranked: list[Recommendation] = []

    for entity in entities:
        # Draw for every entity so the sequence doesn't depend on filtering
        jitter = rng.random() * noise
        score = scores.get(entity.id)
        if score is None:
            continue

        if isinstance(entity, Professor):
            source = "roster"
            matched = matched_interests(entity.interests, user_interests or [])
        else:
            source = "openalex"
            matched = []

        ranked.append(
            Recommendation(
                entity_id=entity.id,
                name=entity.name,
                source=source,
                score=score,
                match_score=score.raw + jitter,
                matched_interests=matched,
            )
        )

    ranked.sort(key=lambda r: r.match_score, reverse=True)
    return [r for r in ranked if r.score.stars >= min_stars][:limit]
