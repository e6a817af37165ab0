"""Percentile to star rating mapping and star labels.

Two mapping strategies exist side by side: fixed percentile bands
(researcher results) and a continuous linear mapping (professor
results). Both return half-star values in [1.0, 5.0].
"""

import math


MIN_STARS = 1.0
MAX_STARS = 5.0

# (minimum percentile, stars), checked top-down
PERCENTILE_BANDS: tuple[tuple[float, float], ...] = (
    (90.0, 5.0),
    (80.0, 4.5),
    (70.0, 4.0),
    (60.0, 3.5),
    (50.0, 3.0),
    (40.0, 2.5),
    (30.0, 2.0),
    (20.0, 1.5),
)

# (minimum stars, label), checked top-down
RESEARCHER_LABELS: tuple[tuple[float, str], ...] = (
    (4.5, "Excellent match"),
    (3.5, "Very good match"),
    (2.5, "Good match"),
    (1.5, "Fair match"),
)
RESEARCHER_FALLBACK_LABEL = "Poor match"

PROFESSOR_LABELS: tuple[tuple[float, str], ...] = (
    (4.5, "Excellent fit"),
    (3.5, "Very good fit"),
    (2.5, "Good fit"),
    (1.5, "Fair fit"),
)
PROFESSOR_FALLBACK_LABEL = "Limited info"


def round_to_half(x: float) -> float:
    """Round to the nearest 0.5, halves rounding up."""
    return math.floor(x * 2 + 0.5) / 2


def clamp_stars(stars: float) -> float:
    return max(MIN_STARS, min(MAX_STARS, stars))


def stars_from_percentile_bands(percentile: float) -> float:
    """Map a percentile (0-100) to stars via fixed 10-point bands."""
    for threshold, stars in PERCENTILE_BANDS:
        if percentile >= threshold:
            return stars
    return MIN_STARS


def stars_from_percentile_continuous(percentile: float) -> float:
    """Map a percentile (0-100) linearly onto 1-5 stars, rounded to halves."""
    fraction = max(0.0, min(1.0, percentile / 100.0))
    return clamp_stars(round_to_half(1 + 4 * fraction))


def _label_for(
    stars: float, table: tuple[tuple[float, str], ...], fallback: str
) -> str:
    for threshold, label in table:
        if stars >= threshold:
            return label
    return fallback


def researcher_star_label(stars: float) -> str:
    """Human-readable label for a researcher star rating."""
    return _label_for(stars, RESEARCHER_LABELS, RESEARCHER_FALLBACK_LABEL)


def professor_star_label(stars: float) -> str:
    """Human-readable label for a professor star rating."""
    return _label_for(stars, PROFESSOR_LABELS, PROFESSOR_FALLBACK_LABEL)
