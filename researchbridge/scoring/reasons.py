"""Explanations and confidence labels for scored entities.

Reasons are derived from the same intermediate values the raw scorer
uses (MetricSet, z-scores, fired overrides) and never feed back into the
score.
"""

from researchbridge.models.score import Confidence, MetricSet, RawScore


BLOCKLISTED_REASON = "⛔ Known historical/political figure (not an active researcher)"
NO_INSTITUTION_REASON = "⚠️ No current institution listed (may not be active researcher)"
CITATION_ANOMALY_REASON = (
    "⚠️ Very high citations-to-works ratio (may be historical/public figure)"
)
PROFILE_FALLBACK_REASON = "Profile available"


def keyword_reason(matches: int) -> str:
    return f"Matches {matches} of your keywords"


def researcher_reasons(
    metrics: MetricSet, zscores: dict[str, float], raw: RawScore
) -> list[str]:
    """Ordered justification strings for a researcher score."""
    if "blocklisted" in raw.overrides:
        return [BLOCKLISTED_REASON]

    reasons: list[str] = []

    relevance = metrics.sub_scores.get("relevance", 0.5)
    if relevance > 0.8:
        reasons.append("Very high match ratio for your search")
    elif relevance > 0.6:
        reasons.append("Good match ratio for your search")
    elif relevance < 0.3:
        reasons.append("Lower match ratio (fewer relevant works)")

    productivity_z = zscores.get("productivity", 0.0)
    if productivity_z > 1.0:
        reasons.append("High research productivity")
    elif productivity_z < -1.0:
        reasons.append("Limited publication history")

    impact_z = zscores.get("impact", 0.0)
    if impact_z > 1.5:
        reasons.append("Very high citation impact")
    elif impact_z > 0.5:
        reasons.append("Good citation impact")
    elif impact_z < -0.5:
        reasons.append("Lower citation count (may be early career)")

    if metrics.signals.get("has_orcid"):
        reasons.append("Has ORCID (professional profile maintained)")

    if "no_institution" in raw.overrides:
        reasons.append(NO_INSTITUTION_REASON)

    if "citation_anomaly" in raw.overrides:
        reasons.append(CITATION_ANOMALY_REASON)

    if raw.keyword_matches:
        reasons.append(keyword_reason(raw.keyword_matches))

    return reasons


def professor_reasons(
    metrics: MetricSet, zscores: dict[str, float], raw: RawScore
) -> list[str]:
    """Ordered justification strings for a professor score."""
    reasons: list[str] = []
    openness = metrics.sub_scores.get("openness", 0.0)
    fit = metrics.sub_scores.get("fit", 0.0)

    if metrics.signals.get("has_email"):
        reasons.append("Direct email available")
    if openness >= 0.7:
        reasons.append("Undergrad-friendly signals")
    if openness >= 0.5:
        reasons.append("On undergrad research list")
    if fit >= 0.7:
        reasons.append("Strong research diversity")
    if metrics.counts.get("interests", 0) >= 8:
        reasons.append("Large research program")
    if metrics.signals.get("recruiting"):
        reasons.append("Currently recruiting")

    project_areas = metrics.counts.get("project_areas", 0)
    if project_areas:
        reasons.append(f"{project_areas} project areas")

    if metrics.counts.get("affiliations", 0) > 3:
        reasons.append("Highly visible (may be busy)")

    if raw.keyword_matches:
        reasons.append(keyword_reason(raw.keyword_matches))

    return reasons or [PROFILE_FALLBACK_REASON]


def confidence_from_count(populated: int, high: int, medium: int) -> Confidence:
    """Map a populated-field count onto Low/Medium/High."""
    if populated >= high:
        return "High"
    if populated >= medium:
        return "Medium"
    return "Low"


def researcher_confidence(metrics: MetricSet, high: int = 4, medium: int = 3) -> Confidence:
    """Confidence from institution, ORCID, citations and publication history."""
    populated = sum(
        1
        for signal in ("has_institution", "has_orcid", "has_citations", "has_works")
        if metrics.signals.get(signal)
    )
    return confidence_from_count(populated, high, medium)


def professor_confidence(metrics: MetricSet, high: int = 4, medium: int = 2) -> Confidence:
    """Confidence from how much of the roster profile is filled in."""
    populated = sum(
        1
        for signal in (
            "has_interests",
            "recruiting",
            "has_project_areas",
            "has_methodology",
            "has_research_options",
        )
        if metrics.signals.get(signal)
    )
    return confidence_from_count(populated, high, medium)
