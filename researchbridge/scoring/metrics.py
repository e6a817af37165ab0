"""Per-entity metric extraction.

Every function here is a pure function of one entity's own fields: no
batch context, no exceptions. Missing optional fields fall back to
neutral defaults.
"""

import math

from researchbridge.models.config import ResearcherPolicy
from researchbridge.models.professor import Professor
from researchbridge.models.researcher import Researcher
from researchbridge.models.score import MetricSet


UNDERGRAD_OPTION_MARKERS = ("undergrad", "honours", "work learn", "work-learn")


def clamp01(x: float) -> float:
    """Clamp ``x`` into [0, 1]."""
    return max(0.0, min(1.0, x))


def log1p(x: float) -> float:
    """``ln(1 + x)`` with negative inputs treated as zero."""
    return math.log1p(max(0.0, x))


def is_blocklisted(name: str, blocklist: list[str]) -> bool:
    """Fuzzy match ``name`` against the famous-figure blocklist.

    Matches when the name contains a blocklist entry, or when an entry
    contains the name's first token. Blank names never match.
    """
    name_lower = name.lower().strip()
    if not name_lower:
        return False

    first_token = name_lower.split()[0]
    for famous in blocklist:
        if famous in name_lower or first_token in famous:
            return True
    return False


def has_citation_anomaly(
    total_works: int, citations: int, ratio_threshold: float
) -> bool:
    """True when citations per work exceed ``ratio_threshold``."""
    return total_works > 0 and citations > total_works * ratio_threshold


def calculate_relevance_score(researcher: Researcher) -> float:
    """Matched works over total works; neutral 0.5 without a denominator."""
    total_works = researcher.total_works
    if total_works == 0:
        return 0.5
    return clamp01(researcher.matched_works_count / total_works)


def calculate_accessibility_score(researcher: Researcher) -> float:
    """ORCID and institution presence as a 0-1 reachability proxy."""
    score = 0.5
    if researcher.has_orcid:
        score += 0.3
    if researcher.has_institution:
        score += 0.2
    return clamp01(score)


def calculate_openness_score(professor: Professor) -> float:
    """How open the professor appears to taking on undergraduates."""
    score = 0.3

    if professor.is_recruiting:
        score += 0.4

    if professor.research_options:
        undergrad_mention = any(
            marker in option.lower()
            for option in professor.research_options
            for marker in UNDERGRAD_OPTION_MARKERS
        )
        score += 0.25 if undergrad_mention else 0.1

    if professor.project_areas:
        score += min(0.2, len(professor.project_areas) * 0.05)

    if professor.recruitment and professor.recruitment.desired_start_dates:
        score += 0.1

    return clamp01(score)


def calculate_fit_score(professor: Professor) -> float:
    """Breadth and depth of the professor's listed research profile."""
    score = 0.3

    num_interests = len(professor.interests)
    if num_interests > 8:
        score += 0.35
    elif num_interests > 5:
        score += 0.25
    elif num_interests > 2:
        score += 0.15
    elif num_interests > 0:
        score += 0.05

    if len(professor.methodology) > 3:
        score += 0.2
    elif professor.methodology:
        score += 0.1

    if professor.research_classification:
        score += 0.1

    if len(professor.departments) > 1:
        score += 0.1

    return clamp01(score)


def extract_researcher_metrics(
    researcher: Researcher, policy: ResearcherPolicy
) -> MetricSet:
    """Derive the researcher MetricSet.

    Args:
        researcher: Researcher to extract metrics from
        policy: Researcher policy (blocklist and anomaly threshold)

    Returns:
        MetricSet with relevance/accessibility sub-scores, productivity/impact
        population metrics and override signals
    """
    total_works = researcher.total_works
    citations = researcher.citations

    return MetricSet(
        sub_scores={
            "relevance": calculate_relevance_score(researcher),
            "accessibility": calculate_accessibility_score(researcher),
        },
        population_metrics={
            "productivity": log1p(total_works),
            "impact": log1p(citations),
        },
        signals={
            "has_orcid": researcher.has_orcid,
            "has_institution": researcher.has_institution,
            "has_citations": citations > 0,
            "has_works": (researcher.works_count or 0) > 5,
            "blocklisted": is_blocklisted(researcher.name, policy.blocklist),
            "citation_anomaly": has_citation_anomaly(
                total_works, citations, policy.citation_ratio_threshold
            ),
        },
        counts={"total_works": total_works, "citations": citations},
    )


def extract_professor_metrics(professor: Professor) -> MetricSet:
    """Derive the professor MetricSet.

    Interest count stands in for lab activity and affiliation count for
    how busy/visible the professor is; no citation data exists here.
    """
    num_interests = len(professor.interests)
    num_affiliations = len(professor.affiliations)

    return MetricSet(
        sub_scores={
            "openness": calculate_openness_score(professor),
            "fit": calculate_fit_score(professor),
        },
        population_metrics={
            "activity": log1p(num_interests),
            "busy": log1p(num_affiliations),
        },
        signals={
            "has_email": bool(professor.email),
            "has_interests": num_interests > 0,
            "recruiting": professor.is_recruiting,
            "has_project_areas": bool(professor.project_areas),
            "has_methodology": bool(professor.methodology),
            "has_research_options": bool(professor.research_options),
        },
        counts={
            "interests": num_interests,
            "affiliations": num_affiliations,
            "project_areas": len(professor.project_areas),
        },
    )
