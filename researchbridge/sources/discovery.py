"""Researcher discovery over OpenAlex and ROR.

Two entry points:

- ``discover_researchers``: one search (city / institution / name / area),
  mirroring the discover endpoint.
- ``discover_for_keywords``: fan-out of one area search per keyword with
  bounded concurrency, partial-failure tolerance and de-duplication by id.
"""

import asyncio
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from researchbridge.models.config import DiscoveryConfig, ResearcherPolicy
from researchbridge.models.researcher import Researcher
from researchbridge.scoring.metrics import is_blocklisted
from researchbridge.sources.openalex import (
    OpenAlexClient,
    SourceError,
    author_institutions,
    researcher_from_author,
)
from researchbridge.utils.deduplication import deduplicate_by_id
from researchbridge.utils.logger import get_logger


class DiscoveryQueryError(ValueError):
    """Raised when a discovery query has no search parameter."""

    pass


class DiscoveryQuery(BaseModel):
    """Search parameters for one discovery request."""

    city: str = ""
    institution: str = ""
    name: str = ""
    area: str = ""
    active: bool = False
    page: int = Field(default=1, ge=1)

    def is_empty(self) -> bool:
        return not (
            self.city.strip()
            or self.institution.strip()
            or self.name.strip()
            or self.area.strip()
        )


class MatchedTopic(BaseModel):
    id: str
    display_name: str = ""
    score: Optional[float] = None


class DiscoveryResult(BaseModel):
    """Discovery response: matched researchers plus search diagnostics."""

    query: DiscoveryQuery
    matched_institutions: int = 0
    matched_topics: list[MatchedTopic] = Field(default_factory=list)
    researchers: list[Researcher] = Field(default_factory=list)
    suggested_researchers: list[Researcher] = Field(default_factory=list)
    page: int = 1
    per_page: int = 50

    @property
    def has_results(self) -> bool:
        return bool(self.researchers)


def is_valid_researcher(
    researcher: Researcher, policy: ResearcherPolicy, min_works: int = 2
) -> bool:
    """Drop blocklisted figures and one-off records with too few works."""
    if is_blocklisted(researcher.name, policy.blocklist):
        return False
    return researcher.total_works >= min_works


def at_institution(author: dict, ror_ids: list[str]) -> bool:
    """True when any of the author's institutions carries one of ``ror_ids``."""
    return any(
        rid in (institution.get("ror") or "")
        for institution in author_institutions(author)
        for rid in ror_ids
    )


def _by_matched_works(researchers: list[Researcher]) -> list[Researcher]:
    return sorted(researchers, key=lambda r: r.matched_works_count, reverse=True)


async def discover_researchers(
    client: OpenAlexClient,
    query: DiscoveryQuery,
    config: Optional[DiscoveryConfig] = None,
    policy: Optional[ResearcherPolicy] = None,
    today: Optional[date] = None,
) -> DiscoveryResult:
    """Run one discovery search.

    Flow:
        1. ROR lookup for city/institution -> institution ids
        2. OpenAlex topic lookup for area -> topic ids
        3. Name search (filtered by institution) or works grouped by author
        4. Optional "active" filter (works in the last N years)
        5. Valid-researcher filter; name-only suggestions when nothing is left

    Args:
        client: OpenAlex client
        query: Search parameters
        config: Discovery tuning
        policy: Researcher policy (blocklist)
        today: Reference date for the active-years window

    Returns:
        DiscoveryResult sorted by matched works

    Raises:
        DiscoveryQueryError: If no search parameter is given
        SourceError: If a required upstream request fails
    """
    config = config or DiscoveryConfig()
    policy = policy or ResearcherPolicy()
    today = today or date.today()
    logger = get_logger(
        correlation_id=client.correlation_id or None,
        phase="discovery",
        component="discover_researchers",
    )

    if query.is_empty():
        raise DiscoveryQueryError("At least one search parameter is required.")

    city = query.city.strip()
    institution = query.institution.strip()
    name = query.name.strip()
    area = query.area.strip()

    logger.info(
        "Discovery started",
        city=city,
        institution=institution,
        name=name,
        area=area,
        active=query.active,
        page=query.page,
    )

    result = DiscoveryResult(query=query, page=query.page, per_page=config.per_page)

    ror_ids: list[str] = []
    if city or institution:
        ror_ids = await client.search_institutions(
            institution or city, limit=config.max_institutions
        )
    result.matched_institutions = len(ror_ids)

    topic_ids: list[str] = []
    if area:
        topics = (await client.search_topics(area))[: config.max_topics]
        result.matched_topics = [
            MatchedTopic(
                id=t["id"],
                display_name=t.get("display_name") or t.get("name") or "",
                score=t.get("relevance_score") or t.get("score"),
            )
            for t in topics
            if isinstance(t.get("id"), str)
        ]
        topic_ids = [t.id for t in result.matched_topics]

    filter_parts: list[str] = []
    if ror_ids:
        filter_parts.append(f"institutions.ror:{'|'.join(ror_ids)}")
    if topic_ids:
        filter_parts.append(f"primary_topic.id:{'|'.join(topic_ids)}")

    if not filter_parts and not name:
        logger.info("No institutions or topics matched", city=city, area=area)
        return result

    researchers: list[Researcher] = []
    if name:
        authors = await client.search_authors(
            name, page=query.page, per_page=config.per_page
        )
        if ror_ids:
            authors = [a for a in authors if at_institution(a, ror_ids)]
        researchers = [
            r for r in (researcher_from_author(a) for a in authors) if r is not None
        ]
    else:
        work_filters = list(filter_parts)
        if query.active:
            min_year = today.year - config.active_years
            work_filters.append(f"publication_year:{min_year}-{today.year}")

        groups = await client.group_works_by_author(",".join(work_filters))
        start = (query.page - 1) * config.per_page
        page_groups = groups[start : start + config.per_page]
        count_by_id = {g["key"]: g["count"] for g in page_groups}

        if not count_by_id:
            return result

        authors = await client.get_authors(list(count_by_id))
        researchers = [
            r
            for r in (
                researcher_from_author(a, count_by_id.get(a.get("id"), 0))
                for a in authors
            )
            if r is not None
        ]
        if query.active:
            researchers = [r for r in researchers if r.matched_works_count > 0]

    researchers = [
        r for r in researchers if is_valid_researcher(r, policy, config.min_works)
    ]
    result.researchers = _by_matched_works(deduplicate_by_id(researchers))

    if not result.researchers and name:
        try:
            authors = await client.search_authors(
                name, per_page=config.suggestions_per_page
            )
        except SourceError as e:
            logger.warning("Suggestion lookup failed", name=name, error=str(e))
        else:
            suggestions = [
                r
                for r in (researcher_from_author(a) for a in authors)
                if r is not None and is_valid_researcher(r, policy, config.min_works)
            ]
            result.suggested_researchers = _by_matched_works(
                suggestions[: config.suggestions_limit]
            )

    logger.info(
        "Discovery complete",
        researchers=len(result.researchers),
        suggestions=len(result.suggested_researchers),
        matched_institutions=result.matched_institutions,
    )
    return result


async def discover_for_keywords(
    client: OpenAlexClient,
    keywords: list[str],
    config: Optional[DiscoveryConfig] = None,
    policy: Optional[ResearcherPolicy] = None,
    max_concurrent: int = 5,
    active: bool = True,
    today: Optional[date] = None,
) -> list[Researcher]:
    """Search one research area per keyword concurrently and merge.

    A keyword whose search fails contributes nothing; the others still
    return. Results are de-duplicated by id in keyword order.

    Args:
        client: OpenAlex client
        keywords: Area keywords to search
        config: Discovery tuning (results kept per keyword)
        policy: Researcher policy (blocklist)
        max_concurrent: Maximum searches in flight
        active: Restrict to recently active researchers
        today: Reference date for the active-years window

    Returns:
        Merged, de-duplicated researchers
    """
    config = config or DiscoveryConfig()
    logger = get_logger(
        correlation_id=client.correlation_id or None,
        phase="discovery",
        component="keyword_fanout",
    )

    search_terms = [k.strip() for k in keywords if k.strip()]
    if not search_terms:
        return []

    semaphore = asyncio.Semaphore(max_concurrent)

    async def search_one(keyword: str) -> list[Researcher]:
        async with semaphore:
            result = await discover_researchers(
                client,
                DiscoveryQuery(area=keyword, active=active),
                config=config,
                policy=policy,
                today=today,
            )
            return result.researchers[: config.results_per_keyword]

    results = await asyncio.gather(
        *(search_one(k) for k in search_terms), return_exceptions=True
    )

    merged: list[Researcher] = []
    failed = 0
    for keyword, outcome in zip(search_terms, results):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            failed += 1
            logger.warning(
                "Keyword search failed, continuing without it",
                keyword=keyword,
                error=str(outcome),
            )
            continue
        merged.extend(outcome)

    unique = deduplicate_by_id(merged)
    logger.info(
        "Keyword fan-out complete",
        keywords=len(search_terms),
        failed=failed,
        researchers=len(unique),
    )
    return unique
