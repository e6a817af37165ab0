"""OpenAlex and ROR API client.

Every request is bound to a fixed timeout (15 s by default). Transport
failures are retried with exponential backoff; anything still failing is
surfaced as a SourceError subclass so callers can degrade gracefully.

This module is also the ingestion boundary: raw author payloads are
turned into fully-typed, default-filled Researcher models here, so the
scoring core never sees untyped JSON.
"""

from typing import Any, Optional

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from researchbridge.models.config import SourceConfig
from researchbridge.models.researcher import Institution, Researcher
from researchbridge.utils.logger import get_logger
from researchbridge.utils.rate_limiter import HostRateLimiter


class SourceError(Exception):
    """Base exception for external data source failures."""

    pass


class SourceTimeoutError(SourceError):
    """Request exceeded its timeout after all retries."""

    pass


class SourceResponseError(SourceError):
    """Non-2xx status, transport failure or malformed JSON body."""

    pass


def institution_from_payload(payload: Optional[dict[str, Any]]) -> Optional[Institution]:
    """Convert an OpenAlex ``last_known_institution`` object.

    Returns None when the object is absent or has no display name.
    """
    if not payload or not payload.get("display_name"):
        return None

    return Institution(
        name=payload["display_name"],
        ror=payload.get("ror"),
        country=payload.get("country_code"),
        type=payload.get("type"),
    )


def author_institutions(author: dict[str, Any]) -> list[dict[str, Any]]:
    """Institution objects of an OpenAlex author, most recent first.

    Reads ``last_known_institution`` and falls back to the
    ``last_known_institutions`` list used by newer payloads.
    """
    institution = author.get("last_known_institution")
    if institution:
        return [institution]
    return [i for i in author.get("last_known_institutions") or [] if i]


def researcher_from_author(
    author: dict[str, Any], matched_works_count: Optional[int] = None
) -> Optional[Researcher]:
    """Convert an OpenAlex author payload into a Researcher.

    Args:
        author: Raw author JSON object
        matched_works_count: Works matching the active filter; defaults to
            the author's total works (name searches have no filter)

    Returns:
        Researcher, or None when the payload has no usable id
    """
    author_id = author.get("id")
    if not isinstance(author_id, str) or not author_id:
        return None

    works_count = author.get("works_count")
    institutions = author_institutions(author)
    institution_payload = institutions[0] if institutions else None

    if matched_works_count is None:
        matched_works_count = works_count or 0

    try:
        return Researcher(
            id=author_id,
            name=author.get("display_name"),
            orcid=author.get("orcid"),
            matched_works_count=max(0, matched_works_count),
            works_count=works_count,
            cited_by_count=author.get("cited_by_count"),
            last_known_institution=institution_from_payload(institution_payload),
        )
    except ValidationError:
        return None


class OpenAlexClient:
    """Async client for the OpenAlex and ROR REST APIs.

    Usage:
        async with OpenAlexClient(config) as client:
            authors = await client.search_authors("Jane Smith")
    """

    def __init__(
        self,
        config: Optional[SourceConfig] = None,
        correlation_id: str = "",
        http_client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[HostRateLimiter] = None,
    ):
        """Initialize the client.

        Args:
            config: Source configuration (base URLs, timeout, retries)
            correlation_id: Correlation ID for logging
            http_client: Pre-built httpx client (tests inject a MockTransport)
            rate_limiter: Shared per-host rate limiter
        """
        self.config = config or SourceConfig()
        self.correlation_id = correlation_id
        self.rate_limiter = rate_limiter or HostRateLimiter.from_config(self.config)
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.request_timeout),
            follow_redirects=True,
        )
        self.headers = {
            "User-Agent": f"ResearchBridge/0.1 (mailto:{self.config.contact_email})",
            "From": self.config.contact_email,
            "Accept": "application/json",
        }
        self.logger: Any = get_logger(
            correlation_id=correlation_id,
            phase="discovery",
            component="openalex_client",
        )

    async def __aenter__(self) -> "OpenAlexClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def fetch_json(
        self, url: str, params: Optional[dict[str, str]] = None
    ) -> dict[str, Any]:
        """GET ``url`` and decode the JSON body.

        Raises:
            SourceTimeoutError: Timed out on every attempt
            SourceResponseError: Non-2xx status, network failure or invalid JSON
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.config.max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(
                    (httpx.TimeoutException, httpx.NetworkError)
                ),
                reraise=True,
            ):
                with attempt:
                    await self.rate_limiter.acquire(url)
                    self.logger.debug("Requesting", url=url, params=params)
                    response = await self.http_client.get(
                        url,
                        params=params,
                        headers=self.headers,
                        timeout=self.config.request_timeout,
                    )
        except httpx.TimeoutException as e:
            self.logger.error("Request timed out", url=url, error=str(e))
            raise SourceTimeoutError(
                f"Timed out after {self.config.request_timeout}s for {url}"
            ) from e
        except httpx.HTTPError as e:
            self.logger.error("Request failed", url=url, error=str(e))
            raise SourceResponseError(f"Request failed for {url}: {e}") from e

        if response.is_error:
            raise SourceResponseError(f"HTTP {response.status_code} for {url}")

        try:
            data = response.json()
        except ValueError as e:
            raise SourceResponseError(
                f"Invalid JSON from {url}: {response.text[:100]}"
            ) from e

        if not isinstance(data, dict):
            raise SourceResponseError(f"Unexpected JSON payload from {url}")

        return data

    async def search_institutions(self, query: str, limit: int = 10) -> list[str]:
        """ROR organization ids matching a city or institution name."""
        data = await self.fetch_json(
            f"{self.config.ror_base_url}/organizations",
            params={"query": query, "page": "1"},
        )
        ids = [
            item.get("id")
            for item in data.get("items") or []
            if isinstance(item, dict)
        ]
        return [i for i in ids if isinstance(i, str) and "ror.org/" in i][:limit]

    async def search_topics(self, area: str) -> list[dict[str, Any]]:
        """OpenAlex topics matching a research area, best first."""
        data = await self.fetch_json(
            f"{self.config.openalex_base_url}/topics", params={"search": area}
        )
        return [t for t in data.get("results") or [] if isinstance(t, dict)]

    async def search_authors(
        self, name: str, page: int = 1, per_page: int = 50
    ) -> list[dict[str, Any]]:
        """Author records matching a name search."""
        data = await self.fetch_json(
            f"{self.config.openalex_base_url}/authors",
            params={"search": name, "per-page": str(per_page), "page": str(page)},
        )
        return [a for a in data.get("results") or [] if isinstance(a, dict)]

    async def get_authors(self, author_ids: list[str]) -> list[dict[str, Any]]:
        """Author records for explicit ids (single batched request)."""
        if not author_ids:
            return []

        data = await self.fetch_json(
            f"{self.config.openalex_base_url}/authors",
            params={"filter": f"id:{'|'.join(author_ids)}", "per-page": "200"},
        )
        return [a for a in data.get("results") or [] if isinstance(a, dict)]

    async def group_works_by_author(self, work_filter: str) -> list[dict[str, Any]]:
        """Works matching ``work_filter`` grouped by author id, most works first.

        Returns:
            List of {"key": author_id, "count": matched_works}
        """
        data = await self.fetch_json(
            f"{self.config.openalex_base_url}/works",
            params={
                "filter": work_filter,
                "group_by": "authorships.author.id",
                "per-page": "200",
            },
        )
        groups = [
            {"key": g["key"], "count": g.get("count") or 0}
            for g in data.get("group_by") or []
            if isinstance(g, dict) and isinstance(g.get("key"), str)
        ]
        return sorted(groups, key=lambda g: g["count"], reverse=True)
