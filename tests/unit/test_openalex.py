"""
Unit tests for the OpenAlex / ROR client.

HTTP is faked with httpx.MockTransport; no network access.

Tests cover:
- Author payload conversion at the ingestion boundary
- Request headers and query parameters
- Error mapping (timeouts, HTTP errors, malformed JSON)
- Retry on transport errors
"""

import httpx
import pytest

from researchbridge.models.config import SourceConfig
from researchbridge.sources.openalex import (
    OpenAlexClient,
    SourceResponseError,
    SourceTimeoutError,
    author_institutions,
    institution_from_payload,
    researcher_from_author,
)


def make_client(handler, **config_overrides) -> OpenAlexClient:
    config = SourceConfig(**{"max_retries": 1, **config_overrides})
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAlexClient(config, correlation_id="test", http_client=http_client)


# ============================================================================
# Payload conversion
# ============================================================================


def test_researcher_from_author_full_payload():
    author = {
        "id": "https://openalex.org/A123",
        "display_name": "Jane Smith",
        "orcid": "https://orcid.org/0000-0002-1825-0097",
        "works_count": 42,
        "cited_by_count": 900,
        "last_known_institution": {
            "display_name": "University of British Columbia",
            "ror": "https://ror.org/03rmrcq20",
            "country_code": "CA",
            "type": "education",
        },
    }

    researcher = researcher_from_author(author, matched_works_count=7)

    assert researcher.id == "https://openalex.org/A123"
    assert researcher.matched_works_count == 7
    assert researcher.works_count == 42
    assert researcher.last_known_institution.name == "University of British Columbia"
    assert researcher.last_known_institution.country == "CA"


def test_researcher_from_author_defaults():
    researcher = researcher_from_author({"id": "https://openalex.org/A1"})

    assert researcher.name == ""
    assert researcher.matched_works_count == 0
    assert researcher.works_count is None
    assert researcher.last_known_institution is None


def test_researcher_from_author_matched_defaults_to_total():
    researcher = researcher_from_author({"id": "A1", "works_count": 12})

    assert researcher.matched_works_count == 12


def test_researcher_from_author_uses_last_known_institutions_list():
    author = {
        "id": "A1",
        "last_known_institutions": [{"display_name": "ETH Zurich"}, {"display_name": "EPFL"}],
    }

    assert researcher_from_author(author).last_known_institution.name == "ETH Zurich"


def test_author_institutions_prefers_singular_key():
    author = {
        "last_known_institution": {"display_name": "MIT"},
        "last_known_institutions": [{"display_name": "Harvard"}],
    }

    assert author_institutions(author) == [{"display_name": "MIT"}]
    assert author_institutions({"last_known_institutions": None}) == []
    assert author_institutions({}) == []


def test_researcher_from_author_rejects_missing_id():
    assert researcher_from_author({"display_name": "No Id"}) is None


def test_researcher_from_author_rejects_invalid_counts():
    assert researcher_from_author({"id": "A1", "works_count": -5}) is None


def test_institution_without_name_is_dropped():
    assert institution_from_payload({"ror": "https://ror.org/x"}) is None
    assert institution_from_payload(None) is None


# ============================================================================
# Requests
# ============================================================================


@pytest.mark.asyncio
async def test_fetch_json_sends_contact_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["headers"] = request.headers
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"results": []})

    async with make_client(handler, contact_email="me@example.edu") as client:
        await client.fetch_json("https://api.openalex.org/authors", {"search": "smith"})

    assert "mailto:me@example.edu" in seen["headers"]["user-agent"]
    assert seen["headers"]["from"] == "me@example.edu"
    assert seen["params"] == {"search": "smith"}


@pytest.mark.asyncio
async def test_search_institutions_keeps_ror_ids():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/organizations")
        return httpx.Response(
            200,
            json={
                "items": [
                    {"id": "https://ror.org/03rmrcq20"},
                    {"id": "not-a-ror-id"},
                    {"id": "https://ror.org/01aff2v68"},
                    "garbage",
                ]
            },
        )

    async with make_client(handler) as client:
        ids = await client.search_institutions("Vancouver", limit=5)

    assert ids == ["https://ror.org/03rmrcq20", "https://ror.org/01aff2v68"]


@pytest.mark.asyncio
async def test_get_authors_batches_ids_in_one_filter():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["filter"] = request.url.params["filter"]
        return httpx.Response(200, json={"results": [{"id": "A1"}, {"id": "A2"}]})

    async with make_client(handler) as client:
        authors = await client.get_authors(["A1", "A2"])

    assert seen["filter"] == "id:A1|A2"
    assert [a["id"] for a in authors] == ["A1", "A2"]


@pytest.mark.asyncio
async def test_get_authors_empty_ids_skips_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    async with make_client(handler) as client:
        assert await client.get_authors([]) == []


@pytest.mark.asyncio
async def test_group_works_by_author_sorted_by_count():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["group_by"] == "authorships.author.id"
        return httpx.Response(
            200,
            json={
                "group_by": [
                    {"key": "A1", "count": 3},
                    {"key": "A2", "count": 9},
                    {"key": None, "count": 50},
                ]
            },
        )

    async with make_client(handler) as client:
        groups = await client.group_works_by_author("primary_topic.id:T1")

    assert groups == [{"key": "A2", "count": 9}, {"key": "A1", "count": 3}]


# ============================================================================
# Errors
# ============================================================================


@pytest.mark.asyncio
async def test_timeout_raises_source_timeout_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with make_client(handler) as client:
        with pytest.raises(SourceTimeoutError):
            await client.search_topics("genomics")


@pytest.mark.asyncio
async def test_http_error_status_raises_response_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    async with make_client(handler) as client:
        with pytest.raises(SourceResponseError, match="HTTP 503"):
            await client.search_authors("smith")


@pytest.mark.asyncio
async def test_malformed_json_raises_response_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    async with make_client(handler) as client:
        with pytest.raises(SourceResponseError, match="Invalid JSON"):
            await client.search_topics("genomics")


@pytest.mark.asyncio
async def test_non_object_json_raises_response_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[1, 2, 3])

    async with make_client(handler) as client:
        with pytest.raises(SourceResponseError):
            await client.search_topics("genomics")


@pytest.mark.asyncio
async def test_network_error_retried_then_succeeds():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"results": [{"id": "T1"}]})

    async with make_client(handler, max_retries=2) as client:
        topics = await client.search_topics("genomics")

    assert calls["count"] == 2
    assert topics == [{"id": "T1"}]


@pytest.mark.asyncio
async def test_injected_http_client_left_open():
    """The caller owns an injected client; the OpenAlex client must not close it."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={}))
    )

    async with OpenAlexClient(SourceConfig(), http_client=http_client):
        pass

    assert http_client.is_closed is False
    await http_client.aclose()
