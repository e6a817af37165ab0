"""Unit tests for id-based de-duplication."""

from researchbridge.utils.deduplication import deduplicate_by_id
from tests.conftest import make_professor, make_researcher


def test_keeps_first_occurrence_in_order():
    first = make_researcher("A1", name="First")
    researchers = [first, make_researcher("A2"), make_researcher("A1", name="Second")]

    unique = deduplicate_by_id(researchers)

    assert [r.id for r in unique] == ["A1", "A2"]
    assert unique[0] is first


def test_no_duplicates_unchanged():
    professors = [make_professor("P1"), make_professor("P2")]

    assert deduplicate_by_id(professors) == professors


def test_empty():
    assert deduplicate_by_id([]) == []
