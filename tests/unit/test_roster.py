"""Unit tests for roster loading and interest filtering."""

import json

import pytest

from researchbridge.sources.roster import filter_by_interests, load_roster
from tests.conftest import make_professor


@pytest.fixture
def roster_file(tmp_path):
    path = tmp_path / "professors.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "p1",
                    "firstName": "Ada",
                    "lastName": "Lovelace",
                    "interests": ["Machine Learning", "compilers"],
                },
                {"id": "p2", "firstName": "Rosalind", "interests": ["DNA structure"]},
                {"id": "p1", "firstName": "Duplicate"},
            ]
        )
    )
    return path


def test_load_roster(roster_file):
    professors = load_roster(roster_file)

    assert [p.id for p in professors] == ["p1", "p2"]
    assert professors[0].name == "Ada Lovelace"


def test_load_roster_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Roster file not found"):
        load_roster(tmp_path / "missing.json")


def test_load_roster_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{")

    with pytest.raises(ValueError, match="Invalid roster JSON"):
        load_roster(path)


def test_load_roster_invalid_entries(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"firstName": "No Id"}]))

    with pytest.raises(ValueError, match="Invalid roster entries"):
        load_roster(path)


def test_filter_by_interests_substring_either_way():
    roster = [
        make_professor("p1", interests=["Machine Learning"]),
        make_professor("p2", interests=["DNA structure"]),
        make_professor("p3", interests=[]),
    ]

    assert [p.id for p in filter_by_interests(roster, ["machine-learning"])] == ["p1"]
    assert [p.id for p in filter_by_interests(roster, ["dna"])] == ["p2"]
    assert [p.id for p in filter_by_interests(roster, ["dna structure and folding"])] == ["p2"]


def test_filter_by_interests_without_interests_returns_all():
    roster = [make_professor("p1"), make_professor("p2")]

    assert filter_by_interests(roster, []) == roster
    assert filter_by_interests(roster, ["  ", "!!"]) == roster
