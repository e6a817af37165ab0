"""
Unit tests for configuration models.

Tests cover:
- Policy table defaults (weights, boosts, override thresholds)
- Field validation
- SystemParams loading from file and environment
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from researchbridge.models.config import (
    DEFAULT_BLOCKLIST,
    KeywordBoost,
    ProfessorPolicy,
    ResearcherPolicy,
    SystemParams,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment variables out of config tests."""
    monkeypatch.delenv("RESEARCHBRIDGE_CONFIG", raising=False)
    monkeypatch.delenv("OPENALEX_MAILTO", raising=False)
    monkeypatch.setattr("researchbridge.models.config.load_dotenv", lambda: False)


# ============================================================================
# Policy defaults
# ============================================================================


def test_researcher_policy_defaults():
    policy = ResearcherPolicy()

    assert policy.weights.relevance == 1.5
    assert policy.weights.productivity == 0.7
    assert policy.weights.impact == 0.9
    assert policy.weights.accessibility == 0.4
    assert policy.keyword_boost.per_match == 0.3
    assert policy.keyword_boost.cap == 1.5
    assert policy.blocklist_score == -100.0
    assert policy.no_institution_factor == 0.05
    assert policy.citation_ratio_threshold == 20.0
    assert policy.citation_anomaly_factor == 0.2
    assert "napoleon" in policy.blocklist
    assert len(policy.blocklist) == len(DEFAULT_BLOCKLIST)


def test_professor_policy_defaults():
    policy = ProfessorPolicy()

    assert policy.weights.openness == 1.4
    assert policy.weights.fit == 1.1
    assert policy.weights.activity == 0.8
    assert policy.weights.busy == 0.6
    assert policy.keyword_boost.per_match == 0.4
    assert policy.high_confidence_signals == 4
    assert policy.medium_confidence_signals == 2


# ============================================================================
# Validation
# ============================================================================


def test_blocklist_entries_normalized():
    policy = ResearcherPolicy(blocklist=["  Ada Lovelace ", "", "TURING"])

    assert policy.blocklist == ["ada lovelace", "turing"]


def test_confidence_thresholds_must_be_ordered():
    with pytest.raises(ValidationError, match="must be less than"):
        ResearcherPolicy(high_confidence_signals=3, medium_confidence_signals=3)

    with pytest.raises(ValidationError, match="must be less than"):
        ProfessorPolicy(high_confidence_signals=2, medium_confidence_signals=4)


@pytest.mark.parametrize("factor", [0.0, -0.1, 1.5])
def test_penalty_factor_bounds(factor):
    with pytest.raises(ValidationError):
        ResearcherPolicy(no_institution_factor=factor)


def test_keyword_boost_requires_positive_step():
    with pytest.raises(ValidationError):
        KeywordBoost(per_match=0.0)


def test_invalid_log_level():
    with pytest.raises(ValidationError, match="Log level must be one of"):
        SystemParams(log_level="LOUD")


def test_log_level_uppercased():
    assert SystemParams(log_level="debug").log_level == "DEBUG"


# ============================================================================
# Loading
# ============================================================================


def test_load_explicit_file(tmp_path):
    config_file = tmp_path / "system_params.json"
    config_file.write_text(
        json.dumps(
            {
                "scoring": {"researcher": {"no_institution_factor": 0.1}},
                "discovery": {"per_page": 25},
            }
        )
    )

    params = SystemParams.load(config_file)

    assert params.scoring.researcher.no_institution_factor == 0.1
    assert params.scoring.researcher.citation_anomaly_factor == 0.2
    assert params.discovery.per_page == 25


def test_load_missing_explicit_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        SystemParams.load(tmp_path / "missing.json")


def test_load_defaults_when_default_file_absent(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    params = SystemParams.load()

    assert params == SystemParams()


def test_load_path_from_environment(tmp_path, monkeypatch):
    config_file = tmp_path / "custom.json"
    config_file.write_text(json.dumps({"log_level": "WARNING"}))
    monkeypatch.setenv("RESEARCHBRIDGE_CONFIG", str(config_file))

    assert SystemParams.load().log_level == "WARNING"


def test_missing_environment_path_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("RESEARCHBRIDGE_CONFIG", str(tmp_path / "nope.json"))

    with pytest.raises(FileNotFoundError):
        SystemParams.load()


def test_mailto_environment_override(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OPENALEX_MAILTO", "student@example.edu")

    assert SystemParams.load().sources.contact_email == "student@example.edu"


def test_load_invalid_values_raise(tmp_path):
    config_file = tmp_path / "bad.json"
    config_file.write_text(json.dumps({"sources": {"request_timeout": -1}}))

    with pytest.raises(ValidationError):
        SystemParams.load(config_file)


def test_example_config_is_valid():
    """The shipped example config loads and matches the defaults."""
    example = Path(__file__).parents[2] / "config" / "system_params.example.json"

    params = SystemParams.load(example)

    assert params.scoring == SystemParams().scoring
    assert params.discovery == SystemParams().discovery
