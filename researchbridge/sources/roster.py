"""Static professor roster loading and interest pre-filtering."""

import json
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from researchbridge.models.professor import Professor
from researchbridge.utils.deduplication import deduplicate_by_id
from researchbridge.utils.keywords import matched_interests, normalize_text
from researchbridge.utils.logger import get_logger


_ROSTER_ADAPTER = TypeAdapter(list[Professor])


def load_roster(path: Path | str, correlation_id: Optional[str] = None) -> list[Professor]:
    """Load the curated professor roster from a JSON array.

    Args:
        path: Path to the roster JSON (camelCase or snake_case keys)
        correlation_id: Correlation ID for logging

    Returns:
        De-duplicated list of Professor models

    Raises:
        FileNotFoundError: If the roster file doesn't exist
        ValueError: If the file isn't valid JSON or fails validation
    """
    logger = get_logger(
        correlation_id=correlation_id, phase="roster", component="roster_loader"
    )
    roster_path = Path(path)

    if not roster_path.exists():
        raise FileNotFoundError(f"Roster file not found: {roster_path}")

    try:
        with open(roster_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid roster JSON in {roster_path}: {e}") from e

    try:
        professors = _ROSTER_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise ValueError(f"Invalid roster entries in {roster_path}: {e}") from e

    unique = deduplicate_by_id(professors)
    logger.info("Roster loaded", path=str(roster_path), professors=len(unique))
    return unique


def filter_by_interests(
    roster: list[Professor], user_interests: list[str]
) -> list[Professor]:
    """Professors sharing at least one interest with the user.

    With no usable interests, the whole roster is returned.
    """
    if not any(normalize_text(i) for i in user_interests):
        return list(roster)

    return [p for p in roster if matched_interests(p.interests, user_interests)]
