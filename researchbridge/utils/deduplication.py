"""De-duplication of entity lists before scoring.

Scoring batches assume unique ids, so merged fetch results pass through
here first.
"""

from typing import Protocol, Sequence, TypeVar

from researchbridge.utils.logger import get_logger


class HasId(Protocol):
    id: str


T = TypeVar("T", bound=HasId)


def deduplicate_by_id(items: Sequence[T]) -> list[T]:
    """Keep the first occurrence of each id, preserving order.

    Args:
        items: Entities with an ``id`` attribute

    Returns:
        List of unique entities
    """
    seen: set[str] = set()
    unique: list[T] = []

    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)

    if len(unique) != len(items):
        logger = get_logger(
            correlation_id="deduplication",
            phase="discovery",
            component="deduplication",
        )
        logger.debug(
            "Duplicates removed",
            original_count=len(items),
            unique_count=len(unique),
        )

    return unique
