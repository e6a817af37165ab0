"""
Shared test fixtures.

Factories build fully default-filled entities so individual tests only
spell out the fields they care about.
"""

from typing import Any

import pytest

from researchbridge.models.professor import Professor, Recruitment
from researchbridge.models.researcher import Institution, Researcher


def make_researcher(id: str = "A1", **overrides: Any) -> Researcher:
    """Researcher with an institution, ORCID and a modest record."""
    fields: dict[str, Any] = {
        "id": id,
        "name": "Jane Smith",
        "orcid": "https://orcid.org/0000-0001-2345-6789",
        "matched_works_count": 10,
        "works_count": 20,
        "cited_by_count": 150,
        "last_known_institution": Institution(name="University of Testing"),
    }
    fields.update(overrides)
    return Researcher(**fields)


def make_professor(id: str = "P1", **overrides: Any) -> Professor:
    """Professor with a few interests and nothing else filled in."""
    fields: dict[str, Any] = {
        "id": id,
        "first_name": "Alex",
        "last_name": "Rivera",
        "faculty": "Science",
        "interests": ["genomics", "bioinformatics", "evolution"],
    }
    fields.update(overrides)
    return Professor(**fields)


@pytest.fixture
def recruiting_professor() -> Professor:
    """Fully populated professor actively recruiting undergraduates."""
    return make_professor(
        id="P-recruit",
        email="alex.rivera@example.edu",
        interests=[
            "genomics",
            "bioinformatics",
            "evolution",
            "microbial ecology",
            "population genetics",
            "phylogenetics",
        ],
        methodology=["sequencing", "statistical modeling"],
        research_options=["Undergrad honours thesis"],
        research_classification=["Life Sciences"],
        departments=["Biology", "Statistics"],
        recruitment=Recruitment(
            looking_to_recruit=["Undergraduate students"],
            desired_start_dates=["Summer 2026"],
            potential_project_areas=["genome assembly", "phylogenetic methods"],
        ),
    )
