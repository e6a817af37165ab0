"""Professor data model for the curated undergraduate-research roster."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Recruitment(BaseModel):
    """Recruitment metadata scraped from a professor's profile page.

    Attributes:
        looking_to_recruit: Student types the lab is recruiting
        desired_start_dates: Preferred start terms
        potential_project_areas: Project areas open to students
        other_options: Free-form additional options
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    looking_to_recruit: list[str] = Field(default_factory=list)
    desired_start_dates: list[str] = Field(default_factory=list)
    potential_project_areas: list[str] = Field(default_factory=list)
    other_options: list[str] = Field(default_factory=list)


class Professor(BaseModel):
    """Represents a faculty member from the static roster.

    Roster JSON uses camelCase keys; both camelCase and snake_case are
    accepted.

    Attributes:
        id: Unique identifier
        first_name: Given name
        last_name: Family name
        faculty: Parent faculty
        profile_url: Faculty profile URL
        interests: Research interests / tags
        departments: Department names
        email: Direct contact email (optional)
        title: Academic title (optional)
        research_classification: Classification tags
        affiliations: Centre/institute affiliations (busyness proxy)
        research_options: Research options offered to students
        methodology: Research methods listed
        recruitment: Recruitment metadata (optional)
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    first_name: str = ""
    last_name: str = ""
    faculty: str = ""
    profile_url: str = ""
    type: Optional[str] = None
    interests: list[str] = Field(default_factory=list)
    departments: list[str] = Field(default_factory=list)
    email: Optional[str] = None
    title: Optional[str] = None
    research_classification: list[str] = Field(default_factory=list)
    affiliations: list[str] = Field(default_factory=list)
    research_options: list[str] = Field(default_factory=list)
    methodology: list[str] = Field(default_factory=list)
    recruitment: Optional[Recruitment] = None

    @property
    def name(self) -> str:
        """Full display name."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_recruiting(self) -> bool:
        return bool(self.recruitment and self.recruitment.looking_to_recruit)

    @property
    def project_areas(self) -> list[str]:
        if self.recruitment is None:
            return []
        return self.recruitment.potential_project_areas
