"""Researcher data model for bibliographic (OpenAlex) author records."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Institution(BaseModel):
    """Last known institution of a researcher.

    Attributes:
        name: Institution display name
        ror: ROR identifier URL (optional)
        country: ISO country code (optional)
        type: Institution type, e.g. "education" (optional)
    """

    name: str
    ror: Optional[str] = None
    country: Optional[str] = None
    type: Optional[str] = None


class Researcher(BaseModel):
    """Represents a globally searched researcher.

    Attributes:
        id: Opaque identifier, stable across requests (OpenAlex author URL)
        name: Display name
        orcid: ORCID identifier (optional)
        matched_works_count: Works matching the active search filter
        works_count: Total works (None when the source didn't report it)
        cited_by_count: Total citations (None when unknown)
        last_known_institution: Affiliation (optional, all-or-nothing)
    """

    id: str
    name: str = ""
    orcid: Optional[str] = None
    matched_works_count: int = Field(default=0, ge=0)
    works_count: Optional[int] = Field(default=None, ge=0)
    cited_by_count: Optional[int] = Field(default=None, ge=0)
    last_known_institution: Optional[Institution] = None

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Optional[str]) -> str:
        """Missing display names become empty strings."""
        return v or ""

    @property
    def total_works(self) -> int:
        """Total works, falling back to the matched count when unknown."""
        if self.works_count is not None:
            return self.works_count
        return self.matched_works_count

    @property
    def citations(self) -> int:
        """Citation count with unknown treated as zero."""
        return self.cited_by_count or 0

    @property
    def has_institution(self) -> bool:
        """True when a named institution is recorded."""
        return bool(
            self.last_known_institution and self.last_known_institution.name.strip()
        )

    @property
    def has_orcid(self) -> bool:
        """True when an ORCID identifier is recorded."""
        return bool(self.orcid)
