"""
Author Pydantic Schemas

Request rulesets, the response shape (with derived fullName and age) and
the list query ruleset.
"""

from datetime import date, datetime
from typing import Annotated, ClassVar, Literal

from pydantic import AfterValidator, BeforeValidator, ConfigDict, Field, computed_field

from library_api.schemas.common import (
    CamelModel,
    LowercaseEmail,
    OptionalText,
    PartialUpdateModel,
    WebsiteURL,
    blank_to_none,
    not_in_future,
)
from library_api.services import derived

Name = Annotated[str, Field(min_length=1, max_length=50)]
BirthDate = Annotated[date, AfterValidator(not_in_future("Birth date"))]
Biography = Annotated[Annotated[str, Field(max_length=2000)] | None, OptionalText]
Nationality = Annotated[Annotated[str, Field(max_length=50)] | None, OptionalText]
Website = Annotated[WebsiteURL | None, OptionalText]

AuthorSortField = Literal[
    "firstName", "lastName", "email", "birthDate", "nationality", "createdAt"
]


class AuthorCreate(CamelModel):
    """Ruleset for creating an author."""

    first_name: Name
    last_name: Name
    email: LowercaseEmail
    biography: Biography = None
    birth_date: BirthDate | None = None
    nationality: Nationality = None
    website: Website = None
    is_active: bool = True


class AuthorUpdate(PartialUpdateModel):
    """
    Ruleset for updating an author.

    The optional profile columns may be cleared by sending null.
    """

    first_name: Name | None = None
    last_name: Name | None = None
    email: LowercaseEmail | None = None
    biography: Biography = None
    birth_date: BirthDate | None = None
    nationality: Nationality = None
    website: Website = None
    is_active: bool | None = None

    nullable_fields: ClassVar[frozenset[str]] = frozenset(
        {"biography", "birth_date", "nationality", "website"}
    )


class AuthorResponse(CamelModel):
    """Author as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    biography: str | None = None
    birth_date: date | None = None
    nationality: str | None = None
    website: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="fullName")
    @property
    def full_name(self) -> str:
        return derived.full_name(self.first_name, self.last_name)

    @computed_field
    @property
    def age(self) -> int | None:
        return derived.compute_age(self.birth_date)


class AuthorQuery(CamelModel):
    """Query-string ruleset for listing authors."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    nationality: Annotated[str, Field(min_length=1, max_length=50)] | None = None
    is_active: bool | None = None
    sort_by: AuthorSortField = "createdAt"
    order: Literal["asc", "desc"] = "desc"
    search: Annotated[str | None, BeforeValidator(blank_to_none)] = None
