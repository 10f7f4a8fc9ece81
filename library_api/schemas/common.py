"""
Shared Schema Building Blocks

- CamelModel: base for every request/response schema. Python attributes
  are snake_case; the JSON API speaks camelCase (publishedDate,
  stockQuantity, firstName...).
- PartialUpdateModel: base for update rulesets. Every field is optional,
  but a field that IS sent must not be null or blank.
- Reusable annotated field types (ISBN, dates not in the future, price,
  lower-cased e-mail, website URL).
"""

import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any, ClassVar

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel


def field_label(name: str) -> str:
    """
    Turn a field name (snake_case or camelCase) into a sentence label.

        >>> field_label("publishedDate")
        'Published date'
        >>> field_label("stock_quantity")
        'Stock quantity'
    """
    if name.lower() == "isbn":
        return "ISBN"
    words = re.sub(r"(?<!^)(?=[A-Z])", " ", name).replace("_", " ")
    return words.lower().capitalize()


class CamelModel(BaseModel):
    """
    Base model with camelCase aliases.

    - populate_by_name: accept both "stockQuantity" and "stock_quantity",
      and read snake_case attributes from ORM objects
    - str_strip_whitespace: trim every string before constraints run
    - extra="ignore": unknown fields are dropped, not rejected
    - use_enum_values: enums (Genre) are kept as their plain string values
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
        use_enum_values=True,
    )


class PartialUpdateModel(CamelModel):
    """
    Base for update rulesets.

    Fields default to None so they can be omitted, but an explicit null is
    rejected unless the field is listed in nullable_fields (optional columns
    that a client may clear).
    """

    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    @field_validator("*", mode="before")
    @classmethod
    def reject_explicit_null(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None and info.field_name not in cls.nullable_fields:
            raise ValueError(f"{field_label(info.field_name)} cannot be empty")
        return v


# =============================================================================
# Reusable Field Validators
# =============================================================================
ISBN_PREFIX = re.compile(r"^ISBN(?:-1[03])?:?\s*", re.IGNORECASE)


def normalize_isbn(v: str) -> str:
    """
    Validate and normalize an ISBN-10 or ISBN-13.

    Accepts an optional "ISBN", "ISBN-10" or "ISBN-13" prefix and hyphens
    or spaces between groups. Returns the bare digits (and trailing X).

    Raises:
        ValueError: If the value is not a 10 or 13 character ISBN
    """
    cleaned = re.sub(r"[-\s]", "", ISBN_PREFIX.sub("", v)).upper()

    if len(cleaned) == 10 and re.fullmatch(r"\d{9}[\dX]", cleaned):
        return cleaned
    if len(cleaned) == 13 and cleaned.isdigit():
        return cleaned

    raise ValueError("Please enter a valid ISBN")


def not_in_future(label: str):
    """Build a validator rejecting dates after today."""

    def check(v: date) -> date:
        if v > date.today():
            raise ValueError(f"{label} cannot be in the future")
        return v

    return check


def round_price(v: float) -> float:
    """Round to cents, halves away from zero (0.125 -> 0.13)."""
    return float(Decimal(str(v)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def reject_bool(label: str):
    """Build a before-validator refusing JSON booleans for integer fields."""

    def check(v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError(f"{label} must be an integer")
        return v

    return check


def blank_to_none(v: Any) -> Any:
    """Treat empty optional strings as absent."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


def lowercase(v: str) -> str:
    return v.lower()


WEBSITE_PATTERN = re.compile(r"^https?://.+\..+")


def website_url(v: str) -> str:
    if not WEBSITE_PATTERN.match(v):
        raise ValueError("Please enter a valid website URL")
    return v


ISBN = Annotated[str, AfterValidator(normalize_isbn)]
Price = Annotated[float, Field(ge=0, allow_inf_nan=False), AfterValidator(round_price)]
LowercaseEmail = Annotated[EmailStr, AfterValidator(lowercase)]
WebsiteURL = Annotated[str, Field(max_length=500), AfterValidator(website_url)]
OptionalText = BeforeValidator(blank_to_none)
