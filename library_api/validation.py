"""
Validation Rulesets

The rulesets are the request schemas in library_api.schemas, registered
here by (resource kind, mode). They are plain pydantic models: they can be
run against a dict in a unit test without an app or a database.

    >>> validate(ResourceKind.BOOK, Mode.UPDATE, {"pages": 0})
    Traceback (most recent call last):
    ...
    library_api.exceptions.ValidationError: Validation failed

Errors are reported as a list of {"field", "message"} entries using the
camelCase field names clients send.
"""

from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from library_api.exceptions import ValidationError
from library_api.schemas.author import AuthorCreate, AuthorQuery, AuthorUpdate
from library_api.schemas.book import BookCreate, BookQuery, BookUpdate
from library_api.schemas.common import field_label
from library_api.schemas.user import ProfileUpdate, RegisterRequest

ModelT = TypeVar("ModelT", bound=BaseModel)


class Mode(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class ResourceKind(str, Enum):
    BOOK = "book"
    AUTHOR = "author"
    USER = "user"


RULESETS: dict[tuple[ResourceKind, Mode], type[BaseModel]] = {
    (ResourceKind.BOOK, Mode.CREATE): BookCreate,
    (ResourceKind.BOOK, Mode.UPDATE): BookUpdate,
    (ResourceKind.AUTHOR, Mode.CREATE): AuthorCreate,
    (ResourceKind.AUTHOR, Mode.UPDATE): AuthorUpdate,
    (ResourceKind.USER, Mode.CREATE): RegisterRequest,
    (ResourceKind.USER, Mode.UPDATE): ProfileUpdate,
}

QUERY_RULESETS: dict[ResourceKind, type[BaseModel]] = {
    ResourceKind.BOOK: BookQuery,
    ResourceKind.AUTHOR: AuthorQuery,
}


def get_ruleset(kind: ResourceKind, mode: Mode) -> type[BaseModel]:
    return RULESETS[(kind, mode)]


# =============================================================================
# Error Formatting
# =============================================================================
def _error_message(error: dict[str, Any], field: str) -> str:
    """
    Turn one pydantic error into a client-facing sentence.

    - missing field       -> "<Label> is required"
    - blank string        -> "<Label> cannot be empty"
    - our own ValueErrors -> their message, without pydantic's prefix
    - anything else       -> pydantic's message
    """
    label = field_label(field) if field else "Request"
    error_type = error["type"]

    if error_type == "missing":
        return f"{label} is required"
    if error_type == "string_too_short" and error.get("ctx", {}).get("min_length") == 1:
        return f"{label} cannot be empty"
    if error_type == "value_error":
        return error["msg"].removeprefix("Value error, ")
    return f"{label}: {error['msg']}"


def format_errors(exc: PydanticValidationError) -> list[dict[str, str]]:
    """Convert a pydantic ValidationError into {field, message} entries."""
    errors = []
    for error in exc.errors():
        # Union members add their type name to loc; keep the field part
        field = next((str(part) for part in error["loc"] if isinstance(part, str)), "")
        message = _error_message(error, field)
        entry = {"field": field, "message": message}
        if entry not in errors:
            errors.append(entry)
    return errors


# =============================================================================
# Running Rulesets
# =============================================================================
def run_ruleset(ruleset: type[ModelT], payload: Any) -> ModelT:
    """
    Validate a payload against one ruleset.

    Args:
        ruleset: Pydantic model class
        payload: Parsed JSON body or query parameters

    Returns:
        The validated, normalized model instance

    Raises:
        ValidationError: With one entry per failing field
    """
    if not isinstance(payload, dict):
        raise ValidationError(
            errors=[{"field": "body", "message": "Request body must be a JSON object"}]
        )

    try:
        return ruleset.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(errors=format_errors(exc)) from exc


def validate(kind: ResourceKind, mode: Mode, payload: Any) -> dict[str, Any]:
    """
    Validate a payload for a resource kind and mode.

    Returns:
        Normalized values keyed by attribute name. In update mode only the
        fields that were sent are included.
    """
    model = run_ruleset(get_ruleset(kind, mode), payload)
    return model.model_dump(exclude_unset=mode is Mode.UPDATE)


def validate_query(kind: ResourceKind, params: dict[str, Any]) -> BaseModel:
    return run_ruleset(QUERY_RULESETS[kind], params)
