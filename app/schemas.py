"""
Request body schemas for the Task API.

Incoming JSON is validated against these pydantic models before it
reaches the store, so handlers never deal with loosely-typed payloads.
Unknown fields (``id``, ``created_at`` and friends) are dropped rather
than rejected, which keeps server-assigned fields out of client reach.
"""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints, model_validator
from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.models import STATUS_MAX_LENGTH, TITLE_MAX_LENGTH

# Only title and status are trimmed; description is stored exactly as sent.
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)]
Status = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=STATUS_MAX_LENGTH)]


class TaskCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Title
    description: Optional[str] = None
    status: Optional[Status] = None


class TaskUpdate(BaseModel):
    """Partial update: only fields present in the body are applied."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[Title] = None
    description: Optional[str] = None
    status: Optional[Status] = None

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> "TaskUpdate":
        # description may be cleared; title and status may not
        for name in ("title", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"'{name}' cannot be null")
        return self


def _format_error(exc: PydanticValidationError) -> str:
    """Turn the first pydantic error into a short, field-oriented message."""
    error = exc.errors()[0]
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else None
    kind = error.get("type")

    if field is None:
        # model-level validators raise ValueError("...") -> "Value error, ..."
        return str(error.get("msg", "Invalid request body")).removeprefix("Value error, ")
    if kind == "missing":
        return f"'{field}' is required"
    if kind == "string_too_short":
        return f"'{field}' must not be empty"
    if kind == "string_too_long":
        limit = (error.get("ctx") or {}).get("max_length")
        return f"'{field}' must be {limit} characters or less"
    if kind == "string_type":
        return f"'{field}' must be a string"
    return f"Invalid '{field}': {error.get('msg')}"


def parse_create(data: Any) -> dict[str, Any]:
    """
    Validate a create payload.

    Returns:
        Dictionary with ``title``, ``description`` and ``status`` (the
        latter two may be ``None``).

    Raises:
        ValidationError: If the payload does not satisfy ``TaskCreate``.
    """
    try:
        payload = TaskCreate.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(_format_error(exc)) from exc
    return payload.model_dump()


def parse_update(data: Any) -> dict[str, Any]:
    """
    Validate an update payload.

    Returns:
        Dictionary holding only the fields the client actually sent.

    Raises:
        ValidationError: If the payload does not satisfy ``TaskUpdate`` or
            carries no updatable field.
    """
    try:
        payload = TaskUpdate.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(_format_error(exc)) from exc

    fields = payload.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No valid fields to update")
    return fields
