"""Form validation helpers shared by the per-entity input schemas.

Forms are plain pydantic models.  ``validate_form`` runs them before any
backend call and converts pydantic errors into the same field → messages
map the HTTP layer renders for request bodies.
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticCustomError

from hr_records.common.exceptions import ValidationException, field_errors

FormT = TypeVar("FormT", bound=BaseModel)


def required_text(label: str) -> Callable[[Any], Any]:
    """Build a ``BeforeValidator`` body rejecting missing or blank text."""

    def _check(value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError(
                "required", "{label} is required", {"label": label},
            )
        return value.strip() if isinstance(value, str) else value

    return _check


def blank_to_none(value: Any) -> Any:
    """Treat empty form inputs as "not provided"."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def non_negative_salary(value: Optional[Decimal]) -> Optional[Decimal]:
    if value is not None and value < 0:
        raise PydanticCustomError(
            "non_negative", "Salary must be a positive number",
        )
    return value


def generate_code(prefix: str = "") -> str:
    """New record identifier for forms that leave the code blank."""
    return f"{prefix}{uuid.uuid4().hex[:10].upper()}"


def validate_form(
    schema: type[FormT],
    values: Union[FormT, Mapping[str, Any]],
) -> FormT:
    """Return a parsed form or raise ``ValidationException``."""
    if isinstance(values, schema):
        return values
    if isinstance(values, BaseModel):
        values = values.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(dict(values))
    except ValidationError as exc:
        raise ValidationException(
            field_errors(exc.errors(), skip_location=False),
        ) from exc
