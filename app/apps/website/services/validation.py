"""
Validation stage of the submission pipeline.

"""

from typing import Any, Type

from pydantic import BaseModel, ValidationError

from app.apps.website.forms import get_form
from app.apps.website.schemas import SubmissionCreate
from app.core.enums import FormType
from app.core.exceptions.types import SubmissionValidationException

BODY_MESSAGE = "Request body must be a JSON object"


def format_validation_errors(
    schema: Type[BaseModel], exc: ValidationError
) -> list[dict[str, str]]:
    """
    Turn a pydantic ValidationError into ``[{field, message}, ...]``.

    Errors keep the schema's field order and each field is reported once.
    A missing field is reported with the rule message of that field.
    """
    field_messages: dict[str, str] = getattr(schema, "field_messages", {})
    details: list[dict[str, str]] = []
    seen: set[str] = set()

    for error in exc.errors():
        loc = error.get("loc") or ("body",)
        field = str(loc[0])
        if field in seen:
            continue
        seen.add(field)

        message = error["msg"]
        if error["type"] == "missing":
            message = field_messages.get(field, message)
        details.append({"field": field, "message": message})

    return details


def validate_submission(form_type: FormType, payload: Any) -> SubmissionCreate:
    """
    Validate and normalize a raw form submission.

    Every rule runs; all violations are reported together.

    Args:
        form_type: The form the payload was submitted to.
        payload: The decoded JSON request body.

    Returns:
        The normalized submission (trimmed text, lower-cased email,
        default subject filled in).

    Raises:
        SubmissionValidationException: If any field is invalid.
    """
    if not isinstance(payload, dict):
        raise SubmissionValidationException([{"field": "body", "message": BODY_MESSAGE}])

    schema = get_form(form_type).create_schema
    try:
        return schema.model_validate(payload)  # type: ignore[return-value]
    except ValidationError as e:
        raise SubmissionValidationException(format_validation_errors(schema, e)) from e


__all__ = [
    "format_validation_errors",
    "validate_submission",
]
