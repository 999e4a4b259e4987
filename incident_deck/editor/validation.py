# ---
# File: incident_deck/editor/validation.py
# Purpose: Client-side form validation for incident create/edit, producing per-field messages
# ---

from typing import Dict, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from incident_deck.client.errors import FormValidationError
from incident_deck.incidents.models import IncidentSeverity, IncidentStatus

ModelT = TypeVar("ModelT", bound=BaseModel)

FIELD_LABELS = {
    "title": "Title",
    "service": "Service",
    "severity": "Severity",
    "status": "Status",
    "owner": "Owner",
    "summary": "Summary",
}

ENUM_CHOICES = {
    "severity": [severity.value for severity in IncidentSeverity],
    "status": [status.value for status in IncidentStatus],
}

READ_ONLY_FIELDS = ("id", "createdAt", "updatedAt")


def _message(field: str, error: dict) -> str:
    label = FIELD_LABELS.get(field, field)
    if error["type"] in ("missing", "value_error", "string_type", "none_required"):
        return f"{label} is required"
    if error["type"] == "enum" and field in ENUM_CHOICES:
        return f"{label} must be one of {', '.join(ENUM_CHOICES[field])}"
    return f"{label}: {error['msg']}"


def field_errors_from(exc: ValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "form"
        errors.setdefault(field, _message(field, error))
    return errors


# ---
# Validate raw form values into a request model.
# Blank strings in required fields count as missing. Any failure raises
# FormValidationError before a request is ever built.
# ---
def validate_form(
    model: Type[ModelT],
    values: dict,
    required: Iterable[str] = (),
    allowed_services: Optional[Iterable[str]] = None,
) -> ModelT:
    errors: Dict[str, str] = {}
    cleaned = {}
    for key, value in values.items():
        if key in READ_ONLY_FIELDS:
            errors[key] = f"{key} cannot be changed"
            continue
        if key in required and (value is None or (isinstance(value, str) and not value.strip())):
            continue
        cleaned[key] = value

    try:
        result = model.model_validate(cleaned)
    except ValidationError as exc:
        result = None
        for field, message in field_errors_from(exc).items():
            errors.setdefault(field, message)

    services = list(allowed_services or [])
    service = cleaned.get("service")
    if services and isinstance(service, str) and service.strip() and service.strip() not in services:
        errors.setdefault("service", "Service must be one of the available services")

    if errors:
        raise FormValidationError(errors)
    return result
