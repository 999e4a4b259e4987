# ---
# File: incident_deck/client/errors.py
# Purpose: Error taxonomy for calls against the incident API and client-side form validation
# ---

from typing import Dict, Optional


class IncidentApiError(Exception):
    """Base class for every failure surfaced by the incident API client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---
# Network level failure: connection refused, DNS, timeout.
# No response was received from the API.
# ---
class ApiTransportError(IncidentApiError):
    pass


# ---
# The API answered with a non-success status.
# The message comes from the structured `{"error": ...}` payload when present.
# ---
class ApiResponseError(IncidentApiError):
    def __init__(self, message: str, status_code: int, payload: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class IncidentNotFoundError(ApiResponseError):
    pass


# ---
# Raised before any request is sent when form values are invalid.
# `field_errors` maps a field name to the message shown next to that field.
# ---
class FormValidationError(Exception):
    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        summary = ", ".join(f"{field}: {message}" for field, message in self.field_errors.items())
        super().__init__(summary or "Invalid form values")


# ---
# The API answered 2xx but the body does not match the expected shape.
# ---
class InvalidResponseError(IncidentApiError):
    pass
