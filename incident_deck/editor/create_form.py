# ---
# File: incident_deck/editor/create_form.py
# Purpose: New-incident form: loads service choices, validates client-side, submits to the API
# ---

import logging
from typing import Dict, List, Optional

from incident_deck.client.errors import ApiResponseError, FormValidationError, IncidentApiError
from incident_deck.editor.validation import validate_form
from incident_deck.incidents.incident_services import IncidentService
from incident_deck.incidents.models import Incident, IncidentCreate

logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Failed to create incident"
REQUIRED_FIELDS = ("title", "service", "severity")


def api_error_message(exc: IncidentApiError, fallback: str) -> str:
    # Prefer the server's `{"error": ...}` text, as the form shows it verbatim
    if isinstance(exc, ApiResponseError):
        message = exc.payload.get("error")
        if isinstance(message, str) and message:
            return message
    return fallback


class CreateIncidentForm:

    def __init__(self, service: IncidentService):
        self.service = service
        self.services: List[str] = []
        self.field_errors: Dict[str, str] = {}
        self.error: Optional[str] = None
        self.loading = False

    # ---
    # Load the selectable services. A failure leaves the list empty; the form
    # still works and the server remains the final judge of the service name.
    # ---
    async def load_options(self) -> List[str]:
        try:
            options = await self.service.get_filters()
            self.services = list(options.services)
        except IncidentApiError as exc:
            logger.error("[CREATE] Failed to fetch initial data: %s", exc.message)
        return self.services

    def validate(self, values: dict) -> IncidentCreate:
        try:
            payload = validate_form(
                IncidentCreate,
                values,
                required=REQUIRED_FIELDS,
                allowed_services=self.services,
            )
        except FormValidationError as exc:
            self.field_errors = exc.field_errors
            raise
        self.field_errors = {}
        return payload

    # ---
    # Validate then POST. Returns the created incident, or None when validation
    # or the request failed (see field_errors / error).
    # ---
    async def submit(self, values: dict) -> Optional[Incident]:
        self.error = None
        try:
            payload = self.validate(values)
        except FormValidationError:
            return None

        self.loading = True
        try:
            return await self.service.create_incident(payload)
        except IncidentApiError as exc:
            logger.error("[CREATE] Failed to create incident: %s", exc.message)
            self.error = api_error_message(exc, CREATE_FAILED_MESSAGE)
            return None
        finally:
            self.loading = False
