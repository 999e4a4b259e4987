# ---
# File: incident_deck/editor/detail.py
# Purpose: Incident detail view model: load, inline edit with partial PATCH, confirmed delete
# ---

import asyncio
import logging
from typing import Dict, List, Optional

from incident_deck.client.errors import FormValidationError, IncidentApiError
from incident_deck.editor.create_form import api_error_message
from incident_deck.editor.validation import validate_form
from incident_deck.incidents.incident_services import IncidentService
from incident_deck.incidents.models import Incident, IncidentUpdate

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load incident data"
UPDATE_FAILED_MESSAGE = "Failed to update incident"
DELETE_FAILED_MESSAGE = "Failed to delete incident"


class IncidentDetailEditor:
    """
    Incident Detail Editor

    Holds the client's copy of one incident. Edits are validated locally and only
    the fields that differ from the held copy are sent. A failed save or delete keeps
    the held copy untouched so the user can retry.
    """

    def __init__(self, service: IncidentService):
        self.service = service
        self.incident: Optional[Incident] = None
        self.services: List[str] = []
        self.field_errors: Dict[str, str] = {}
        self.error: Optional[str] = None
        self.loading = False
        self.saving = False
        self.deleted = False

    async def load(self, incident_id: str) -> Optional[Incident]:
        self.loading = True
        self.error = None
        try:
            incident, options = await asyncio.gather(
                self.service.get_incident_by_id(incident_id),
                self.service.get_filters(),
            )
            self.incident = incident
            self.services = list(options.services)
        except IncidentApiError as exc:
            logger.error("[DETAIL] Failed to load incident %s: %s", incident_id, exc.message)
            self.error = LOAD_FAILED_MESSAGE
        finally:
            self.loading = False
        return self.incident

    # ---
    # Build the PATCH body: validated values that differ from the held incident.
    # Raises FormValidationError for invalid values or read-only fields.
    # ---
    def changes(self, values: dict) -> IncidentUpdate:
        if self.incident is None:
            raise RuntimeError("no incident loaded")
        try:
            update = validate_form(IncidentUpdate, values, allowed_services=self.services)
        except FormValidationError as exc:
            self.field_errors = exc.field_errors
            raise
        self.field_errors = {}

        changed = {
            name: getattr(update, name)
            for name in update.model_fields_set
            if getattr(update, name) != getattr(self.incident, name)
        }
        return IncidentUpdate(**changed)

    async def save(self, values: dict) -> Optional[Incident]:
        self.error = None
        try:
            update = self.changes(values)
        except FormValidationError:
            return None
        if not update.model_fields_set:
            return self.incident

        self.saving = True
        try:
            self.incident = await self.service.update_incident(self.incident.id, update)
        except IncidentApiError as exc:
            logger.error("[DETAIL] Failed to update incident %s: %s", self.incident.id, exc.message)
            self.error = api_error_message(exc, UPDATE_FAILED_MESSAGE)
            return None
        finally:
            self.saving = False
        return self.incident

    async def delete(self, confirm: bool = False) -> bool:
        if self.incident is None or not confirm:
            return False
        self.error = None
        try:
            await self.service.delete_incident(self.incident.id)
        except IncidentApiError as exc:
            logger.error("[DETAIL] Failed to delete incident %s: %s", self.incident.id, exc.message)
            self.error = DELETE_FAILED_MESSAGE
            return False
        self.deleted = True
        return True
