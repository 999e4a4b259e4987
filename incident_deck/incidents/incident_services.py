# ---
# File: incident_deck/incidents/incident_services.py
# Purpose: One coroutine per incident API endpoint; responses parsed into incident models
# ---

import logging
from typing import Type, TypeVar, Union
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from incident_deck.client.api import ApiClient
from incident_deck.client.errors import InvalidResponseError
from incident_deck.incidents.models import (
    CountsQuery,
    Incident,
    IncidentCounts,
    IncidentCreate,
    IncidentFilterOptions,
    IncidentListResponse,
    IncidentUpdate,
    ListQuery,
)

logger = logging.getLogger(__name__)

INCIDENTS_PATH = "/incidents"

ModelT = TypeVar("ModelT", bound=BaseModel)


# Ids are opaque; escape them so "/", "?" or "#" stay inside the path segment
def _incident_path(incident_id: str) -> str:
    return f"{INCIDENTS_PATH}/{quote(str(incident_id), safe='')}"


def _parse(model: Type[ModelT], payload) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        logger.error("[INCIDENT] Unexpected %s payload: %s", model.__name__, exc)
        raise InvalidResponseError(f"Unexpected response from incident API ({model.__name__})") from exc


# ---
# Service class wrapping the incident endpoints.
# Holds no state besides the API client; every method issues exactly one request.
# ---
class IncidentService:

    def __init__(self, api: ApiClient):
        self.api = api

    # ---
    # Fetch one page of incidents for the given filters, sort and cursor.
    # ---
    async def get_incidents(self, query: ListQuery) -> IncidentListResponse:
        payload = await self.api.get(INCIDENTS_PATH, params=query.to_params())
        return _parse(IncidentListResponse, payload)

    # ---
    # Fetch aggregate counts. Only filters are sent, never cursor, sort or limit.
    # ---
    async def get_counts(self, query: Union[CountsQuery, ListQuery, None] = None) -> IncidentCounts:
        if query is None:
            query = CountsQuery()
        elif isinstance(query, ListQuery):
            query = query.counts_query()
        payload = await self.api.get(f"{INCIDENTS_PATH}/counts", params=query.to_params())
        return _parse(IncidentCounts, payload)

    async def get_filters(self) -> IncidentFilterOptions:
        payload = await self.api.get(f"{INCIDENTS_PATH}/filters")
        return _parse(IncidentFilterOptions, payload)

    async def get_incident_by_id(self, incident_id: str) -> Incident:
        payload = await self.api.get(_incident_path(incident_id))
        return _parse(Incident, payload)

    async def create_incident(self, data: IncidentCreate) -> Incident:
        payload = await self.api.post(INCIDENTS_PATH, json=data.model_dump(mode="json", exclude_none=True))
        incident = _parse(Incident, payload)
        logger.info("[INCIDENT] Created incident %s (%s)", incident.id, incident.severity.value)
        return incident

    # ---
    # Send a partial update. Only fields explicitly set on the update model are sent.
    # ---
    async def update_incident(self, incident_id: str, data: IncidentUpdate) -> Incident:
        body = data.model_dump(mode="json", exclude_unset=True)
        payload = await self.api.patch(_incident_path(incident_id), json=body)
        logger.info("[INCIDENT] Updated incident %s fields=%s", incident_id, sorted(body))
        return _parse(Incident, payload)

    async def delete_incident(self, incident_id: str) -> None:
        await self.api.delete(_incident_path(incident_id))
        logger.info("[INCIDENT] Deleted incident %s", incident_id)
