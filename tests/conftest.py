"""Shared test fixtures: in-memory incident API, async client, incident factory."""

import httpx
import pytest
import pytest_asyncio

from incident_deck.client.api import ApiClient
from incident_deck.incidents.incident_services import IncidentService
from incident_deck.incidents.models import Incident

from fake_incident_api import create_app, seed_incidents

BASE_URL = "http://test/api"


@pytest.fixture
def fake_api():
    """Fake incident API seeded with 25 incidents."""
    return create_app(seed_incidents(25))


@pytest_asyncio.fixture
async def api(fake_api):
    client = ApiClient(base_url=BASE_URL, transport=httpx.ASGITransport(app=fake_api))
    yield client
    await client.close()


@pytest.fixture
def service(api):
    return IncidentService(api)


@pytest.fixture
def make_incident():
    def _make(index: int = 1, **overrides) -> Incident:
        data = {
            "id": f"inc-{index:03d}",
            "title": f"Incident {index}",
            "service": "payments",
            "severity": "SEV2",
            "status": "OPEN",
            "owner": None,
            "summary": None,
            "createdAt": "2026-04-12T15:05:00Z",
            "updatedAt": "2026-04-12T15:05:00Z",
        }
        data.update(overrides)
        return Incident.model_validate(data)
    return _make
