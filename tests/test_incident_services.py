"""End-to-end tests of the incident service against the in-memory API."""

import httpx
import pytest

from incident_deck.client.api import ApiClient
from incident_deck.client.errors import ApiResponseError, IncidentNotFoundError, InvalidResponseError
from incident_deck.incidents.incident_services import IncidentService
from incident_deck.incidents.models import (
    CountsQuery,
    IncidentCreate,
    IncidentSeverity,
    IncidentStatus,
    IncidentUpdate,
    ListQuery,
)


class TestListing:
    @pytest.mark.asyncio
    async def test_first_page_sorted_by_created_desc(self, service):
        response = await service.get_incidents(ListQuery(limit=10, sort="createdAt", order="desc"))

        assert len(response.data) == 10
        created = [incident.createdAt for incident in response.data]
        assert created == sorted(created, reverse=True)
        assert response.meta.nextCursor is not None
        assert response.meta.totalCount == 25
        assert response.meta.totalPages == 3

    @pytest.mark.asyncio
    async def test_no_next_cursor_when_everything_fits(self, service):
        response = await service.get_incidents(ListQuery(limit=40))
        assert len(response.data) == 25
        assert response.meta.nextCursor is None

    @pytest.mark.asyncio
    async def test_cursor_walk_covers_every_incident_once(self, service):
        seen = []
        query = ListQuery(limit=10)
        while True:
            response = await service.get_incidents(query)
            seen += [incident.id for incident in response.data]
            if response.meta.nextCursor is None:
                break
            query = query.model_copy(update={"cursor": response.meta.nextCursor})
        assert len(seen) == 25
        assert len(set(seen)) == 25

    @pytest.mark.asyncio
    async def test_filters_sent_and_applied(self, service, fake_api):
        response = await service.get_incidents(ListQuery(status="OPEN", severity="SEV1", limit=10))
        assert all(incident.status == IncidentStatus.OPEN for incident in response.data)
        assert all(incident.severity == IncidentSeverity.SEV1 for incident in response.data)

        _, params = fake_api.state.calls[-1]
        assert params["status"] == "OPEN"
        assert params["severity"] == "SEV1"
        assert params["cursor"] is None

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_substring(self, service):
        response = await service.get_incidents(ListQuery(search="PAYMENTS", limit=40))
        assert response.data
        assert all(incident.service == "payments" for incident in response.data)

    @pytest.mark.asyncio
    async def test_counts_never_send_paging_params(self, service, fake_api):
        counts = await service.get_counts(ListQuery(status="OPEN", limit=20, cursor="abc", sort="title"))

        path, params = fake_api.state.calls[-1]
        assert path == "/incidents/counts"
        assert params["status"] == "OPEN"
        assert params["limit"] is None
        assert params["cursor"] is None
        assert params["sort"] is None
        assert counts.totalCount == counts.openCount

    @pytest.mark.asyncio
    async def test_unfiltered_counts(self, service):
        counts = await service.get_counts(CountsQuery())
        assert counts.totalCount == 25

    @pytest.mark.asyncio
    async def test_filter_options(self, service):
        options = await service.get_filters()
        assert "payments" in options.services
        assert options.severities == list(IncidentSeverity)
        assert options.statuses == list(IncidentStatus)


class TestMutations:
    @pytest.mark.asyncio
    async def test_create_then_fetch(self, service):
        created = await service.create_incident(
            IncidentCreate(title="Checkout latency", service="checkout", severity="SEV2")
        )
        assert created.status == IncidentStatus.OPEN
        fetched = await service.get_incident_by_id(created.id)
        assert fetched == created

    @pytest.mark.asyncio
    async def test_create_rejected_by_server_surfaces_error(self, service):
        with pytest.raises(ApiResponseError) as exc_info:
            await service.create_incident(IncidentCreate(title="x", service="billing", severity="SEV3"))
        assert exc_info.value.message == "Unknown service 'billing'"

    @pytest.mark.asyncio
    async def test_partial_update_sends_only_set_fields(self, service, fake_api):
        updated = await service.update_incident("inc-002", IncidentUpdate(status="RESOLVED"))
        assert updated.status == IncidentStatus.RESOLVED
        assert updated.id == "inc-002"

        _, body = fake_api.state.calls[-1]
        assert body == {"status": "RESOLVED"}

    @pytest.mark.asyncio
    async def test_clearing_owner_sends_null(self, service, fake_api):
        updated = await service.update_incident("inc-002", IncidentUpdate(owner=None))
        assert updated.owner is None
        assert fake_api.state.calls[-1][1] == {"owner": None}

    @pytest.mark.asyncio
    async def test_delete_then_not_found(self, service):
        await service.delete_incident("inc-003")
        with pytest.raises(IncidentNotFoundError):
            await service.get_incident_by_id("inc-003")

    @pytest.mark.asyncio
    async def test_update_missing_incident(self, service):
        with pytest.raises(IncidentNotFoundError):
            await service.update_incident("nope", IncidentUpdate(title="x"))

    @pytest.mark.asyncio
    async def test_malformed_payload_raises_invalid_response(self):
        class StubApi:
            async def get(self, path, params=None):
                return {"data": "not-a-list"}

        with pytest.raises(InvalidResponseError):
            await IncidentService(StubApi()).get_incidents(ListQuery())

    @pytest.mark.asyncio
    async def test_incident_id_is_escaped_as_one_path_segment(self, make_incident):
        seen = []

        def handler(request: httpx.Request):
            seen.append(request.url)
            if request.method == "DELETE":
                return httpx.Response(204)
            return httpx.Response(200, json=make_incident(1).model_dump(mode="json"))

        async with ApiClient(base_url="http://api.local/api", transport=httpx.MockTransport(handler)) as api:
            service = IncidentService(api)
            await service.get_incident_by_id("inc?x=1")
            await service.update_incident("a/b#c", IncidentUpdate(title="x"))
            await service.delete_incident("inc?x=1")

        assert [url.raw_path for url in seen] == [
            b"/api/incidents/inc%3Fx%3D1",
            b"/api/incidents/a%2Fb%23c",
            b"/api/incidents/inc%3Fx%3D1",
        ]
        assert all(not url.params for url in seen)
