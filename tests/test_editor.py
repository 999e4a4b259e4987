"""Tests for the create form and the incident detail editor."""

import pytest

from incident_deck.client.errors import FormValidationError
from incident_deck.editor.create_form import CreateIncidentForm
from incident_deck.editor.detail import IncidentDetailEditor
from incident_deck.incidents.models import IncidentSeverity, IncidentStatus


class TestCreateIncidentForm:
    @pytest.mark.asyncio
    async def test_loads_service_options(self, service):
        form = CreateIncidentForm(service)
        assert await form.load_options() == ["payments", "checkout", "search", "auth"]

    def test_required_fields_reported_per_field(self):
        form = CreateIncidentForm(service=None)
        with pytest.raises(FormValidationError) as exc_info:
            form.validate({"title": "   ", "summary": "details"})
        assert exc_info.value.field_errors == {
            "title": "Title is required",
            "service": "Service is required",
            "severity": "Severity is required",
        }
        assert form.field_errors == exc_info.value.field_errors

    def test_unknown_severity_rejected_client_side(self):
        form = CreateIncidentForm(service=None)
        with pytest.raises(FormValidationError) as exc_info:
            form.validate({"title": "Disk full", "service": "payments", "severity": "SEV9"})
        assert exc_info.value.field_errors == {"severity": "Severity must be one of SEV1, SEV2, SEV3, SEV4"}

    def test_unknown_status_rejected(self):
        form = CreateIncidentForm(service=None)
        with pytest.raises(FormValidationError) as exc_info:
            form.validate({"title": "Disk full", "service": "payments", "severity": "SEV1", "status": "CLOSED"})
        assert "status" in exc_info.value.field_errors

    def test_defaults_and_blank_optionals(self):
        payload = CreateIncidentForm(service=None).validate(
            {"title": " Disk full ", "service": "payments", "severity": "SEV1", "owner": "", "summary": " "}
        )
        assert payload.title == "Disk full"
        assert payload.status == IncidentStatus.OPEN
        assert payload.owner is None
        assert payload.model_dump(mode="json", exclude_none=True) == {
            "title": "Disk full",
            "service": "payments",
            "severity": "SEV1",
            "status": "OPEN",
        }

    def test_blank_status_select_defaults_to_open(self):
        form = CreateIncidentForm(service=None)
        for status in ("", "  ", None):
            payload = form.validate({"title": "Disk full", "service": "payments", "severity": "SEV1", "status": status})
            assert payload.model_dump(mode="json", exclude_none=True)["status"] == "OPEN"

    @pytest.mark.asyncio
    async def test_invalid_submission_sends_nothing(self, service, fake_api):
        form = CreateIncidentForm(service)
        before = dict(fake_api.state.store)
        assert await form.submit({"title": "x", "service": "payments", "severity": "SEV9"}) is None
        assert form.field_errors
        assert fake_api.state.store == before

    @pytest.mark.asyncio
    async def test_service_must_be_a_loaded_option(self, service):
        form = CreateIncidentForm(service)
        await form.load_options()
        assert await form.submit({"title": "x", "service": "billing", "severity": "SEV2"}) is None
        assert form.field_errors == {"service": "Service must be one of the available services"}

    @pytest.mark.asyncio
    async def test_submit_creates_incident(self, service, fake_api):
        form = CreateIncidentForm(service)
        await form.load_options()
        incident = await form.submit({"title": "Search timeouts", "service": "search", "severity": "SEV3"})

        assert incident is not None
        assert incident.id in fake_api.state.store
        assert form.error is None
        assert form.field_errors == {}

    @pytest.mark.asyncio
    async def test_server_error_message_surfaced(self, service):
        form = CreateIncidentForm(service)
        incident = await form.submit({"title": "x", "service": "billing", "severity": "SEV2"})
        assert incident is None
        assert form.error == "Unknown service 'billing'"


class TestIncidentDetailEditor:
    @pytest.mark.asyncio
    async def test_load(self, service):
        editor = IncidentDetailEditor(service)
        incident = await editor.load("inc-001")
        assert incident.id == "inc-001"
        assert editor.services
        assert editor.error is None

    @pytest.mark.asyncio
    async def test_load_missing(self, service):
        editor = IncidentDetailEditor(service)
        assert await editor.load("missing") is None
        assert editor.error == "Failed to load incident data"

    @pytest.mark.asyncio
    async def test_save_sends_only_changed_fields(self, service, fake_api):
        editor = IncidentDetailEditor(service)
        original = await editor.load("inc-002")

        saved = await editor.save({
            "title": original.title,
            "service": original.service,
            "severity": "SEV1",
            "status": original.status.value,
        })

        assert saved.severity == IncidentSeverity.SEV1
        assert saved.createdAt == original.createdAt
        assert fake_api.state.calls[-1] == ("/incidents/inc-002", {"severity": "SEV1"})
        assert editor.incident is saved

    @pytest.mark.asyncio
    async def test_save_without_changes_skips_request(self, service, fake_api):
        editor = IncidentDetailEditor(service)
        original = await editor.load("inc-002")
        count = len(fake_api.state.calls)
        assert await editor.save({"title": original.title}) is original
        assert len(fake_api.state.calls) == count

    @pytest.mark.asyncio
    async def test_blank_title_rejected(self, service):
        editor = IncidentDetailEditor(service)
        original = await editor.load("inc-002")
        assert await editor.save({"title": ""}) is None
        assert editor.field_errors == {"title": "Title is required"}
        assert editor.incident is original

    @pytest.mark.asyncio
    async def test_read_only_fields_rejected(self, service):
        editor = IncidentDetailEditor(service)
        await editor.load("inc-002")
        with pytest.raises(FormValidationError) as exc_info:
            editor.changes({"id": "other", "createdAt": "2020-01-01T00:00:00Z"})
        assert set(exc_info.value.field_errors) == {"id", "createdAt"}

    @pytest.mark.asyncio
    async def test_clearing_owner(self, service, fake_api):
        editor = IncidentDetailEditor(service)
        original = await editor.load("inc-002")
        assert original.owner is not None
        saved = await editor.save({"owner": ""})
        assert saved.owner is None
        assert fake_api.state.calls[-1][1] == {"owner": None}

    @pytest.mark.asyncio
    async def test_failed_save_keeps_held_copy(self, service, fake_api):
        editor = IncidentDetailEditor(service)
        original = await editor.load("inc-002")
        fake_api.state.store.pop("inc-002")

        assert await editor.save({"status": "RESOLVED"}) is None
        assert editor.error == "Incident not found"
        assert editor.incident is original

    @pytest.mark.asyncio
    async def test_delete_requires_confirmation(self, service, fake_api):
        editor = IncidentDetailEditor(service)
        await editor.load("inc-004")
        assert await editor.delete() is False
        assert "inc-004" in fake_api.state.store

        assert await editor.delete(confirm=True) is True
        assert editor.deleted
        assert "inc-004" not in fake_api.state.store

    @pytest.mark.asyncio
    async def test_delete_failure(self, service, fake_api):
        editor = IncidentDetailEditor(service)
        await editor.load("inc-004")
        fake_api.state.store.pop("inc-004")
        assert await editor.delete(confirm=True) is False
        assert editor.error == "Failed to delete incident"
