# ---
# File: incident_deck/main.py
# Purpose: Command-line front-end for the incident API: list/show/create/update/delete/health.
#          Drives the same dashboard and editor models a UI would.
# ---

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from incident_deck import config
from incident_deck.client.api import ApiClient
from incident_deck.client.errors import FormValidationError
from incident_deck.dashboard.controller import DashboardController
from incident_deck.dashboard.state import DashboardState, apply_filter_change, apply_sort
from incident_deck.editor.create_form import CreateIncidentForm
from incident_deck.editor.detail import IncidentDetailEditor
from incident_deck.health.check import check_api
from incident_deck.incidents.incident_services import IncidentService
from incident_deck.incidents.models import (
    SEVERITY_LABELS,
    Incident,
    IncidentSeverity,
    IncidentStatus,
    SortField,
    SortOrder,
)
from incident_deck.utils.date_utils import format_date, format_datetime

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID = 2

EDITABLE_FIELDS = ("title", "service", "severity", "status", "owner", "summary")

TABLE_COLUMNS = (
    ("ID", 10),
    ("Title", 36),
    ("Service", 16),
    ("Severity", 14),
    ("Status", 10),
    ("Owner", 14),
    ("Created", 20),
)


# ---
# Output helpers
# ---
def _cell(value: str, width: int) -> str:
    value = value or "-"
    if len(value) > width:
        value = value[: width - 1] + "…"
    return value.ljust(width)


def render_table(rows) -> str:
    header = " ".join(_cell(name, width) for name, width in TABLE_COLUMNS)
    lines = [header, "-" * len(header)]
    for incident in rows:
        values = (
            incident.id,
            incident.title,
            incident.service,
            f"{incident.severity.value} {SEVERITY_LABELS[incident.severity]}",
            incident.status.value,
            incident.owner or "Unassigned",
            format_date(incident.createdAt),
        )
        lines.append(" ".join(_cell(value, width) for value, (_, width) in zip(values, TABLE_COLUMNS)))
    if not rows:
        lines.append("No incidents found.")
    return "\n".join(lines)


def render_summary(state: DashboardState) -> str:
    return (
        f"Page {state.page_number} of {max(state.total_pages, 1)} | "
        f"Total: {state.total_count} | Open: {state.open_count} | Active SEV1: {state.active_sev1_count}"
    )


def render_incident(incident: Incident) -> str:
    lines = [
        f"{incident.title}  [{incident.id}]",
        f"  Service:  {incident.service}",
        f"  Severity: {incident.severity.value} ({SEVERITY_LABELS[incident.severity]})",
        f"  Status:   {incident.status.value}",
        f"  Owner:    {incident.owner or 'Unassigned'}",
        f"  Created:  {format_datetime(incident.createdAt)}",
        f"  Updated:  {format_datetime(incident.updatedAt)}",
    ]
    if incident.summary:
        lines += ["", incident.summary]
    return "\n".join(lines)


def print_field_errors(errors: dict) -> None:
    for field, message in errors.items():
        print(f"  {field}: {message}", file=sys.stderr)


# ---
# Commands
# ---
async def cmd_list(service: IncidentService, args) -> int:
    controller = DashboardController(service, page_size=args.limit)
    try:
        state = controller.state
        for name in ("status", "severity", "service", "search"):
            state = apply_filter_change(state, name, getattr(args, name))
        controller.state = apply_sort(state, args.sort, args.order)

        state = await controller.load_initial()
        for page in range(args.pages):
            if page:
                if not state.has_next:
                    break
                state = await controller.next_page()
            if state.error:
                print(f"Error: {state.error}", file=sys.stderr)
                return EXIT_ERROR
            print(render_summary(state))
            print(render_table(state.rows))
            print()
    finally:
        await controller.aclose()
    return EXIT_OK


async def cmd_show(service: IncidentService, args) -> int:
    editor = IncidentDetailEditor(service)
    incident = await editor.load(args.incident_id)
    if incident is None:
        print(f"Error: {editor.error}", file=sys.stderr)
        return EXIT_ERROR
    print(render_incident(incident))
    return EXIT_OK


async def cmd_create(service: IncidentService, args) -> int:
    form = CreateIncidentForm(service)
    await form.load_options()
    values = {name: getattr(args, name) for name in EDITABLE_FIELDS if getattr(args, name) is not None}
    incident = await form.submit(values)
    if form.field_errors:
        print("Invalid incident:", file=sys.stderr)
        print_field_errors(form.field_errors)
        return EXIT_INVALID
    if incident is None:
        print(f"Error: {form.error}", file=sys.stderr)
        return EXIT_ERROR
    print(f"Created incident {incident.id}")
    print(render_incident(incident))
    return EXIT_OK


async def cmd_update(service: IncidentService, args) -> int:
    editor = IncidentDetailEditor(service)
    if await editor.load(args.incident_id) is None:
        print(f"Error: {editor.error}", file=sys.stderr)
        return EXIT_ERROR
    values = {name: getattr(args, name) for name in EDITABLE_FIELDS if getattr(args, name) is not None}
    incident = await editor.save(values)
    if editor.field_errors:
        print("Invalid changes:", file=sys.stderr)
        print_field_errors(editor.field_errors)
        return EXIT_INVALID
    if incident is None:
        print(f"Error: {editor.error}", file=sys.stderr)
        return EXIT_ERROR
    print(render_incident(incident))
    return EXIT_OK


async def cmd_delete(service: IncidentService, args) -> int:
    if not args.yes:
        print("Refusing to delete without --yes", file=sys.stderr)
        return EXIT_INVALID
    editor = IncidentDetailEditor(service)
    if await editor.load(args.incident_id) is None:
        print(f"Error: {editor.error}", file=sys.stderr)
        return EXIT_ERROR
    if not await editor.delete(confirm=True):
        print(f"Error: {editor.error}", file=sys.stderr)
        return EXIT_ERROR
    print(f"Deleted incident {args.incident_id}")
    return EXIT_OK


async def cmd_health(api: ApiClient) -> int:
    detail = await check_api(api)
    if detail["status"] == "ok":
        print(f"[HEALTH] ✓ {detail['base_url']} reachable in {detail['latency_ms']}ms")
        return EXIT_OK
    print(f"[HEALTH] ✗ {detail['base_url']} unreachable: {detail['error']}", file=sys.stderr)
    return EXIT_ERROR


# ---
# Argument parsing
# ---
def _add_edit_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--title")
    parser.add_argument("--service")
    parser.add_argument("--severity", help="SEV1 | SEV2 | SEV3 | SEV4")
    parser.add_argument("--status", help="OPEN | MITIGATED | RESOLVED")
    parser.add_argument("--owner")
    parser.add_argument("--summary")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="incident-deck", description="Operational incident tracker client")
    parser.add_argument("--api-url", default=config.API_BASE_URL, help="Incident API base URL")
    parser.add_argument("--timeout", type=float, default=config.API_TIMEOUT_SECONDS, help="Request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="List incidents")
    list_parser.add_argument("--status", choices=[status.value for status in IncidentStatus])
    list_parser.add_argument("--severity", choices=[severity.value for severity in IncidentSeverity])
    list_parser.add_argument("--service")
    list_parser.add_argument("--search")
    list_parser.add_argument("--sort", choices=[field.value for field in SortField], default=SortField.CREATED_AT.value)
    list_parser.add_argument("--order", choices=[order.value for order in SortOrder], default=SortOrder.DESC.value)
    list_parser.add_argument("--limit", type=int, choices=config.PAGE_SIZE_OPTIONS, default=config.DEFAULT_PAGE_SIZE)
    list_parser.add_argument("--pages", type=int, default=1, help="Number of pages to walk")

    show_parser = commands.add_parser("show", help="Show one incident")
    show_parser.add_argument("incident_id")

    create_cmd = commands.add_parser("create", help="Create an incident")
    _add_edit_arguments(create_cmd)

    update_parser = commands.add_parser("update", help="Update incident fields")
    update_parser.add_argument("incident_id")
    _add_edit_arguments(update_parser)

    delete_parser = commands.add_parser("delete", help="Delete an incident")
    delete_parser.add_argument("incident_id")
    delete_parser.add_argument("--yes", action="store_true", help="Confirm deletion")

    commands.add_parser("health", help="Check incident API reachability")
    return parser


async def run(args, transport=None) -> int:
    async with ApiClient(base_url=args.api_url, timeout_seconds=args.timeout, transport=transport) as api:
        if args.command == "health":
            return await cmd_health(api)
        service = IncidentService(api)
        handler = {
            "list": cmd_list,
            "show": cmd_show,
            "create": cmd_create,
            "update": cmd_update,
            "delete": cmd_delete,
        }[args.command]
        try:
            return await handler(service, args)
        except FormValidationError as exc:
            print_field_errors(exc.field_errors)
            return EXIT_INVALID
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return EXIT_INVALID


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    config.configure_logging()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    logger.debug("[RUN] %s against %s", args.command, args.api_url)
    return asyncio.run(run(args))


# ---
# Entrypoint for local use: python -m incident_deck.main list --status OPEN
# ---
if __name__ == "__main__":
    sys.exit(main())
