# ---
# File: incident_deck/health/check.py
# Purpose: Reachability probe for the incident API used by the `health` command
# ---

import time

from incident_deck.client.api import ApiClient
from incident_deck.client.errors import IncidentApiError


async def check_api(api: ApiClient) -> dict:
    """
    Incident API Health Check

    Calls the cheapest read endpoint (GET /incidents/filters).
    Returns status "ok" with the round trip latency, or "error" with the reason.
    Never raises for API failures.
    """
    detail = {"status": "ok", "base_url": api.base_url}
    started = time.perf_counter()
    try:
        await api.get("/incidents/filters")
        detail["latency_ms"] = int((time.perf_counter() - started) * 1000)
    except IncidentApiError as exc:
        detail["status"] = "error"
        detail["error"] = exc.message
    return detail
