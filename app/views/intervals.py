# app/views/intervals.py
"""
Read-model refresh contract.

Console views poll; nothing is pushed. A view is consistent with the store as
of its last fetch, so its staleness is bounded by the interval below. List
endpoints advertise their view's interval in the ``X-Poll-Interval`` header.
"""
import enum

from fastapi import Response

from app.core.config import Settings, get_settings

POLL_HEADER = "X-Poll-Interval"


class View(str, enum.Enum):
    ACTIVE_CALLS = "active_calls"
    AGENT_QUEUE = "agent_queue"
    DISPATCH = "dispatch"
    TICKETS = "tickets"
    ESCALATIONS = "escalations"
    URGENT_TICKETS = "urgent_tickets"
    CALL_STATS = "call_stats"
    ANALYTICS = "analytics"


_SETTING_FOR_VIEW = {
    View.ACTIVE_CALLS: "REFRESH_ACTIVE_CALLS",
    View.AGENT_QUEUE: "REFRESH_AGENT_QUEUE",
    View.DISPATCH: "REFRESH_DISPATCH",
    View.TICKETS: "REFRESH_TICKETS",
    View.ESCALATIONS: "REFRESH_ESCALATIONS",
    View.URGENT_TICKETS: "REFRESH_URGENT_TICKETS",
    View.CALL_STATS: "REFRESH_CALL_STATS",
    View.ANALYTICS: "REFRESH_ANALYTICS",
}


def refresh_interval(view: View, settings: Settings | None = None) -> int:
    settings = settings or get_settings()
    return getattr(settings, _SETTING_FOR_VIEW[view])


def all_intervals(settings: Settings | None = None) -> dict[str, int]:
    return {view.value: refresh_interval(view, settings) for view in View}


def poll_hint(view: View):
    """Route dependency that stamps the view's poll interval on the response."""

    def _set_header(response: Response) -> None:
        response.headers[POLL_HEADER] = str(refresh_interval(view))

    return _set_header
