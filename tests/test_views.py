# tests/test_views.py
from datetime import datetime, timedelta, timezone

import pytest

from app.core.config import Settings
from app.ticket.categorize import infer_category
from app.ticket.models import TicketCategory
from app.views.intervals import View, all_intervals, refresh_interval
from app.views.projections import suggest_priority, time_ago

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def test_default_refresh_intervals():
    settings = Settings()
    assert refresh_interval(View.ACTIVE_CALLS, settings) == 5
    assert refresh_interval(View.AGENT_QUEUE, settings) == 5
    assert refresh_interval(View.ESCALATIONS, settings) == 10
    assert refresh_interval(View.TICKETS, settings) == 30
    assert refresh_interval(View.ANALYTICS, settings) == 60
    assert set(all_intervals(settings)) == {v.value for v in View}


def test_intervals_follow_settings():
    settings = Settings(REFRESH_TICKETS=15)
    assert refresh_interval(View.TICKETS, settings) == 15


def test_views_endpoint(client):
    r = client.get("/views")
    assert r.status_code == 200
    assert r.json()["refresh_intervals"]["urgent_tickets"] == 30


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=30), "0m ago"),
        (timedelta(minutes=59), "59m ago"),
        (timedelta(minutes=60), "1h ago"),
        (timedelta(hours=23, minutes=59), "23h ago"),
        (timedelta(days=3, hours=2), "3d ago"),
    ],
)
def test_time_ago(delta, expected):
    assert time_ago(NOW - delta, now=NOW) == expected


def test_time_ago_treats_naive_as_utc():
    assert time_ago(datetime(2026, 10, 18, 10, 0), now=NOW) == "2h ago"
    assert time_ago(None, now=NOW) == ""


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Accident on the highway", "urgent"),
        ("Driver made a threat", "urgent"),
        ("Complaint about rude driver", "high"),
        ("Question about promo codes", "low"),
        ("Pickup pin was off", "normal"),
    ],
)
def test_suggest_priority(text, expected):
    assert suggest_priority(text) == expected


@pytest.mark.parametrize(
    "subject, expected",
    [
        ("Driver was rude", TicketCategory.COMPLAINT),
        ("Refund for cancelled ride", TicketCategory.BILLING),
        ("Charged twice", TicketCategory.BILLING),
        ("App crashes on login", TicketCategory.TECHNICAL),
        ("Happy with my trip", TicketCategory.GENERAL),
        (None, TicketCategory.GENERAL),
    ],
)
def test_infer_category(subject, expected):
    assert infer_category(subject) == expected
