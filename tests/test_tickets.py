# tests/test_tickets.py
from datetime import timedelta, timezone

from app.access.roles import CallCenterRole
from app.core.timeutils import utcnow
from app.ticket.models import TicketPriority


def auth(actor):
    return {"X-Agent-Id": actor.id}


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_requests_without_actor_are_rejected(client):
    r = client.get("/tickets")
    assert r.status_code == 401
    assert r.json()["error"] == "unauthenticated"

    r2 = client.get("/tickets", headers={"X-Agent-Id": "nobody"})
    assert r2.status_code == 401


def test_deactivated_agent_cannot_act(client, make_actor):
    retired = make_actor(CallCenterRole.AGENT, is_active=False)
    r = client.get("/tickets", headers=auth(retired))
    assert r.status_code == 401


def test_create_and_get_ticket(client, make_actor):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    r = client.post(
        "/tickets",
        json={"subject": "Charged twice", "message": "Two debits for one ride", "category": "billing"},
        headers=auth(sup),
    )
    assert r.status_code == 201
    tid = r.json()["id"]

    r2 = client.get(f"/tickets/{tid}", headers=auth(sup))
    assert r2.status_code == 200
    data = r2.json()
    assert data["subject"] == "Charged twice"
    assert data["category"] == "billing"
    assert data["priority"] == "normal"
    assert data["status"] == "open"
    assert data["assigned_agent_id"] is None
    assert data["time_ago"] == "0m ago"


def test_create_validation_errors(client, make_actor):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    r1 = client.post("/tickets", json={"message": "no subject"}, headers=auth(sup))
    assert r1.status_code == 422

    r2 = client.post("/tickets", json={"subject": "", "message": ""}, headers=auth(sup))
    assert r2.status_code == 422

    r3 = client.post("/tickets", json={"subject": "s", "message": "m", "category": "weather"}, headers=auth(sup))
    assert r3.status_code == 422


def test_get_not_found_returns_404(client, make_actor):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    r = client.get("/tickets/does-not-exist", headers=auth(sup))
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


def test_list_advertises_poll_interval(client, make_actor):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    r = client.get("/tickets", headers=auth(sup))
    assert r.status_code == 200
    assert isinstance(r.json(), list)
    assert r.headers["X-Poll-Interval"] == "30"


def test_assign_respond_resolve_flow(client, make_actor, make_ticket):
    agent = make_actor(CallCenterRole.AGENT)
    ticket = make_ticket()

    r = client.post(f"/tickets/{ticket.id}/assign", headers=auth(agent))
    assert r.status_code == 200
    data = r.json()
    assert data["assigned_agent_id"] == agent.id
    assert data["status"] == "in_progress"
    assert data["first_response_at"] is not None

    r2 = client.post(f"/tickets/{ticket.id}/responses", json={"message": "On it"}, headers=auth(agent))
    assert r2.status_code == 201
    assert r2.json()["sender_id"] == agent.id
    assert r2.json()["is_internal"] is False

    r3 = client.get(f"/tickets/{ticket.id}/responses", headers=auth(agent))
    assert [x["message"] for x in r3.json()] == ["On it"]

    r4 = client.post(f"/tickets/{ticket.id}/resolve", json={"resolution_notes": "Refunded"}, headers=auth(agent))
    assert r4.status_code == 200
    assert r4.json()["status"] == "resolved"
    assert r4.json()["resolved_at"] is not None
    assert r4.json()["resolution_notes"] == "Refunded"

    # terminal: nothing moves it back
    r5 = client.post(f"/tickets/{ticket.id}/responses", json={"message": "again"}, headers=auth(agent))
    assert r5.status_code == 409
    assert r5.json()["error"] == "ticket_closed"
    assert client.get(f"/tickets/{ticket.id}", headers=auth(agent)).json()["status"] == "resolved"


def test_second_assign_does_not_overwrite(client, make_actor, make_ticket):
    first = make_actor(CallCenterRole.AGENT)
    second = make_actor(CallCenterRole.AGENT)
    ticket = make_ticket()

    assert client.post(f"/tickets/{ticket.id}/assign", headers=auth(first)).status_code == 200
    r = client.post(f"/tickets/{ticket.id}/assign", headers=auth(second))
    assert r.status_code == 409
    assert r.json()["error"] == "already_assigned"

    sup = make_actor(CallCenterRole.SUPERVISOR)
    assert client.get(f"/tickets/{ticket.id}", headers=auth(sup)).json()["assigned_agent_id"] == first.id


def test_agent_cannot_respond_to_someone_elses_ticket(client, make_actor, make_ticket):
    owner = make_actor(CallCenterRole.AGENT)
    other = make_actor(CallCenterRole.AGENT)
    ticket = make_ticket()
    client.post(f"/tickets/{ticket.id}/assign", headers=auth(owner))

    r = client.post(f"/tickets/{ticket.id}/responses", json={"message": "hi"}, headers=auth(other))
    assert r.status_code == 403
    assert r.json()["error"] == "not_assigned_agent"

    r2 = client.post(f"/tickets/{ticket.id}/close", headers=auth(other))
    assert r2.status_code == 403


def test_agent_list_only_shows_own_tickets(client, make_actor, make_ticket):
    agent = make_actor(CallCenterRole.AGENT)
    mine = make_ticket(subject="Mine")
    make_ticket(subject="Not mine")
    client.post(f"/tickets/{mine.id}/assign", headers=auth(agent))

    r = client.get("/tickets", params={"filter": "unassigned"}, headers=auth(agent))
    assert [t["id"] for t in r.json()] == [mine.id]


def test_filter_by_assignment_and_status(client, make_actor, make_ticket):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    agent = make_actor(CallCenterRole.AGENT)
    a = make_ticket(subject="A")
    b = make_ticket(subject="B")
    client.post(f"/tickets/{b.id}/assign", headers=auth(agent))
    client.post(f"/tickets/{b.id}/close", headers=auth(sup))

    unassigned = {t["id"] for t in client.get("/tickets?filter=unassigned", headers=auth(sup)).json()}
    assert a.id in unassigned
    assert b.id not in unassigned

    open_ids = {t["id"] for t in client.get("/tickets?filter=open", headers=auth(sup)).json()}
    assert a.id in open_ids
    assert b.id not in open_ids

    closed = client.get("/tickets?status=closed", headers=auth(sup)).json()
    assert [t["id"] for t in closed] == [b.id]


def test_search_matches_subject(client, make_actor, make_ticket):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    make_ticket(subject="Lost phone in car")
    make_ticket(subject="App keeps crashing")

    r = client.get("/tickets", params={"search": "phone"}, headers=auth(sup))
    assert [t["subject"] for t in r.json()] == ["Lost phone in car"]


def test_backfill_categories_fills_legacy_rows(client, make_actor, make_ticket):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    agent = make_actor(CallCenterRole.AGENT)
    legacy = make_ticket(subject="Refund for cancelled trip")

    assert client.post("/tickets/backfill-categories", headers=auth(agent)).status_code == 403

    r = client.post("/tickets/backfill-categories", headers=auth(sup))
    assert r.status_code == 200
    assert r.json() == {"updated": 1}
    assert client.get(f"/tickets/{legacy.id}", headers=auth(sup)).json()["category"] == "billing"


def _updated_since(client, actor, cutoff):
    r = client.get("/tickets", params={"updated_since": cutoff}, headers=auth(actor))
    assert r.status_code == 200
    return [t["subject"] for t in r.json()]


def test_updated_since_returns_only_recent_changes(client, make_actor, make_ticket):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    stale = utcnow() - timedelta(hours=2)
    make_ticket(subject="stale", created_at=stale, updated_at=stale)
    make_ticket(subject="fresh")

    cutoff = utcnow() - timedelta(minutes=1)
    assert _updated_since(client, sup, cutoff.strftime("%Y-%m-%dT%H:%M:%S.%fZ")) == ["fresh"]


def test_updated_since_honours_client_offset(client, make_actor, make_ticket):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    stale = utcnow() - timedelta(hours=5)
    make_ticket(subject="stale", created_at=stale, updated_at=stale)
    make_ticket(subject="fresh")

    # Same instant written in UTC+03:00 and UTC-05:00
    cutoff = utcnow() - timedelta(minutes=1)
    for offset in (3, -5):
        local = cutoff.astimezone(timezone(timedelta(hours=offset)))
        assert _updated_since(client, sup, local.isoformat()) == ["fresh"]


def test_escalated_filter_lists_only_escalated_tickets(client, make_actor, make_ticket):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    calm = make_ticket(subject="calm")
    hot = make_ticket(subject="hot", priority=TicketPriority.HIGH)

    r = client.post("/escalations", json={"ticket_id": hot.id, "reason": "rider in danger"}, headers=auth(sup))
    assert r.status_code == 201

    listed = client.get("/tickets", params={"filter": "escalated"}, headers=auth(sup)).json()
    assert [t["id"] for t in listed] == [hot.id]
    assert listed[0]["escalation_id"] == r.json()["escalation"]["id"]
    assert calm.id not in [t["id"] for t in listed]


def test_timestamps_are_emitted_as_utc(client, make_actor, make_ticket):
    sup = make_actor(CallCenterRole.SUPERVISOR)
    ticket = make_ticket()

    data = client.get(f"/tickets/{ticket.id}", headers=auth(sup)).json()
    for field in ("created_at", "updated_at"):
        assert data[field].endswith(("Z", "+00:00"))

    r = client.post("/escalations", json={"ticket_id": ticket.id, "reason": "unsafe driving"}, headers=auth(sup))
    assert r.json()["escalation"]["created_at"].endswith(("Z", "+00:00"))
