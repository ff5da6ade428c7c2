# tests/test_tickets_api.py
import pytest

MISSING_ID = "0b5c9a3e-2f1d-4c1b-9a55-3f0d9d8e7c6b"


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def team(signup):
    """One admin and two agents."""
    admin_token, admin = signup("Sarah Admin", "sarah@acme.com", role="admin")
    john_token, john = signup("John Agent", "john@acme.com")
    mike_token, mike = signup("Mike Support", "mike@acme.com")
    return {
        "admin": (admin_token, admin),
        "john": (john_token, john),
        "mike": (mike_token, mike),
    }


def _create(client, token, title="Server crash on login",
            description="Urgent, users cannot log in at all", priority=None):
    payload = {"title": title, "description": description}
    if priority:
        payload["priority"] = priority
    r = client.post("/api/tickets", json=payload, headers=_auth(token))
    assert r.status_code == 201, r.text
    return r.json()["data"]


def _token_for(team, user_id):
    for token, user in team.values():
        if user["id"] == user_id:
            return token
    raise KeyError(user_id)


def _other_agent_token(team, user_id):
    for name in ("john", "mike"):
        token, user = team[name]
        if user["id"] != user_id:
            return token
    raise KeyError(user_id)


# ========== Create ==========

def test_create_uses_suggested_category_and_priority(client, team):
    admin_token, admin = team["admin"]

    data = _create(client, admin_token)
    ticket = data["ticket"]

    assert ticket["category"] == "bug-report"
    assert ticket["priority"] == "urgent"
    assert ticket["status"] == "open"
    assert ticket["resolvedAt"] is None
    assert ticket["createdBy"]["id"] == admin["id"]
    assert ticket["assignedTo"]["id"] in {team["john"][1]["id"], team["mike"][1]["id"]}

    analysis = data["aiAnalysis"]
    assert analysis["suggestedCategory"] == "bug-report"
    assert analysis["suggestedPriority"] == "urgent"
    assert 0.9 <= analysis["confidence"] <= 1.0


def test_explicit_priority_overrides_suggestion(client, team):
    admin_token, _ = team["admin"]

    data = _create(client, admin_token, priority="low")

    assert data["ticket"]["priority"] == "low"
    assert data["ticket"]["category"] == "bug-report"
    assert data["aiAnalysis"]["suggestedPriority"] == "urgent"


def test_create_without_agents_is_unavailable(client, signup):
    admin_token, _ = signup("Sarah Admin", "sarah@acme.com", role="admin")

    r = client.post(
        "/api/tickets",
        json={"title": "Printer on fire", "description": "Please send help quickly."},
        headers=_auth(admin_token),
    )
    assert r.status_code == 503
    assert r.json()["message"] == "No agents available for assignment"


def test_create_validation(client, team):
    admin_token, _ = team["admin"]

    r = client.post(
        "/api/tickets",
        json={"title": "Hey", "description": "short"},
        headers=_auth(admin_token),
    )
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["errors"]}
    assert fields == {"title", "description"}


def test_create_requires_token(client, team):
    r = client.post("/api/tickets", json={"title": "Server down", "description": "Nothing responds at all."})
    assert r.status_code == 401


# ========== List ==========

def test_agent_only_lists_own_assignments(client, team):
    admin_token, _ = team["admin"]
    for i in range(6):
        _create(client, admin_token, title=f"Billing question {i}", description="Invoice total looks wrong.")

    for name in ("john", "mike"):
        token, user = team[name]
        other = team["mike" if name == "john" else "john"][1]

        r = client.get("/api/tickets", params={"assignedTo": other["id"]}, headers=_auth(token))
        assert r.status_code == 200
        tickets = r.json()["data"]["tickets"]
        assert all(t["assignedTo"]["id"] == user["id"] for t in tickets)

    r = client.get("/api/tickets", headers=_auth(admin_token))
    assert r.json()["data"]["pagination"]["totalTickets"] == 6


def test_admin_filters(client, team):
    admin_token, _ = team["admin"]
    first = _create(client, admin_token)["ticket"]
    _create(client, admin_token, title="Refund needed", description="Please refund my last invoice.")

    assignee_id = first["assignedTo"]["id"]
    r = client.get("/api/tickets", params={"assignedTo": assignee_id}, headers=_auth(admin_token))
    assert all(t["assignedTo"]["id"] == assignee_id for t in r.json()["data"]["tickets"])

    r = client.get("/api/tickets", params={"category": "bug-report"}, headers=_auth(admin_token))
    tickets = r.json()["data"]["tickets"]
    assert [t["id"] for t in tickets] == [first["id"]]

    r = client.get("/api/tickets", params={"assignedTo": "not-an-id"}, headers=_auth(admin_token))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid user ID"


def test_invalid_filter_value_is_rejected(client, team):
    admin_token, _ = team["admin"]
    r = client.get("/api/tickets", params={"status": "pending"}, headers=_auth(admin_token))
    assert r.status_code == 400
    assert r.json()["message"] == "Validation errors"


def test_pagination(client, team):
    admin_token, _ = team["admin"]
    for i in range(3):
        _create(client, admin_token, title=f"Ticket number {i}", description="Something to look at.")

    r = client.get("/api/tickets", params={"page": 2, "limit": 2}, headers=_auth(admin_token))
    data = r.json()["data"]
    assert len(data["tickets"]) == 1
    assert data["pagination"] == {
        "currentPage": 2,
        "totalPages": 2,
        "totalTickets": 3,
        "hasNextPage": False,
        "hasPrevPage": True,
    }

    r = client.get("/api/tickets", params={"page": 0, "limit": 1000}, headers=_auth(admin_token))
    pagination = r.json()["data"]["pagination"]
    assert pagination["currentPage"] == 1
    assert pagination["totalPages"] == 1

    r = client.get("/api/tickets", params={"limit": 0}, headers=_auth(admin_token))
    data = r.json()["data"]
    assert len(data["tickets"]) == 1
    assert data["pagination"]["totalPages"] == 3

    r = client.get("/api/tickets", params={"page": "x", "limit": "many"}, headers=_auth(admin_token))
    assert r.status_code == 200
    pagination = r.json()["data"]["pagination"]
    assert pagination["currentPage"] == 1
    assert pagination["totalPages"] == 1
    assert len(r.json()["data"]["tickets"]) == 3


def test_sorting(client, team):
    admin_token, _ = team["admin"]
    for title in ("Charlie ticket", "Alpha ticket", "Bravo ticket"):
        _create(client, admin_token, title=title, description="Something to look at.")

    r = client.get(
        "/api/tickets",
        params={"sortBy": "title", "sortOrder": "asc"},
        headers=_auth(admin_token),
    )
    titles = [t["title"] for t in r.json()["data"]["tickets"]]
    assert titles == ["Alpha ticket", "Bravo ticket", "Charlie ticket"]

    r = client.get("/api/tickets", params={"sortBy": "nonsense"}, headers=_auth(admin_token))
    assert r.status_code == 200
    assert len(r.json()["data"]["tickets"]) == 3


# ========== Get ==========

def test_get_ticket_access(client, team):
    admin_token, _ = team["admin"]
    ticket = _create(client, admin_token)["ticket"]
    assignee_id = ticket["assignedTo"]["id"]

    r = client.get(f"/api/tickets/{ticket['id']}", headers=_auth(_token_for(team, assignee_id)))
    assert r.status_code == 200
    assert r.json()["data"]["ticket"]["id"] == ticket["id"]

    r = client.get(f"/api/tickets/{ticket['id']}", headers=_auth(_other_agent_token(team, assignee_id)))
    assert r.status_code == 403

    r = client.get(f"/api/tickets/{ticket['id']}", headers=_auth(admin_token))
    assert r.status_code == 200


def test_get_invalid_and_missing_ids(client, team):
    admin_token, _ = team["admin"]

    r = client.get("/api/tickets/12345", headers=_auth(admin_token))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid ticket ID"

    r = client.get(f"/api/tickets/{MISSING_ID}", headers=_auth(admin_token))
    assert r.status_code == 404
    assert r.json()["message"] == "Ticket not found"


# ========== Update ==========

def test_resolving_sets_and_clears_resolved_at(client, team):
    admin_token, _ = team["admin"]
    ticket = _create(client, admin_token)["ticket"]
    token = _token_for(team, ticket["assignedTo"]["id"])
    url = f"/api/tickets/{ticket['id']}"

    r = client.patch(url, json={"status": "resolved"}, headers=_auth(token))
    assert r.status_code == 200
    resolved = r.json()["data"]["ticket"]
    assert resolved["status"] == "resolved"
    assert resolved["resolvedAt"] is not None

    r = client.patch(url, json={"status": "resolved"}, headers=_auth(token))
    assert r.json()["data"]["ticket"]["resolvedAt"] == resolved["resolvedAt"]

    r = client.patch(url, json={"status": "in-progress"}, headers=_auth(token))
    assert r.json()["data"]["ticket"]["status"] == "in-progress"
    assert r.json()["data"]["ticket"]["resolvedAt"] is None


def test_agent_update_restrictions(client, team):
    admin_token, _ = team["admin"]
    ticket = _create(client, admin_token)["ticket"]
    assignee_id = ticket["assignedTo"]["id"]
    url = f"/api/tickets/{ticket['id']}"

    r = client.patch(url, json={"status": "closed"}, headers=_auth(_other_agent_token(team, assignee_id)))
    assert r.status_code == 403

    r = client.patch(url, json={"priority": "low"}, headers=_auth(_token_for(team, assignee_id)))
    assert r.status_code == 403
    assert r.json()["message"] == "Access denied: Only admins can change ticket priority"

    r = client.get(url, headers=_auth(admin_token))
    assert r.json()["data"]["ticket"]["priority"] == "urgent"
    assert r.json()["data"]["ticket"]["status"] == "open"


def test_agent_cannot_reassign(client, team):
    admin_token, _ = team["admin"]
    ticket = _create(client, admin_token)["ticket"]
    assignee_id = ticket["assignedTo"]["id"]
    url = f"/api/tickets/{ticket['id']}"
    other = next(
        user for _, user in (team["john"], team["mike"])
        if user["id"] != assignee_id
    )

    r = client.patch(url, json={"assignedTo": other["id"]}, headers=_auth(_token_for(team, assignee_id)))
    assert r.status_code == 403
    assert r.json()["message"] == "Access denied: Only admins can reassign tickets"

    r = client.get(url, headers=_auth(admin_token))
    assert r.json()["data"]["ticket"]["assignedTo"]["id"] == assignee_id


def test_admin_reassign(client, team):
    admin_token, admin = team["admin"]
    ticket = _create(client, admin_token)["ticket"]
    url = f"/api/tickets/{ticket['id']}"

    r = client.patch(url, json={"assignedTo": admin["id"]}, headers=_auth(admin_token))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid assigned user"

    r = client.patch(url, json={"assignedTo": MISSING_ID}, headers=_auth(admin_token))
    assert r.status_code == 400

    other = next(
        user for _, user in (team["john"], team["mike"])
        if user["id"] != ticket["assignedTo"]["id"]
    )
    r = client.patch(url, json={"assignedTo": other["id"], "priority": "medium"}, headers=_auth(admin_token))
    assert r.status_code == 200
    updated = r.json()["data"]["ticket"]
    assert updated["assignedTo"] == {"id": other["id"], "name": other["name"], "email": other["email"]}
    assert updated["priority"] == "medium"


# ========== Delete ==========

def test_delete(client, team):
    admin_token, _ = team["admin"]
    ticket = _create(client, admin_token)["ticket"]
    url = f"/api/tickets/{ticket['id']}"

    r = client.delete(url, headers=_auth(_token_for(team, ticket["assignedTo"]["id"])))
    assert r.status_code == 403
    assert r.json()["message"] == "Admin access required"

    r = client.delete(f"/api/tickets/{MISSING_ID}", headers=_auth(admin_token))
    assert r.status_code == 404

    r = client.delete("/api/tickets/not-an-id", headers=_auth(admin_token))
    assert r.status_code == 400

    r = client.delete(url, headers=_auth(admin_token))
    assert r.status_code == 200
    assert r.json()["success"] is True

    r = client.get(url, headers=_auth(admin_token))
    assert r.status_code == 404


# ========== Stats ==========

def test_stats(client, team):
    admin_token, _ = team["admin"]
    john_token, john = team["john"]
    mike_token, mike = team["mike"]
    bug = _create(client, admin_token)["ticket"]
    refund = _create(client, admin_token, title="Refund needed", description="Please refund my last invoice.")["ticket"]

    client.patch(f"/api/tickets/{bug['id']}", json={"assignedTo": john["id"]}, headers=_auth(admin_token))
    client.patch(f"/api/tickets/{refund['id']}", json={"assignedTo": mike["id"]}, headers=_auth(admin_token))
    client.patch(f"/api/tickets/{bug['id']}", json={"status": "resolved"}, headers=_auth(john_token))

    r = client.get("/api/tickets/stats", headers=_auth(admin_token))
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["overview"] == {"total": 2, "open": 1, "inProgress": 0, "resolved": 1, "closed": 0}
    assert {g["_id"]: g["count"] for g in data["byCategory"]} == {"bug-report": 1, "billing": 1}
    assert {g["_id"]: g["count"] for g in data["byPriority"]} == {"urgent": 1, "medium": 1}

    r = client.get("/api/tickets/stats", headers=_auth(john_token))
    data = r.json()["data"]
    assert data["overview"] == {"total": 1, "open": 0, "inProgress": 0, "resolved": 1, "closed": 0}
    assert data["byCategory"] == [{"_id": "bug-report", "count": 1}]

    r = client.get("/api/tickets/stats", headers=_auth(mike_token))
    data = r.json()["data"]
    assert data["overview"] == {"total": 1, "open": 1, "inProgress": 0, "resolved": 0, "closed": 0}
    assert data["byCategory"] == [{"_id": "billing", "count": 1}]
