# tests/test_ticket_entity.py
from datetime import datetime, timedelta, timezone

import pytest

from helpdesk.tickets.domain import Ticket


def _ticket(**overrides):
    fields = dict(
        title="Server crash on login",
        description="Users cannot log in at all.",
        priority="high",
        category="bug-report",
        created_by="creator-1",
        assigned_to="agent-1",
    )
    fields.update(overrides)
    return Ticket.open(**fields)


def test_new_ticket_is_open_and_unresolved():
    ticket = _ticket(title="  Padded title  ")
    assert ticket.status == "open"
    assert ticket.resolved_at is None
    assert ticket.title == "Padded title"


def test_resolving_stamps_and_keeps_resolved_at():
    ticket = _ticket()
    first = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    ticket.change_status("resolved", timestamp=first)
    assert ticket.resolved_at == first
    assert ticket.updated_at == first

    ticket.change_status("resolved", timestamp=first + timedelta(hours=1))
    assert ticket.resolved_at == first


def test_leaving_resolved_clears_resolved_at():
    ticket = _ticket()
    ticket.change_status("resolved")
    ticket.change_status("closed")
    assert ticket.resolved_at is None


def test_loaded_resolved_ticket_without_timestamp_gets_one():
    ticket = Ticket(
        id="t-1", title="Email notifications", description="Nothing arrives anymore.",
        priority="high", category="bug-report", status="resolved",
        created_by="creator-1", assigned_to="agent-1",
    )
    assert ticket.resolved_at is not None


@pytest.mark.parametrize("overrides", [
    {"title": "Hey"},
    {"title": "x" * 201},
    {"description": "too short"},
    {"priority": "whenever"},
    {"category": "sales"},
])
def test_invalid_fields_rejected(overrides):
    with pytest.raises(ValueError):
        _ticket(**overrides)


def test_invalid_status_rejected():
    with pytest.raises(ValueError):
        _ticket().change_status("pending")


def test_reassign_and_priority():
    ticket = _ticket()
    ticket.reassign("agent-2")
    ticket.change_priority("low")
    assert ticket.is_assigned_to("agent-2")
    assert ticket.priority == "low"
