# tests/test_policy.py
import pytest

from helpdesk.auth.domain import Principal
from helpdesk.core import AccessDeniedException
from helpdesk.tickets.domain import AccessPolicy, Operation

ADMIN = Principal(id="admin-1", email="admin@acme.com", role="admin")
AGENT = Principal(id="agent-1", email="agent@acme.com", role="agent")

policy = AccessPolicy()


@pytest.mark.parametrize("operation", list(Operation))
def test_admin_may_do_anything(operation):
    assert policy.is_allowed(ADMIN, operation, assignee_id="someone-else")


@pytest.mark.parametrize("operation", [Operation.VIEW, Operation.UPDATE_STATUS])
def test_agent_scoped_to_own_assignments(operation):
    assert policy.is_allowed(AGENT, operation, assignee_id="agent-1")
    assert not policy.is_allowed(AGENT, operation, assignee_id="agent-2")


@pytest.mark.parametrize("operation", [Operation.UPDATE_PRIORITY, Operation.REASSIGN, Operation.DELETE])
def test_agent_denied_admin_operations_even_on_own_ticket(operation):
    with pytest.raises(AccessDeniedException):
        policy.enforce(AGENT, operation, assignee_id="agent-1")


def test_collection_scope():
    assert policy.assignee_filter(ADMIN, Operation.LIST) is None
    assert policy.assignee_filter(AGENT, Operation.LIST) == "agent-1"
    assert policy.assignee_filter(AGENT, Operation.STATS) == "agent-1"


def test_unknown_role_gets_nothing():
    stranger = Principal(id="x", email="x@acme.com", role="guest")
    assert not policy.is_allowed(stranger, Operation.VIEW, assignee_id="x")
    with pytest.raises(AccessDeniedException):
        policy.assignee_filter(stranger, Operation.LIST)
