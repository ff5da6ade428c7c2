"""
Ticket Access Policy
====================

Who may do what to which ticket, as one table.

Each role maps every operation to a scope:
- ALL: allowed on any ticket
- ASSIGNED: allowed only on tickets assigned to the requester
- NONE: denied
"""

from enum import Enum
from typing import Dict, Optional

from helpdesk.auth.domain import Principal
from helpdesk.config import Role
from helpdesk.core import AccessDeniedException


class Operation(str, Enum):
    LIST = "list"
    VIEW = "view"
    UPDATE_STATUS = "update_status"
    UPDATE_PRIORITY = "update_priority"
    REASSIGN = "reassign"
    DELETE = "delete"
    STATS = "stats"


class Scope(str, Enum):
    ALL = "all"
    ASSIGNED = "assigned"
    NONE = "none"


POLICY: Dict[str, Dict[Operation, Scope]] = {
    Role.ADMIN: {
        Operation.LIST: Scope.ALL,
        Operation.VIEW: Scope.ALL,
        Operation.UPDATE_STATUS: Scope.ALL,
        Operation.UPDATE_PRIORITY: Scope.ALL,
        Operation.REASSIGN: Scope.ALL,
        Operation.DELETE: Scope.ALL,
        Operation.STATS: Scope.ALL,
    },
    Role.AGENT: {
        Operation.LIST: Scope.ASSIGNED,
        Operation.VIEW: Scope.ASSIGNED,
        Operation.UPDATE_STATUS: Scope.ASSIGNED,
        Operation.UPDATE_PRIORITY: Scope.NONE,
        Operation.REASSIGN: Scope.NONE,
        Operation.DELETE: Scope.NONE,
        Operation.STATS: Scope.ASSIGNED,
    },
}

DENIAL_MESSAGES: Dict[Operation, str] = {
    Operation.LIST: "Access denied: You cannot list tickets",
    Operation.VIEW: "Access denied: You can only view tickets assigned to you",
    Operation.UPDATE_STATUS: "Access denied: You can only update tickets assigned to you",
    Operation.UPDATE_PRIORITY: "Access denied: Only admins can change ticket priority",
    Operation.REASSIGN: "Access denied: Only admins can reassign tickets",
    Operation.DELETE: "Access denied: Only admins can delete tickets",
    Operation.STATS: "Access denied: You cannot view ticket statistics",
}


class AccessPolicy:
    """Evaluates the policy table for a principal."""

    def __init__(self, table: Optional[Dict[str, Dict[Operation, Scope]]] = None):
        self._table = table or POLICY

    def scope(self, principal: Principal, operation: Operation) -> Scope:
        """Scope granted to the principal; unknown roles get nothing."""
        return self._table.get(principal.role, {}).get(operation, Scope.NONE)

    def is_allowed(
        self,
        principal: Principal,
        operation: Operation,
        assignee_id: Optional[str] = None
    ) -> bool:
        """
        Whether the principal may perform the operation.

        Args:
            principal: The caller
            operation: What they want to do
            assignee_id: The ticket's assignee; None for collection operations
        """
        scope = self.scope(principal, operation)
        if scope == Scope.ALL:
            return True
        if scope == Scope.ASSIGNED:
            return assignee_id is None or assignee_id == principal.id
        return False

    def enforce(
        self,
        principal: Principal,
        operation: Operation,
        assignee_id: Optional[str] = None
    ) -> None:
        """Raise AccessDeniedException unless allowed."""
        if not self.is_allowed(principal, operation, assignee_id):
            raise AccessDeniedException(DENIAL_MESSAGES[operation])

    def assignee_filter(self, principal: Principal, operation: Operation) -> Optional[str]:
        """
        Assignee every query must be restricted to, or None for unrestricted.

        Used by collection operations (list, stats).
        """
        scope = self.scope(principal, operation)
        if scope == Scope.ALL:
            return None
        if scope == Scope.ASSIGNED:
            return principal.id
        raise AccessDeniedException(DENIAL_MESSAGES[operation])
