"""
Tickets Domain Layer
====================

Domain layer for the ticket lifecycle.

Contains:
- Entities: Ticket, UserRef
- Categorization: keyword rule table, LLM prompt and reply parsing
- Policy: role x operation access table

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from helpdesk.tickets.domain.entities import Ticket, UserRef
from helpdesk.tickets.domain.categorization import (
    CategorizationResult,
    CategorizationRule,
    CategorizationPromptBuilder,
    KeywordCategorizer,
    CATEGORY_RULES,
    parse_categorization_reply,
)
from helpdesk.tickets.domain.policy import AccessPolicy, Operation, Scope, POLICY

__all__ = [
    # Entities
    "Ticket",
    "UserRef",
    # Categorization
    "CategorizationResult",
    "CategorizationRule",
    "CategorizationPromptBuilder",
    "KeywordCategorizer",
    "CATEGORY_RULES",
    "parse_categorization_reply",
    # Policy
    "AccessPolicy",
    "Operation",
    "Scope",
    "POLICY",
]
