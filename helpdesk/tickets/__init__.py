"""
Tickets Module
==============

Bounded Context for the ticket lifecycle.

Responsibilities:
- Keyword categorization with optional language-model delegation
- Automatic assignment to a random agent
- Role and ownership access policy
- Listing with filters, sorting and pagination
- Status, priority and assignee updates
- Per-scope statistics
"""

__version__ = "1.0.0"
