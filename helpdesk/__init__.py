"""
Helpdesk Ticketing
==================

Support tickets with categorization, automatic assignment and
role-scoped access.
"""

__version__ = "1.0.0"
