"""
Shared Kernel Module
====================

Shared infrastructure used across all bounded contexts (Auth and Tickets).

Architecture Pattern: Modular Monolith
- Each module (auth, tickets) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add business logic from Auth or Tickets to shared kernel.
"""

__version__ = "1.0.0"
