"""
Auth Module
===========

Bounded Context for identity and credentials.

Responsibilities:
- Account signup with case-insensitive unique emails
- Password hashing (bcrypt) and verification
- Bearer token issuance and verification (JWT, 7-day lifetime)
- Resolving the calling principal for every protected route
"""

__version__ = "1.0.0"
