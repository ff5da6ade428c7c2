"""
Auth Interfaces Layer
=====================

FastAPI route handlers and request dependencies for authentication.
"""

from helpdesk.auth.interfaces.controllers import router as auth_router
from helpdesk.auth.interfaces.dependencies import (
    get_current_principal,
    require_admin,
)

__all__ = ["auth_router", "get_current_principal", "require_admin"]
