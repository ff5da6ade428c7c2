"""
Shared API
==========

Middleware, exception handlers and the response envelope.
"""

from helpdesk.shared.api.responses import ApiResponse, CamelModel, envelope, error_response

__all__ = ["ApiResponse", "CamelModel", "envelope", "error_response"]
