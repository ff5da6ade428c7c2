"""
Core Exceptions
================

Application error taxonomy.

Every exception carries the HTTP status it maps to, so the API boundary can
render it into the response envelope without knowing each subclass.
"""

from typing import Optional, List


class ApplicationException(Exception):
    """Base exception for all application errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ValidationException(ApplicationException):
    """Exception for validation errors; carries every failure, not just the first."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation errors",
        errors: Optional[List[dict]] = None,
        details: Optional[dict] = None
    ):
        self.errors = errors or []
        super().__init__(message, details)


class InvalidIdException(ValidationException):
    """Exception when an identifier is malformed."""

    def __init__(self, resource_type: str = "Ticket", resource_id: Optional[str] = None):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"Invalid {resource_type.lower()} ID")


class InvalidReferenceException(ValidationException):
    """Exception when a referenced record does not exist or has the wrong kind."""


class AuthenticationException(ApplicationException):
    """Missing credentials or wrong email/password."""

    status_code = 401


class InvalidTokenException(ApplicationException):
    """Bearer token failed signature, expiry or claim checks."""

    status_code = 403

    def __init__(self, message: str = "Invalid or expired token", details: Optional[dict] = None):
        super().__init__(message, details)


class AccessDeniedException(DomainException):
    """Role or ownership violation."""

    status_code = 403


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} not found", details)


class ConflictException(ApplicationException):
    """Duplicate value for a unique field."""

    status_code = 409


class NoAgentsAvailableException(DomainException):
    """Ticket creation found no agent to auto-assign."""

    status_code = 503

    def __init__(self, message: str = "No agents available for assignment"):
        super().__init__(message)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class ExternalServiceException(ApplicationException):
    """Base exception for external service failures."""

    status_code = 502

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"{service_name}: {message}", details)


class LLMException(ExternalServiceException):
    """Exception for LLM API failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("LLM Service", message, details)
