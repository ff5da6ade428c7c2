"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from helpdesk.core.exceptions import (
    ApplicationException,
    DomainException,
    RepositoryException,
    ValidationException,
    InvalidIdException,
    InvalidReferenceException,
    AuthenticationException,
    InvalidTokenException,
    AccessDeniedException,
    ResourceNotFoundException,
    ConflictException,
    NoAgentsAvailableException,
    ConfigurationException,
    ExternalServiceException,
    LLMException,
)

__all__ = [
    "ApplicationException",
    "DomainException",
    "RepositoryException",
    "ValidationException",
    "InvalidIdException",
    "InvalidReferenceException",
    "AuthenticationException",
    "InvalidTokenException",
    "AccessDeniedException",
    "ResourceNotFoundException",
    "ConflictException",
    "NoAgentsAvailableException",
    "ConfigurationException",
    "ExternalServiceException",
    "LLMException",
]
