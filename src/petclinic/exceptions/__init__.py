"""
Custom exceptions for the petclinic package.

This module defines the exception hierarchy and custom exceptions
used throughout the clinic API.
"""

from .core_exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConfigurationException,
    ConnectionException,
    DatabaseException,
    NotFoundException,
    PetClinicException,
    TransactionException,
    ValidationException,
    create_error_response,
    format_validation_errors,
    log_exception_context,
)

__all__ = [
    # Exception classes
    "PetClinicException",
    "ValidationException",
    "NotFoundException",
    "AuthenticationException",
    "AuthorizationException",
    "DatabaseException",
    "ConnectionException",
    "TransactionException",
    "ConfigurationException",
    # Utility functions
    "format_validation_errors",
    "create_error_response",
    "log_exception_context",
]
