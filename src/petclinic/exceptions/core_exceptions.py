"""
Core exceptions for the petclinic package.

This module defines the exception hierarchy raised by the persistence,
validation and authorization stages, plus helpers that turn those
exceptions into log records and error payloads.
"""

import logging
import time
import traceback
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse, urlunparse


class PetClinicException(Exception):
    """
    Base exception class for all petclinic exceptions.

    Provides a consistent interface for error handling across the package.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": time.time(),
        }

    def get_debug_info(self) -> Dict[str, Any]:
        """
        Get detailed debug information for the exception.

        Returns:
            Dictionary with debug information including traceback
        """
        debug_info = self.to_dict()
        formatted = traceback.format_exc()
        debug_info.update(
            {
                "traceback": (
                    formatted if formatted.strip() != "NoneType: None" else None
                ),
                "module": self.__class__.__module__,
                "class_name": self.__class__.__name__,
            }
        )
        return debug_info

    def log_error(
        self, logger: Optional[logging.Logger] = None, level: int = logging.ERROR
    ) -> None:
        """
        Log the exception with appropriate level and context.

        Args:
            logger: Logger instance to use (creates default if None)
            level: Logging level to use
        """
        if logger is None:
            logger = logging.getLogger(__name__)

        log_data = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

        logger.log(
            level,
            f"Exception occurred: {self.message}",
            extra={"exception_data": log_data},
        )

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationException(PetClinicException):
    """
    Raised when an inbound payload violates its declared constraints.

    Carries the violation map (field path -> message) that is surfaced in the
    ``errors`` response header, and the rejected payload which is echoed back
    in the response body.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        violations: Optional[Dict[str, str]] = None,
        payload: Optional[Any] = None,
        schema_name: Optional[str] = None,
    ):
        """
        Initialize validation exception.

        Args:
            message: Error message
            violations: Mapping of field path to violation message
            payload: The payload that failed validation
            schema_name: Name of the schema the payload was checked against
        """
        self.violations = dict(violations or {})
        self.payload = payload

        details: Dict[str, Any] = {"validation_errors": self.violations}
        if schema_name:
            details["schema_name"] = schema_name

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class NotFoundException(PetClinicException):
    """Raised when an entity with the requested identity does not exist."""

    status_code = 404

    def __init__(
        self,
        resource: str,
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
    ):
        """
        Initialize not-found exception.

        Args:
            resource: Name of the missing resource type (e.g. ``PetType``)
            resource_id: Identity that was looked up, if any
            message: Optional override for the default message
        """
        self.resource = resource
        self.resource_id = resource_id

        details: Dict[str, Any] = {"resource": resource}
        if resource_id is not None:
            details["resource_id"] = resource_id
            default_message = f"{resource} with id {resource_id} not found"
        else:
            default_message = f"No {resource} found"

        super().__init__(
            message=message or default_message,
            error_code="NOT_FOUND",
            details=details,
        )


class AuthenticationException(PetClinicException):
    """Raised when the caller could not be identified."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message, error_code="AUTHENTICATION_ERROR")


class AuthorizationException(PetClinicException):
    """Raised when the caller's roles do not satisfy the route's role predicate."""

    status_code = 403

    def __init__(
        self,
        message: str = "Access denied",
        required_roles: Optional[List[str]] = None,
        caller: Optional[str] = None,
    ):
        """
        Initialize authorization exception.

        Args:
            message: Error message
            required_roles: Roles named by the failed predicate
            caller: Username of the denied caller
        """
        details: Dict[str, Any] = {}
        if required_roles:
            details["required_roles"] = list(required_roles)
        if caller:
            details["caller"] = caller

        super().__init__(
            message=message,
            error_code="AUTHORIZATION_ERROR",
            details=details,
        )


class DatabaseException(PetClinicException):
    """Base exception for database-related errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize database exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
            original_error: Original exception that caused this error
        """
        super().__init__(message, error_code, details)
        self.original_error = original_error

        if original_error and "original_error" not in self.details:
            self.details["original_error"] = str(original_error)


class ConnectionException(DatabaseException):
    """Exception raised when database connection fails."""

    def __init__(
        self,
        message: str = "Database connection failed",
        database_url: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize connection exception.

        Args:
            message: Error message
            database_url: Database URL (will be sanitized)
            original_error: Original exception
        """
        details = {}
        if database_url:
            details["database_url"] = self._sanitize_url(database_url)

        super().__init__(
            message=message,
            error_code="DATABASE_CONNECTION_ERROR",
            details=details,
            original_error=original_error,
        )

    @staticmethod
    def _sanitize_url(url: str) -> str:
        """Remove credentials from database URL for logging."""
        try:
            parsed = urlparse(url)
            if not parsed.hostname:
                return url
            sanitized = parsed._replace(netloc=f"{parsed.hostname}:{parsed.port}")
            return urlunparse(sanitized)
        except (ValueError, AttributeError) as e:
            return f"[URL_PARSE_ERROR: {e}]"


class TransactionException(DatabaseException):
    """Exception raised when database transaction fails."""

    def __init__(
        self,
        message: str = "Database transaction failed",
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize transaction exception.

        Args:
            message: Error message
            operation: Description of the failed operation
            original_error: Original exception
        """
        details = {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            error_code="DATABASE_TRANSACTION_ERROR",
            details=details,
            original_error=original_error,
        )


class ConfigurationException(PetClinicException):
    """Base exception for configuration-related errors."""

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
    ):
        """
        Initialize configuration exception.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            config_value: Configuration value (will be sanitized)
        """
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value:
            details["config_value"] = self._sanitize_config_value(
                config_key, config_value
            )

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )

    @staticmethod
    def _sanitize_config_value(key: Optional[str], value: str) -> str:
        """Sanitize configuration values to avoid exposing secrets."""
        if not key:
            return "[REDACTED]"

        sensitive_keys = ["password", "secret", "key", "token", "credential"]
        if any(sensitive in key.lower() for sensitive in sensitive_keys):
            return "[REDACTED]"

        return value


# Utility functions for exception handling and error formatting


def format_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Format Pydantic validation errors into a user-friendly structure.

    Args:
        errors: List of Pydantic validation errors

    Returns:
        Dictionary mapping field paths to lists of error messages
    """
    formatted_errors: Dict[str, List[str]] = {}

    for error in errors:
        field_path = ".".join(str(loc) for loc in error.get("loc", []))
        if not field_path:
            field_path = "root"

        message = error.get("msg", "Validation error")
        error_type = error.get("type", "unknown")

        if error_type == "value_error":
            ctx_error = error.get("ctx", {}).get("error")
            formatted_message = str(ctx_error) if ctx_error else message
        elif error_type == "missing":
            formatted_message = "must not be null"
        elif error_type == "string_too_long":
            limit = error.get("ctx", {}).get("max_length")
            formatted_message = f"size must be between 0 and {limit}"
        elif error_type.endswith("_type") or error_type.endswith("_parsing"):
            formatted_message = f"Invalid type: {message}"
        else:
            formatted_message = message

        formatted_errors.setdefault(field_path, []).append(formatted_message)

    return formatted_errors


def create_error_response(
    exception: PetClinicException,
    include_debug: bool = False,
) -> Dict[str, Any]:
    """
    Create a standardized error response from an exception.

    Args:
        exception: The exception to format
        include_debug: Whether to include debug information

    Returns:
        Standardized error response dictionary
    """
    response: Dict[str, Any] = {
        "success": False,
        "error": {
            "type": exception.__class__.__name__,
            "code": exception.error_code,
            "message": exception.message,
        },
    }

    if exception.details:
        response["error"]["details"] = exception.details

    if include_debug:
        debug_info = exception.get_debug_info()
        response["debug"] = {
            "timestamp": debug_info["timestamp"],
            "module": debug_info["module"],
            "class_name": debug_info["class_name"],
        }

    return response


def log_exception_context(
    exception: Exception,
    context: Dict[str, Any],
    logger: Optional[logging.Logger] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception with additional context information.

    Args:
        exception: The exception to log
        context: Additional context information
        logger: Logger instance to use
        level: Logging level
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if isinstance(exception, PetClinicException):
        log_data = exception.to_dict()
        log_data["context"] = context
        logger.log(
            level,
            f"Exception with context: {exception.message}",
            extra={"exception_data": log_data},
        )
    else:
        logger.log(
            level,
            f"Unhandled exception: {str(exception)}",
            extra={
                "exception_type": exception.__class__.__name__,
                "exception_message": str(exception),
                "context": context,
            },
        )
