"""
Utility functions and helper modules.

This module provides payload validation and configuration management
helpers shared by the rest of the package.
"""

from .config import (
    AppSettings,
    ConfigError,
    DatabaseURLValidator,
    EnvironmentConfig,
    LoggingConfigurator,
    LogLevel,
)
from .validation import (
    BLANK_MESSAGE,
    ConstraintViolation,
    ValidationResult,
    require_not_blank,
    validate_payload,
    validate_telephone,
)

__all__ = [
    # Validation helpers
    "BLANK_MESSAGE",
    "ConstraintViolation",
    "ValidationResult",
    "require_not_blank",
    "validate_payload",
    "validate_telephone",
    # Configuration utilities
    "AppSettings",
    "ConfigError",
    "LogLevel",
    "EnvironmentConfig",
    "DatabaseURLValidator",
    "LoggingConfigurator",
]
