"""
Configuration management utilities.

This module provides environment variable handling with type conversion,
database URL validation, logging configuration utilities, and the
application settings object assembled from the environment.
"""

import logging
import logging.config
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import parse_qs, urlparse


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class LogLevel(Enum):
    """Enumeration for log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentConfig:
    """Utility class for handling environment variables with type conversion."""

    @staticmethod
    def get_str(
        key: str, default: Optional[str] = None, required: bool = False
    ) -> Optional[str]:
        """
        Get a string environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            String value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key, default)

        if required and value is None:
            raise ConfigError(f"Required environment variable '{key}' is not set")

        return value

    @staticmethod
    def get_int(
        key: str, default: Optional[int] = None, required: bool = False
    ) -> Optional[int]:
        """
        Get an integer environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            Integer value or default

        Raises:
            ConfigError: If required variable is missing or invalid
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        try:
            return int(value)
        except ValueError:
            raise ConfigError(
                f"Environment variable '{key}' must be an integer, got: {value}"
            )

    @staticmethod
    def get_bool(
        key: str, default: Optional[bool] = None, required: bool = False
    ) -> Optional[bool]:
        """
        Get a boolean environment variable.

        Args:
            key: Environment variable key
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            Boolean value or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        return value.lower() in ("true", "1", "yes", "on", "enabled")

    @staticmethod
    def get_list(
        key: str,
        separator: str = ",",
        default: Optional[List[str]] = None,
        required: bool = False,
    ) -> Optional[List[str]]:
        """
        Get a list environment variable.

        Args:
            key: Environment variable key
            separator: Separator character for list items
            default: Default value if not found
            required: Whether the variable is required

        Returns:
            List of strings or default

        Raises:
            ConfigError: If required variable is missing
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default or []

        return [item.strip() for item in value.split(separator) if item.strip()]


class DatabaseURLValidator:
    """Utility class for validating database URLs."""

    SUPPORTED_DRIVERS = {
        "postgresql": ["postgresql", "postgresql+asyncpg"],
        "sqlite": ["sqlite", "sqlite+aiosqlite"],
    }

    @classmethod
    def validate_url(cls, url: str) -> Dict[str, Any]:
        """
        Validate a database URL and return parsed components.

        Args:
            url: Database URL to validate

        Returns:
            Dictionary with validation results and parsed components

        Raises:
            ConfigError: If URL is invalid
        """
        if not url:
            raise ConfigError("Database URL cannot be empty")

        try:
            parsed = urlparse(url)
        except Exception as e:
            raise ConfigError(f"Invalid URL format: {e}")

        if not parsed.scheme:
            raise ConfigError(
                "Database URL must include a scheme (e.g., postgresql://)"
            )

        backend = cls.get_backend(parsed.scheme)
        if backend is None:
            supported_list = []
            for drivers in cls.SUPPORTED_DRIVERS.values():
                supported_list.extend(drivers)
            raise ConfigError(
                f"Unsupported database driver '{parsed.scheme}'. Supported: {', '.join(supported_list)}"
            )

        if backend != "sqlite":
            if not parsed.hostname:
                raise ConfigError("Database URL must include a hostname")
            if not parsed.path.lstrip("/"):
                raise ConfigError("Database URL must include a database name")

        return {
            "valid": True,
            "backend": backend,
            "scheme": parsed.scheme,
            "hostname": parsed.hostname,
            "port": parsed.port,
            "database": parsed.path.lstrip("/") if parsed.path else "",
            "username": parsed.username,
            "password": parsed.password,
            "query": dict(parse_qs(parsed.query)),
        }

    @classmethod
    def get_backend(cls, scheme: str) -> Optional[str]:
        """Return the backend name ('postgresql', 'sqlite') for a URL scheme."""
        for backend, drivers in cls.SUPPORTED_DRIVERS.items():
            if scheme in drivers:
                return backend
        return None


class LoggingConfigurator:
    """Utility class for configuring logging."""

    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def configure_basic_logging(
        level: Union[str, LogLevel] = LogLevel.INFO,
        format_string: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> None:
        """
        Configure basic logging for the application.

        Args:
            level: Logging level
            format_string: Custom format string
            log_file: Optional log file path
        """
        if isinstance(level, LogLevel):
            level = level.value

        basic_config_args: Dict[str, Any] = {
            "level": level,
            "format": format_string or LoggingConfigurator.DEFAULT_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }

        if log_file:
            basic_config_args["filename"] = log_file
            basic_config_args["filemode"] = "a"

        logging.basicConfig(**basic_config_args)

    @staticmethod
    def configure_structured_logging(
        level: Union[str, LogLevel] = LogLevel.INFO,
        config_dict: Optional[Dict[str, Any]] = None,
        config_file: Optional[str] = None,
    ) -> None:
        """
        Configure structured logging using a dictionary or file.

        Args:
            level: Level applied to the ``petclinic`` logger tree
            config_dict: Logging configuration dictionary
            config_file: Path to logging configuration file
        """
        if isinstance(level, LogLevel):
            level = level.value

        if config_file and Path(config_file).exists():
            logging.config.fileConfig(config_file)
        elif config_dict:
            logging.config.dictConfig(config_dict)
        else:
            default_config = {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "standard": {"format": LoggingConfigurator.DEFAULT_FORMAT},
                    "detailed": {
                        "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(message)s"
                    },
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level,
                        "formatter": "standard",
                        "stream": "ext://sys.stdout",
                    }
                },
                "loggers": {
                    "petclinic": {
                        "level": level,
                        "handlers": ["console"],
                        "propagate": False,
                    }
                },
                "root": {"level": "WARNING", "handlers": ["console"]},
            }
            logging.config.dictConfig(default_config)


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./petclinic.db"


@dataclass
class AppSettings:
    """Runtime settings for the clinic API."""

    database_url: str = DEFAULT_DATABASE_URL
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_echo: bool = False
    security_enabled: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = LogLevel.INFO.value
    docs_url: str = "/docs"
    create_schema: bool = True
    seed_data: bool = False
    app_name: str = "petclinic"

    def __post_init__(self) -> None:
        DatabaseURLValidator.validate_url(self.database_url)
        if self.log_level.upper() not in LogLevel.__members__:
            raise ConfigError(f"Unknown log level '{self.log_level}'")
        self.log_level = self.log_level.upper()

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured store is SQLite."""
        return urlparse(self.database_url).scheme.startswith("sqlite")

    @classmethod
    def from_environment(cls) -> "AppSettings":
        """
        Build settings from ``PETCLINIC_*`` environment variables.

        Returns:
            Populated settings object

        Raises:
            ConfigError: If any variable is malformed
        """
        defaults = cls.__dataclass_fields__
        return cls(
            database_url=EnvironmentConfig.get_str(
                "PETCLINIC_DATABASE_URL", DEFAULT_DATABASE_URL
            ),
            db_pool_size=EnvironmentConfig.get_int(
                "PETCLINIC_DB_POOL_SIZE", defaults["db_pool_size"].default
            ),
            db_max_overflow=EnvironmentConfig.get_int(
                "PETCLINIC_DB_MAX_OVERFLOW", defaults["db_max_overflow"].default
            ),
            db_echo=EnvironmentConfig.get_bool("PETCLINIC_DB_ECHO", False),
            security_enabled=EnvironmentConfig.get_bool(
                "PETCLINIC_SECURITY_ENABLED", False
            ),
            cors_origins=EnvironmentConfig.get_list(
                "PETCLINIC_CORS_ORIGINS", default=["*"]
            ),
            log_level=EnvironmentConfig.get_str(
                "PETCLINIC_LOG_LEVEL", LogLevel.INFO.value
            ),
            docs_url=EnvironmentConfig.get_str("PETCLINIC_DOCS_URL", "/docs"),
            create_schema=EnvironmentConfig.get_bool("PETCLINIC_CREATE_SCHEMA", True),
            seed_data=EnvironmentConfig.get_bool("PETCLINIC_SEED_DATA", False),
        )
