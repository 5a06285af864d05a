"""
Database connection and session management utilities.

This module provides async SQLAlchemy engine configuration, request-scoped
session management and demo data seeding for the petclinic service.
"""

from .connection import (
    DatabaseConfig,
    check_connection,
    close_engine,
    create_engine,
)
from .seed import seed_demo_data
from .session import SessionManager, atomic

__all__ = [
    # Connection utilities
    "DatabaseConfig",
    "create_engine",
    "check_connection",
    "close_engine",
    # Session management
    "SessionManager",
    "atomic",
    # Demo data
    "seed_demo_data",
]
