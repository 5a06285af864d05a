"""
Petclinic

A veterinary clinic REST service exposing CRUD endpoints for pet types,
specialties, vets, owners, pets and visits.

It includes:

- SQLAlchemy models for the clinic entities and API users
- Pydantic schemas validating inbound payloads and shaping responses
- Repositories wrapping find/list/save/delete for each entity
- Role-based authorization guards evaluated before every endpoint
- A FastAPI application with request-scoped database sessions

Quick Start:
    >>> from petclinic import create_app
    >>> from petclinic.utils import AppSettings

    >>> app = create_app(AppSettings(database_url="sqlite+aiosqlite:///./clinic.db"))

    Or from the command line:

    $ python -m petclinic --port 9966

Requirements:
    - Python 3.11+
    - SQLAlchemy 2.0+
    - Pydantic 2.5+
    - FastAPI
"""

__version__ = "0.1.0"
__license__ = "MIT"

from . import database
from . import exceptions
from . import models
from . import repositories
from . import schemas
from . import security
from . import utils

# Convenience imports for common usage patterns
from .api import create_app
from .exceptions import NotFoundException, PetClinicException, ValidationException

__all__ = [
    # Version and metadata
    "__version__",
    "__license__",
    # Core modules
    "database",
    "exceptions",
    "models",
    "repositories",
    "schemas",
    "security",
    "utils",
    # Convenience imports
    "create_app",
    "PetClinicException",
    "ValidationException",
    "NotFoundException",
]
