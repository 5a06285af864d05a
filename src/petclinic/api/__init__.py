"""
REST API for the petclinic service.
"""

from .app import create_app

__all__ = ["create_app"]
