"""
Core module initialization.
Exports configuration and the domain error taxonomy.
"""

from foodcourt.core.config import get_settings, Settings, EnvironmentMode
from foodcourt.core.errors import (
    DomainError,
    ValidationError,
    NotFoundError,
    AuthorizationError,
    ConflictError,
    PreconditionError,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "AuthorizationError",
    "ConflictError",
    "PreconditionError",
]
