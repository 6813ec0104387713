"""
scopewire: Scoped dependency injection container with constructor auto-wiring.

Public API exports for the scopewire package.
"""

# Application exports
from scopewire.application.container import Container

# Domain exports
from scopewire.domain.enums import Scope
from scopewire.domain.exceptions import (
    CircularDependencyError,
    ConstructibilityError,
    DIException,
    ScopeError,
    UnresolvableError,
)
from scopewire.domain.models import ContainerSettings, TypeKey

__version__ = "0.1.0"

__all__ = [
    # Container
    "Container",
    "ContainerSettings",
    # Enums
    "Scope",
    "TypeKey",
    # Exceptions
    "DIException",
    "CircularDependencyError",
    "ConstructibilityError",
    "UnresolvableError",
    "ScopeError",
]
