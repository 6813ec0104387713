"""
Domain layer - Core business logic and models.

This layer contains the fundamental business rules and models for dependency injection.
It has no dependencies on other layers.
"""

from .enums import Scope
from .exceptions import (
    CircularDependencyError,
    ConstructibilityError,
    DIException,
    ScopeError,
    UnresolvableError,
)
from .interfaces import IContainer, IRegistry, IResolver, ISignatureDeducer
from .models import (
    BuilderEntry,
    ConstructorParameter,
    ConstructorSignature,
    ContainerSettings,
    InstanceEntry,
    ResolutionContext,
    TypeKey,
)

# Rebuild Pydantic models to resolve forward references
BuilderEntry.model_rebuild()

__all__ = [
    # Enums
    "Scope",
    # Exceptions
    "DIException",
    "CircularDependencyError",
    "ConstructibilityError",
    "UnresolvableError",
    "ScopeError",
    # Interfaces
    "IContainer",
    "IRegistry",
    "IResolver",
    "ISignatureDeducer",
    # Models
    "TypeKey",
    "BuilderEntry",
    "InstanceEntry",
    "ConstructorParameter",
    "ConstructorSignature",
    "ContainerSettings",
    "ResolutionContext",
]
