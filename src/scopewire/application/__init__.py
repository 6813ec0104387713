"""
Application layer - Use cases and orchestration.

This layer contains the use cases that orchestrate domain objects.
It depends only on the Domain layer.
"""

from .constructibility import is_abstract, is_constructible
from .container import Container
from .registry import Registry
from .resolver import DependencyResolver
from .signature_deducer import ConstructorCandidate, SignatureDeducer

__all__ = [
    "Container",
    "DependencyResolver",
    "Registry",
    "SignatureDeducer",
    "ConstructorCandidate",
    "is_abstract",
    "is_constructible",
]
