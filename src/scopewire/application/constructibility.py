"""Application layer - Constructibility check."""

import inspect
import logging
from typing import Any

from scopewire.domain import ISignatureDeducer

logger = logging.getLogger(__name__)


def is_abstract(dependency_type: Any) -> bool:
    """Whether a class cannot be instantiated directly (ABC with abstract methods, or a Protocol)."""
    return inspect.isabstract(dependency_type) or bool(getattr(dependency_type, "_is_protocol", False))


def is_constructible(dependency_type: Any, deducer: ISignatureDeducer) -> bool:
    """Decide whether a type can be auto-wired without an explicit builder.

    A type is constructible when it is a concrete class and either accepts no
    constructor arguments or has a deducible constructor signature.

    Args:
        dependency_type: The type to check.
        deducer: Signature deducer used to inspect the constructor.

    Returns:
        True if ``provide(dependency_type)`` may synthesize a builder.
    """
    if not inspect.isclass(dependency_type) or is_abstract(dependency_type):
        return False

    constructible = deducer.is_default_constructible(dependency_type) or deducer.deduce(dependency_type) is not None
    if not constructible:
        logger.debug("%s is not auto-constructible", dependency_type.__name__)
    return constructible
