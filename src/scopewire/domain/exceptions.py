from typing import Any, List, Optional


def type_name(dependency_type: Any) -> str:
    """Readable name for a type or typing construct used in error messages."""
    name = getattr(dependency_type, "__name__", None)
    return name or repr(dependency_type)


class DIException(Exception):
    """Base exception for DI-related errors."""


class UnresolvableError(DIException):
    """Raised when a dependency cannot be resolved.

    This occurs when:
    - No cached instance or builder exists and the type cannot be auto-wired.
    - A constructor parameter cannot be resolved.
    - A builder fails while creating the instance.

    Attributes:
        cls: The type that could not be resolved.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Any, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Cannot resolve dependency for type: {type_name(cls)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class ConstructibilityError(DIException, TypeError):
    """Raised when ``provide(T)`` is called without a builder for a type that cannot be auto-wired.

    Abstract classes, protocols, builtins and classes whose constructor signature
    cannot be deduced all need an explicit builder.

    Attributes:
        cls: The rejected type.
    """

    def __init__(self, cls: Any) -> None:
        self.cls = cls
        super().__init__(
            f"{type_name(cls)} is not auto-constructible. "
            "Use provide(T, builder, scope) instead for interface or complex constructible types."
        )


class CircularDependencyError(DIException):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: List of types involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[Any]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join([type_name(cls) for cls in dependency_chain])}"
        super().__init__(message)


class ScopeError(DIException):
    """Raised for invalid scope operations.

    This occurs when:
    - Providing, requiring or creating a child scope on a disposed container.
    """
