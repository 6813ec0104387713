from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Type, TypeVar

from scopewire.domain.enums import Scope
from scopewire.domain.models import BuilderEntry, ConstructorSignature, InstanceEntry, TypeKey

T = TypeVar("T")


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def provide(
        self,
        dependency_type: Type[T],
        builder: Optional[Callable[["IContainer"], T]] = None,
        scope: Scope = Scope.LOCAL,
    ) -> None:
        """Register a type and eagerly build one instance of it in this container.

        Args:
            dependency_type: The type to register.
            builder: Optional factory receiving the container. When omitted the type
                is auto-wired from its constructor signature.
            scope: How the binding is shared with child scopes.
        """

    @abstractmethod
    def require(self, dependency_type: Type[T]) -> T:
        """Resolve an instance of the requested type or raise.

        Args:
            dependency_type: The type to resolve.
        """

    @abstractmethod
    def require_optional(self, dependency_type: Type[T]) -> Optional[T]:
        """Resolve an instance of the requested type, or None when it cannot be resolved.

        Args:
            dependency_type: The type to resolve.
        """

    @abstractmethod
    def create_scope(self) -> "IContainer":
        """Create and return a child container."""

    @abstractmethod
    def dispose(self) -> None:
        """Release owned instances and drop all entries."""


class IRegistry(ABC):
    """Abstract interface for the type-indexed builder and instance store."""

    @abstractmethod
    def get_builder(self, key: TypeKey) -> Optional[BuilderEntry]:
        """Return the builder stored under a key, if any."""

    @abstractmethod
    def set_builder(self, key: TypeKey, entry: BuilderEntry) -> None:
        """Store a builder, replacing any previous one for the key."""

    @abstractmethod
    def get_instance(self, key: TypeKey) -> Optional[InstanceEntry]:
        """Return the cached instance stored under a key, if any."""

    @abstractmethod
    def set_instance(self, key: TypeKey, entry: InstanceEntry) -> None:
        """Store a cached instance, replacing any previous one for the key."""

    @abstractmethod
    def clone_for_child(self) -> "IRegistry":
        """Return the registry a child scope starts from."""

    @abstractmethod
    def dispose(self) -> None:
        """Release owned instances and clear both maps."""


class ISignatureDeducer(ABC):
    """Abstract interface for constructor signature deduction."""

    @abstractmethod
    def deduce(self, dependency_type: Any) -> Optional[ConstructorSignature]:
        """Return the parameter list of the shortest unambiguous constructor, if any.

        Args:
            dependency_type: The class to inspect.
        """

    @abstractmethod
    def is_default_constructible(self, dependency_type: Any) -> bool:
        """Whether some constructor of the class accepts no arguments."""


class IResolver(ABC):
    """Abstract interface for auto-wiring builders."""

    @abstractmethod
    def is_constructible(self, dependency_type: Any) -> bool:
        """Whether the type can be built without an explicit builder."""

    @abstractmethod
    def create_builder(self, dependency_type: Type[T]) -> Callable[[IContainer], T]:
        """Synthesize a builder that resolves constructor parameters from a container.

        Args:
            dependency_type: The type to build.

        Raises:
            ConstructibilityError: If the type is not constructible.
        """
