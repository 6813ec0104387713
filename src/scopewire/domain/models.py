from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from scopewire.domain.enums import Scope
from scopewire.domain.exceptions import CircularDependencyError, type_name

if TYPE_CHECKING:
    from scopewire.domain.interfaces import IContainer


class TypeKey(BaseModel):
    """Registry key identifying a dependency type.

    Two keys are equal exactly when they wrap the same type object, so every
    registration and lookup must derive its key through ``TypeKey.of``.

    Attributes:
        dependency_type: The type this key stands for.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dependency_type: Any = Field(..., description="The type identified by this key.")

    @classmethod
    def of(cls, dependency_type: Any) -> "TypeKey":
        """Build the key for a type."""
        return cls(dependency_type=dependency_type)

    def __str__(self) -> str:
        return type_name(self.dependency_type)


class ContainerSettings(BaseModel):
    """Configuration shared by a container and every scope created from it.

    Attributes:
        max_parameter_count: Upper bound (exclusive) on the constructor arity probed
            during signature deduction.
        share_lazy_singletons: When False, instances built lazily by ``require`` are
            cached as Local even if their builder is Singleton. When True they keep
            the builder's scope, so later child scopes alias them. ``provide`` always
            builds eagerly and child scopes never copy Singleton builders, so this only
            applies to a registry holding a Singleton builder without an instance,
            such as one passed to ``Container(registry=...)``.
    """

    model_config = ConfigDict(frozen=True)

    max_parameter_count: int = Field(default=100, ge=1, description="Largest arity probed, exclusive.")
    share_lazy_singletons: bool = Field(
        default=False,
        description="Cache lazily built instances with their builder's scope instead of Local.",
    )


class ConstructorParameter(BaseModel):
    """One deduced constructor parameter.

    Attributes:
        name: Parameter name in the constructor.
        annotation: The dependency type to resolve, with any ``Optional`` unwrapped.
        optional: Whether the annotation was ``Optional[...]``; such parameters are
            resolved with the nullable form and receive ``None`` when absent.
        keyword_only: Whether the parameter must be passed by keyword.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    annotation: Any
    optional: bool = False
    keyword_only: bool = False


class ConstructorSignature(BaseModel):
    """Ordered parameter list of the constructor chosen for a type.

    Attributes:
        dependency_type: The type whose constructor was deduced.
        parameters: Parameters in declaration order.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dependency_type: Any
    parameters: Tuple[ConstructorParameter, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.parameters)

    @property
    def parameter_types(self) -> Tuple[Any, ...]:
        return tuple(parameter.annotation for parameter in self.parameters)


class BuilderEntry(BaseModel):
    """Recipe for manufacturing one instance of a type.

    Attributes:
        dependency_type: The type being built.
        builder: Factory that receives the requesting container and returns a new instance.
        scope: How the binding is inherited by child scopes.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dependency_type: Any = Field(..., description="The dependency type this builder produces.")
    builder: Callable[["IContainer"], Any] = Field(..., description="Factory invoked with the requesting container.")
    scope: Scope = Field(default=Scope.LOCAL, description="Scope of the binding.")

    def clone_for_child(self) -> Optional["BuilderEntry"]:
        """Copy handed to a child scope, or None when the binding must not be rebuilt there.

        Local builders are duplicated so the child can rebuild independently.
        Singleton builders stay with the container that registered them.
        """
        if self.scope == Scope.SINGLETON:
            return None
        return self.model_copy()


class InstanceEntry(BaseModel):
    """Cached, already-built instance.

    Attributes:
        dependency_type: The type of the cached value.
        instance: The built value.
        scope: Scope the value was cached with.
        owned: False for aliases of a Singleton owned by an ancestor container.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dependency_type: Any = Field(..., description="The dependency type of the cached value.")
    instance: Any = Field(..., description="The cached value.")
    scope: Scope = Field(default=Scope.LOCAL, description="Scope the value was cached with.")
    owned: bool = Field(default=True, description="Whether this container is responsible for releasing the value.")

    def clone_for_child(self) -> Optional["InstanceEntry"]:
        """Alias handed to a child scope, or None when the child must rebuild.

        Local values are never shared. Singleton values are shared as non-owning
        aliases; release stays with the original owner.
        """
        if self.scope == Scope.LOCAL:
            return None
        return self.model_copy(update={"owned": False})


class ResolutionContext(BaseModel):
    """Tracks the types currently being built by a container.

    Used for circular dependency detection.

    Attributes:
        stack: List of dependency types currently being built.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stack: List[Any] = Field(
        default_factory=list,
        description="Stack of dependency types currently being built.",
    )

    def push(self, dependency_type: Any) -> None:
        """Add a dependency to the resolution stack.

        Args:
            dependency_type: The type being built.

        Raises:
            CircularDependencyError: If the type is already in the stack.
        """
        if dependency_type in self.stack:
            cycle = self.stack[self.stack.index(dependency_type) :] + [dependency_type]
            raise CircularDependencyError(cycle)
        self.stack.append(dependency_type)

    def pop(self) -> None:
        """Remove the last (most recent) dependency from the stack."""
        if self.stack:
            self.stack.pop()

    def clear(self) -> None:
        """Clear the entire resolution stack."""
        self.stack.clear()
