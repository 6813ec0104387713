import logging
from typing import Any, Callable, Optional, Type, TypeVar, cast

from scopewire.application.registry import Registry
from scopewire.application.resolver import DependencyResolver
from scopewire.application.signature_deducer import SignatureDeducer
from scopewire.domain import (
    BuilderEntry,
    ContainerSettings,
    DIException,
    IContainer,
    InstanceEntry,
    IRegistry,
    IResolver,
    ResolutionContext,
    Scope,
    ScopeError,
    TypeKey,
    UnresolvableError,
)
from scopewire.domain.exceptions import type_name

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Container(IContainer):
    """Main dependency injection container.

    Registers builders, resolves instances (auto-wiring constructors when no
    builder is registered) and creates child scopes. Not thread-safe: concurrent
    use of one container needs external locking.

    Attributes:
        _settings: Configuration shared with child scopes.
        _resolver: Component synthesizing auto-wiring builders.
        _registry: Builders and cached instances of this container.
        _resolution_context: Types currently being built, for cycle detection.
        _disposed: Whether ``dispose`` has been called.
    """

    def __init__(
        self,
        settings: Optional[ContainerSettings] = None,
        resolver: Optional[IResolver] = None,
        registry: Optional[IRegistry] = None,
    ) -> None:
        """Initialize the container.

        Args:
            settings: Configuration; defaults to ``ContainerSettings()``.
            resolver: Auto-wiring component; defaults to one honoring ``settings``.
            registry: Initial registry; defaults to an empty one.
        """
        self._settings = settings or ContainerSettings()
        self._resolver: IResolver = resolver or DependencyResolver(
            SignatureDeducer(self._settings.max_parameter_count)
        )
        self._registry: IRegistry = registry or Registry()
        self._resolution_context = ResolutionContext()
        self._disposed = False

    @property
    def settings(self) -> ContainerSettings:
        return self._settings

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _ensure_active(self) -> None:
        if self._disposed:
            raise ScopeError("Container has been disposed")

    def _build(self, entry: BuilderEntry) -> Any:
        """Invoke a builder with this container, guarding against cycles.

        Raises:
            CircularDependencyError: If the type is already being built.
            UnresolvableError: If the builder fails.
        """
        dependency_type = entry.dependency_type
        self._resolution_context.push(dependency_type)
        try:
            instance = entry.builder(self)
        except DIException:
            raise
        except Exception as e:
            raise UnresolvableError(dependency_type, f"Failed to create instance: {e}") from e
        finally:
            self._resolution_context.pop()

        logger.debug("Built %s (%s)", type_name(dependency_type), entry.scope)
        return instance

    def provide(
        self,
        dependency_type: Type[T],
        builder: Optional[Callable[[IContainer], T]] = None,
        scope: Scope = Scope.LOCAL,
    ) -> None:
        """Register a type and eagerly build one instance of it in this container.

        Without a builder the type is auto-wired: each parameter of its deduced
        constructor signature is resolved through the container that runs the
        builder. Registering a type again replaces the previous builder and instance.

        Args:
            dependency_type: The type to register.
            builder: Factory receiving the container and returning a new instance.
                Required for abstract classes, protocols, and types whose
                constructor cannot be deduced.
            scope: ``Scope.LOCAL`` to rebuild per scope, ``Scope.SINGLETON`` to share
                the instance with all descendant scopes.

        Raises:
            ConstructibilityError: If no builder is given and the type is not constructible.
            UnresolvableError: If building the instance fails.
            CircularDependencyError: If the type depends on itself.
            ScopeError: If the container has been disposed.

        Example:
            >>> container.provide(DatabaseConfig, scope=Scope.SINGLETON)
            >>> container.provide(Repository, lambda c: SqlRepository(c.require(DatabaseConfig)), Scope.LOCAL)
        """
        self._ensure_active()
        if builder is None:
            builder = self._resolver.create_builder(dependency_type)
        elif not callable(builder):
            raise TypeError(f"Builder for {type_name(dependency_type)} must be callable, got {builder!r}")

        key = TypeKey.of(dependency_type)
        entry = BuilderEntry(dependency_type=dependency_type, builder=builder, scope=Scope(scope))
        instance = self._build(entry)

        self._registry.set_instance(
            key, InstanceEntry(dependency_type=dependency_type, instance=instance, scope=entry.scope)
        )
        self._registry.set_builder(key, entry)
        logger.debug("Provided %s as %s", key, entry.scope)

    def require_optional(self, dependency_type: Type[T]) -> Optional[T]:
        """Resolve an instance, or return None when the type cannot be resolved.

        Lookup order: cached instance, registered builder (the result is cached),
        then auto-registration of constructible types. Instances built here from a
        registered builder are cached as Local unless ``share_lazy_singletons`` is set.
        Only a registry given to the constructor can hold a Singleton builder without
        its instance; builders registered through ``provide`` are built eagerly.

        Args:
            dependency_type: The type to resolve.

        Returns:
            The instance, or None.

        Raises:
            UnresolvableError: If a builder or one of its dependencies fails.
            CircularDependencyError: If a circular dependency is detected.
            ScopeError: If the container has been disposed.
        """
        self._ensure_active()
        key = TypeKey.of(dependency_type)

        cached = self._registry.get_instance(key)
        if cached is not None:
            return cast(T, cached.instance)

        builder = self._registry.get_builder(key)
        if builder is not None:
            instance = self._build(builder)
            scope = builder.scope if self._settings.share_lazy_singletons else Scope.LOCAL
            self._registry.set_instance(
                key, InstanceEntry(dependency_type=dependency_type, instance=instance, scope=scope)
            )
            return cast(T, instance)

        if self._resolver.is_constructible(dependency_type):
            logger.debug("Auto-providing %s", key)
            self.provide(dependency_type)
            cached = self._registry.get_instance(key)
            return cast(T, cached.instance) if cached is not None else None

        logger.debug("%s cannot be resolved in this container", key)
        return None

    def require(self, dependency_type: Type[T]) -> T:
        """Resolve an instance of the requested type.

        Args:
            dependency_type: The type to resolve.

        Returns:
            The instance; its lifetime is bound to the container that owns it.

        Raises:
            UnresolvableError: If the type is not provided and not constructible.
            CircularDependencyError: If a circular dependency is detected.
            ScopeError: If the container has been disposed.

        Example:
            >>> user_service = container.require(UserService)
        """
        instance = self.require_optional(dependency_type)
        if instance is None:
            raise UnresolvableError(
                dependency_type,
                "not constructible and not provided within the current container",
            )
        return instance

    def is_provided(self, dependency_type: Any) -> bool:
        """Whether a builder or a cached instance exists for the type in this container."""
        return self._registry.has(TypeKey.of(dependency_type))

    def create_scope(self) -> "Container":
        """Create a child container.

        The child gets copies of Local builders, no Local instances, no Singleton
        builders, and non-owning aliases of Singleton instances. The parent is not
        referenced afterwards, but it must outlive the child while the child uses
        aliased Singletons.

        Returns:
            New child container sharing this container's settings.

        Example:
            >>> with container.create_scope() as scoped:
            ...     handler = scoped.require(RequestHandler)
        """
        self._ensure_active()
        logger.debug("Creating child scope")
        return Container(
            settings=self._settings,
            resolver=self._resolver,
            registry=self._registry.clone_for_child(),
        )

    def dispose(self) -> None:
        """Release owned instances and drop all entries.

        Owned instances defining ``close()`` are closed in reverse creation order.
        Singleton aliases inherited from an ancestor are left to their owner.
        Disposing twice is a no-op.
        """
        if self._disposed:
            return
        self._disposed = True
        self._resolution_context.clear()
        self._registry.dispose()
        logger.debug("Container disposed")

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.dispose()
        return False
