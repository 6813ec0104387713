from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from scopewire.application.constructibility import is_constructible
from scopewire.application.signature_deducer import SignatureDeducer
from scopewire.domain import (
    CircularDependencyError,
    ConstructibilityError,
    ConstructorSignature,
    IContainer,
    IResolver,
    ISignatureDeducer,
    UnresolvableError,
)

T = TypeVar("T")


class DependencyResolver(IResolver):
    """Synthesizes auto-wiring builders from deduced constructor signatures.

    Attributes:
        _deducer: Component deducing constructor parameter lists.
    """

    def __init__(self, deducer: Optional[ISignatureDeducer] = None) -> None:
        self._deducer = deducer or SignatureDeducer()

    @property
    def deducer(self) -> ISignatureDeducer:
        return self._deducer

    def is_constructible(self, dependency_type: Any) -> bool:
        return is_constructible(dependency_type, self._deducer)

    def create_builder(self, dependency_type: Type[T]) -> Callable[[IContainer], T]:
        """Synthesize a builder for a constructible type.

        Args:
            dependency_type: The type to build.

        Returns:
            Builder resolving the constructor parameters from the container it is given.

        Raises:
            ConstructibilityError: If the type is abstract or has no usable constructor.

        Example:
            >>> class UserService:
            ...     def __init__(self, db: DatabaseConnection, logger: Logger):
            ...         self.db = db
            ...         self.logger = logger
            >>>
            >>> build = DependencyResolver().create_builder(UserService)
            >>> service = build(container)
        """
        if not self.is_constructible(dependency_type):
            raise ConstructibilityError(dependency_type)

        signature = self._deducer.deduce(dependency_type)

        def build(container: IContainer) -> T:
            return self.resolve_dependencies(dependency_type, signature, container)

        return build

    def resolve_dependencies(
        self,
        dependency_type: Type[T],
        signature: Optional[ConstructorSignature],
        container: IContainer,
    ) -> T:
        """Resolve every constructor parameter from the container and create the instance.

        Parameters are resolved left to right, each one completely (including any
        nested construction) before the next. ``Optional`` parameters receive None
        when their type cannot be resolved.

        Args:
            dependency_type: The type to instantiate.
            signature: Deduced constructor signature; None means the no-argument constructor.
            container: The container to resolve dependencies from.

        Returns:
            Instance with all dependencies injected.

        Raises:
            UnresolvableError: If a required parameter cannot be resolved.
            CircularDependencyError: If resolving a parameter leads back to a type being built.
        """
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}

        for parameter in signature.parameters if signature is not None else ():
            try:
                if parameter.optional:
                    value = container.require_optional(parameter.annotation)
                else:
                    value = container.require(parameter.annotation)
            except CircularDependencyError:
                raise
            except UnresolvableError as e:
                raise UnresolvableError(
                    dependency_type,
                    f"Failed to resolve dependency for parameter '{parameter.name}': {e}",
                ) from e

            if parameter.keyword_only:
                kwargs[parameter.name] = value
            else:
                args.append(value)

        return dependency_type(*args, **kwargs)
