import logging
from typing import Any, Dict, Optional

from scopewire.domain import BuilderEntry, InstanceEntry, IRegistry, TypeKey

logger = logging.getLogger(__name__)


def release(instance: Any) -> None:
    """Release an owned instance by calling its ``close()`` method when it has one."""
    close = getattr(instance, "close", None)
    if callable(close):
        close()


class Registry(IRegistry):
    """Type-indexed store of builders and cached instances for one container.

    Holds at most one builder and one cached instance per key. Cached instances
    are either owned by this registry or non-owning aliases of Singletons owned
    by an ancestor's registry.

    Attributes:
        _builders: Builder entries keyed by type.
        _instances: Instance entries keyed by type, in creation order.
    """

    def __init__(self) -> None:
        """Initialize the registry with empty maps."""
        self._builders: Dict[TypeKey, BuilderEntry] = {}
        self._instances: Dict[TypeKey, InstanceEntry] = {}

    def get_builder(self, key: TypeKey) -> Optional[BuilderEntry]:
        return self._builders.get(key)

    def set_builder(self, key: TypeKey, entry: BuilderEntry) -> None:
        self._builders[key] = entry

    def get_instance(self, key: TypeKey) -> Optional[InstanceEntry]:
        return self._instances.get(key)

    def set_instance(self, key: TypeKey, entry: InstanceEntry) -> None:
        """Store a cached instance, releasing the owned instance it replaces.

        Args:
            key: The type key.
            entry: The new instance entry.
        """
        previous = self._instances.pop(key, None)
        self._instances[key] = entry
        if previous is not None and previous.owned and previous.instance is not entry.instance:
            logger.debug("Releasing replaced instance of %s", key)
            release(previous.instance)

    def has(self, key: TypeKey) -> bool:
        """Whether a builder or an instance is stored under the key."""
        return key in self._builders or key in self._instances

    def clone_for_child(self) -> "Registry":
        """Build the registry a child scope starts from.

        Local builders are copied so the child can rebuild them. Singleton builders
        are not copied. Local instances are not copied, so the child builds its own
        on demand. Singleton instances are copied as non-owning aliases.

        Returns:
            New registry for the child scope.
        """
        child = Registry()
        for key, builder in self._builders.items():
            cloned_builder = builder.clone_for_child()
            if cloned_builder is not None:
                child._builders[key] = cloned_builder

        for key, instance in self._instances.items():
            alias = instance.clone_for_child()
            if alias is not None:
                child._instances[key] = alias

        logger.debug(
            "Cloned registry for child scope: %d of %d builders, %d of %d instances",
            len(child._builders),
            len(self._builders),
            len(child._instances),
            len(self._instances),
        )
        return child

    def dispose(self) -> None:
        """Release owned instances in reverse creation order and clear both maps.

        Aliases are dropped without being released; their owner releases them.
        """
        instances = list(self._instances.values())
        self._instances.clear()
        self._builders.clear()

        for entry in reversed(instances):
            if entry.owned:
                release(entry.instance)
