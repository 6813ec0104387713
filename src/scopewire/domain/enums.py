from enum import Enum


class Scope(str, Enum):
    """Defines how a binding is shared across a container hierarchy.

    Attributes:
        LOCAL: Instance is rebuilt independently in every container that needs it.
        SINGLETON: One instance shared by a container and all of its descendant scopes.
    """

    LOCAL = "local"
    SINGLETON = "singleton"

    def __str__(self) -> str:
        return self.value
