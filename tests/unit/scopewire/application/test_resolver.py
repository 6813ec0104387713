"""Unit tests for DependencyResolver."""

from abc import ABC, abstractmethod
from typing import Optional, overload

import pytest

from scopewire.application.resolver import DependencyResolver
from scopewire.application.signature_deducer import SignatureDeducer
from scopewire.domain import (
    CircularDependencyError,
    ConstructibilityError,
    IContainer,
    IResolver,
    UnresolvableError,
)


class MockContainer(IContainer):
    """Mock container recording the order of requests."""

    def __init__(self, available=None):
        self.available = dict(available or {})
        self.requests = []

    def provide(self, dependency_type, builder=None, scope=None):
        pass

    def require(self, dependency_type):
        self.requests.append(("require", dependency_type))
        if dependency_type not in self.available:
            raise UnresolvableError(dependency_type, "not available")
        return self.available[dependency_type]

    def require_optional(self, dependency_type):
        self.requests.append(("require_optional", dependency_type))
        return self.available.get(dependency_type)

    def create_scope(self):
        return self

    def dispose(self):
        pass


class Database:
    pass


class Cache:
    pass


class Metrics:
    pass


class TestResolverInitialization:
    """Test cases for DependencyResolver initialization."""

    def test_resolver_implements_interface(self):
        """Test that DependencyResolver implements IResolver."""
        assert isinstance(DependencyResolver(), IResolver)

    def test_resolver_uses_given_deducer(self):
        """Test that a custom deducer is used."""
        deducer = SignatureDeducer(max_parameter_count=5)
        assert DependencyResolver(deducer).deducer is deducer

    def test_resolver_creates_default_deducer(self):
        """Test that a deducer is created when none is given."""
        assert isinstance(DependencyResolver().deducer, SignatureDeducer)


class TestCreateBuilder:
    """Test cases for builder synthesis."""

    def test_builder_for_class_without_dependencies(self):
        """Test building a class with no constructor parameters."""
        resolver = DependencyResolver()

        class SimpleService:
            pass

        instance = resolver.create_builder(SimpleService)(MockContainer())

        assert isinstance(instance, SimpleService)

    def test_builder_resolves_parameters_left_to_right(self):
        """Test that parameters are required in declaration order."""
        resolver = DependencyResolver()
        database, cache, metrics = Database(), Cache(), Metrics()
        container = MockContainer({Database: database, Cache: cache, Metrics: metrics})

        class Service:
            def __init__(self, database: Database, cache: Cache, metrics: Metrics):
                self.database = database
                self.cache = cache
                self.metrics = metrics

        instance = resolver.create_builder(Service)(container)

        assert container.requests == [("require", Database), ("require", Cache), ("require", Metrics)]
        assert instance.database is database
        assert instance.cache is cache
        assert instance.metrics is metrics

    def test_builder_uses_nullable_form_for_optional(self):
        """Test that Optional parameters receive None when unavailable."""
        resolver = DependencyResolver()
        container = MockContainer({Database: Database()})

        class Service:
            def __init__(self, database: Database, cache: Optional[Cache]):
                self.database = database
                self.cache = cache

        instance = resolver.create_builder(Service)(container)

        assert container.requests == [("require", Database), ("require_optional", Cache)]
        assert instance.cache is None

    def test_builder_passes_keyword_only_by_keyword(self):
        """Test that keyword-only parameters are passed by keyword."""
        resolver = DependencyResolver()
        cache = Cache()
        container = MockContainer({Database: Database(), Cache: cache})

        class Service:
            def __init__(self, database: Database, *, cache: Cache):
                self.database = database
                self.cache = cache

        instance = resolver.create_builder(Service)(container)

        assert instance.cache is cache

    def test_builder_uses_selected_overload(self):
        """Test that the builder calls the constructor with the deduced arity."""
        resolver = DependencyResolver()
        container = MockContainer({Database: Database(), Cache: Cache()})

        class Service:
            @overload
            def __init__(self) -> None: ...

            @overload
            def __init__(self, database: Database) -> None: ...

            @overload
            def __init__(self, cache: Cache) -> None: ...

            def __init__(self, *args):
                self.args = args

        instance = resolver.create_builder(Service)(container)

        assert instance.args == ()
        assert container.requests == []

    def test_builder_is_reusable(self):
        """Test that each builder call creates a new instance."""
        resolver = DependencyResolver()

        class Service:
            pass

        build = resolver.create_builder(Service)

        assert build(MockContainer()) is not build(MockContainer())


class TestCreateBuilderRejections:
    """Test cases for types that cannot be auto-wired."""

    def test_abstract_class_rejected(self):
        """Test that abstract classes raise ConstructibilityError."""
        resolver = DependencyResolver()

        class Repository(ABC):
            @abstractmethod
            def save(self): ...

        with pytest.raises(ConstructibilityError) as exc_info:
            resolver.create_builder(Repository)

        assert exc_info.value.cls is Repository
        assert "Repository" in str(exc_info.value)

    def test_unannotated_class_rejected(self):
        """Test that classes without type hints raise ConstructibilityError."""
        resolver = DependencyResolver()

        class Legacy:
            def __init__(self, dependency):
                self.dependency = dependency

        with pytest.raises(ConstructibilityError):
            resolver.create_builder(Legacy)

    def test_builtin_rejected(self):
        """Test that builtins raise ConstructibilityError."""
        with pytest.raises(ConstructibilityError):
            DependencyResolver().create_builder(int)


class TestResolutionErrors:
    """Test cases for errors raised while building."""

    def test_missing_parameter_names_owner_and_parameter(self):
        """Test that unresolvable parameters are reported against the dependent type."""
        resolver = DependencyResolver()

        class Service:
            def __init__(self, database: Database):
                self.database = database

        with pytest.raises(UnresolvableError) as exc_info:
            resolver.create_builder(Service)(MockContainer())

        error = exc_info.value
        assert error.cls is Service
        assert "database" in str(error)
        assert "Database" in str(error)
        assert isinstance(error.__cause__, UnresolvableError)

    def test_missing_parameter_stops_resolution(self):
        """Test that later parameters are not requested after a failure."""
        resolver = DependencyResolver()
        container = MockContainer({Cache: Cache()})

        class Service:
            def __init__(self, database: Database, cache: Cache):
                pass

        with pytest.raises(UnresolvableError):
            resolver.create_builder(Service)(container)

        assert container.requests == [("require", Database)]

    def test_circular_dependency_propagates_unwrapped(self):
        """Test that cycle errors are not wrapped."""
        resolver = DependencyResolver()

        class CyclicContainer(MockContainer):
            def require(self, dependency_type):
                raise CircularDependencyError([Database, Database])

        class Service:
            def __init__(self, database: Database):
                pass

        with pytest.raises(CircularDependencyError):
            resolver.create_builder(Service)(CyclicContainer())
