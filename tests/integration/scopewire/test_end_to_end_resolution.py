"""End-to-end integration tests for dependency resolution across all layers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import pytest

from scopewire import ConstructibilityError, Container, Scope, UnresolvableError


class TestEndToEndResolution:
    """Test complete dependency resolution scenarios across all layers."""

    def test_simple_auto_wiring_end_to_end(self):
        """Test auto-wiring a chain where only the root is provided."""
        container = Container()

        class Database:
            def __init__(self):
                self.connected = True

        class UserRepository:
            def __init__(self, db: Database):
                self.db = db

        class UserService:
            def __init__(self, repo: UserRepository):
                self.repo = repo

        container.provide(Database, scope=Scope.SINGLETON)

        service = container.require(UserService)

        assert isinstance(service.repo, UserRepository)
        assert service.repo.db is container.require(Database)
        assert service.repo.db.connected is True

    def test_every_provided_constructible_type_resolves(self):
        """Test that every constructible type provided resolves to a live, correctly typed value."""

        class Config:
            pass

        class Logger:
            def __init__(self, config: Config):
                self.config = config

        @dataclass
        class Metrics:
            logger: Logger

        class Service:
            def __init__(self, logger: Logger, metrics: Metrics, *, config: Config):
                self.logger = logger
                self.metrics = metrics
                self.config = config

        container = Container()
        for dependency_type in (Config, Logger, Metrics, Service):
            container.provide(dependency_type)

        for dependency_type in (Config, Logger, Metrics, Service):
            assert isinstance(container.require(dependency_type), dependency_type)

        service = container.require(Service)
        assert service.metrics.logger is service.logger
        assert service.config is service.logger.config

    def test_interface_bound_to_implementation(self):
        """Test binding an abstract interface with an explicit builder."""

        class PaymentGateway(ABC):
            @abstractmethod
            def charge(self, amount: int) -> str: ...

        class StripeGateway(PaymentGateway):
            def charge(self, amount: int) -> str:
                return f"charged {amount}"

        class CheckoutService:
            def __init__(self, gateway: PaymentGateway):
                self.gateway = gateway

        container = Container()

        with pytest.raises(ConstructibilityError):
            container.provide(PaymentGateway)

        container.provide(PaymentGateway, lambda c: c.require(StripeGateway), Scope.SINGLETON)

        checkout = container.require(CheckoutService)
        assert checkout.gateway.charge(10) == "charged 10"
        assert checkout.gateway is container.require(StripeGateway)

    def test_non_constructible_without_builder(self):
        """Test both resolution forms for a type that is neither provided nor constructible."""

        class PaymentGateway(ABC):
            @abstractmethod
            def charge(self, amount: int) -> str: ...

        container = Container()

        assert container.require_optional(PaymentGateway) is None
        with pytest.raises(UnresolvableError, match="PaymentGateway"):
            container.require(PaymentGateway)

    def test_optional_collaborator(self):
        """Test that optional collaborators are injected only when resolvable."""

        class Cache(ABC):
            @abstractmethod
            def get(self, key: str): ...

        class DictCache(Cache):
            def get(self, key: str):
                return None

        class Repository:
            def __init__(self, cache: Optional[Cache]):
                self.cache = cache

        without_cache = Container()
        assert without_cache.require(Repository).cache is None

        with_cache = Container()
        with_cache.provide(Cache, lambda c: DictCache(), Scope.LOCAL)
        assert isinstance(with_cache.require(Repository).cache, DictCache)

    def test_builder_errors_surface_with_context(self):
        """Test that a failing nested builder is reported against the type being built."""

        class Connection:
            pass

        class Repository:
            def __init__(self, connection: Connection):
                self.connection = connection

        def broken(container):
            raise ConnectionError("database unavailable")

        container = Container()

        with pytest.raises(UnresolvableError) as exc_info:
            container.provide(Repository, lambda c: Repository(broken(c)), Scope.LOCAL)

        assert exc_info.value.cls is Repository
        assert "database unavailable" in str(exc_info.value)
        assert container.is_provided(Repository) is False

    def test_request_graph_with_scopes(self):
        """Test a request-style graph: shared config, per-scope sessions."""
        session_count = 0

        class AppConfig:
            def __init__(self):
                self.dsn = "sqlite://"

        class Session:
            def __init__(self, config: AppConfig):
                nonlocal session_count
                session_count += 1
                self.config = config
                self.closed = False

            def close(self):
                self.closed = True

        class Handler:
            def __init__(self, session: Session):
                self.session = session

        root = Container()
        root.provide(AppConfig, scope=Scope.SINGLETON)
        root.provide(Session, scope=Scope.LOCAL)
        root.provide(Handler, scope=Scope.LOCAL)

        with root.create_scope() as request_scope:
            handler = request_scope.require(Handler)
            assert handler.session is request_scope.require(Session)
            assert handler.session is not root.require(Session)
            assert handler.session.config is root.require(AppConfig)

        assert handler.session.closed is True
        assert root.require(Session).closed is False
        assert session_count == 2
