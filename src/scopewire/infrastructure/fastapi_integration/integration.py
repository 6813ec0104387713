import logging
from typing import Awaitable, Callable, Type, TypeVar

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from scopewire.domain import IContainer
from scopewire.domain.exceptions import type_name

logger = logging.getLogger(__name__)

T = TypeVar("T")

REQUEST_STATE_ATTRIBUTE = "di_container"


def get_request_container(request: Request) -> IContainer:
    """Return the child scope opened for a request by ``ScopedContainerMiddleware``.

    Raises:
        RuntimeError: If the middleware did not run for this request.
    """
    scoped_container = getattr(request.state, REQUEST_STATE_ATTRIBUTE, None)
    if scoped_container is None:
        raise RuntimeError(
            "Request does not have a scoped DI container. Did you forget to add ScopedContainerMiddleware?"
        )
    return scoped_container


def create_fastapi_dependency(container: IContainer, dependency_type: Type[T]) -> Callable[[], T]:
    """Build a ``Depends()`` callable requiring a type from an application-wide container.

    Nothing is scoped to the request: a Local binding resolves to the instance
    cached in ``container``, shared by every request.

    Args:
        container: Container the type is required from.
        dependency_type: Type returned by the dependency.

    Returns:
        Zero-argument callable suitable for ``Depends()``.

    Example:
        >>> get_user_repo = create_fastapi_dependency(container, UserRepository)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_user_repo)):
        ...     return await repo.get_all()
    """

    def dependency() -> T:
        return container.require(dependency_type)

    dependency.__name__ = f"require_{type_name(dependency_type)}"
    return dependency


def create_scoped_dependency(dependency_type: Type[T]) -> Callable[[Request], T]:
    """Build a ``Depends()`` callable requiring a type from the request's child scope.

    Local bindings are rebuilt once per request; Singleton instances of the
    application container are shared. Needs ``ScopedContainerMiddleware``.

    Args:
        dependency_type: Type returned by the dependency.

    Returns:
        Callable taking the request, suitable for ``Depends()``.

    Example:
        >>> get_request_context = create_scoped_dependency(RequestContext)
        >>>
        >>> @app.get("/process")
        >>> async def process_request(ctx: RequestContext = Depends(get_request_context)):
        ...     return {"request_id": ctx.request_id}
    """

    def scoped_dependency(request: Request) -> T:
        return get_request_container(request).require(dependency_type)

    scoped_dependency.__name__ = f"require_scoped_{type_name(dependency_type)}"
    return scoped_dependency


class ScopedContainerMiddleware(BaseHTTPMiddleware):
    """Opens a child scope of the application container around each request.

    The scope is stored on ``request.state`` and disposed once the endpoint has
    produced its response, closing the Local instances built for the request.

    Attributes:
        container: Application container the request scopes derive from.
    """

    def __init__(self, app: FastAPI, container: IContainer):
        super().__init__(app)
        self.container = container

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Run the rest of the stack inside a fresh child scope.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        scoped_container = self.container.create_scope()
        setattr(request.state, REQUEST_STATE_ATTRIBUTE, scoped_container)

        try:
            return await call_next(request)
        finally:
            logger.debug("Disposing request scope for %s", request.url.path)
            scoped_container.dispose()


def install_container(app: FastAPI, container: IContainer) -> None:
    """Attach a container to an application.

    Stores the container as ``app.state.container`` and registers
    ``ScopedContainerMiddleware`` so endpoints can use ``create_scoped_dependency``.

    Example:
        >>> app = FastAPI()
        >>> install_container(app, container)
    """
    app.state.container = container
    app.add_middleware(ScopedContainerMiddleware, container=container)
    logger.debug("Installed container on %s", app.title)
