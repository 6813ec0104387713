"""
FastAPI integration module.

Provides helpers and utilities for integrating scopewire with FastAPI.
"""

from .integration import (
    ScopedContainerMiddleware,
    create_fastapi_dependency,
    create_scoped_dependency,
    get_request_container,
    install_container,
)

__all__ = [
    "create_fastapi_dependency",
    "create_scoped_dependency",
    "get_request_container",
    "install_container",
    "ScopedContainerMiddleware",
]
