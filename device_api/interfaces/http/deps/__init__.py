"""Reusable FastAPI dependencies."""

from .devices import get_app_container, get_device_repository, get_device_service

__all__ = [
    "get_app_container",
    "get_device_repository",
    "get_device_service",
]
