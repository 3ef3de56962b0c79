"""Repositories for the content management project."""

from .base import ContentRepository
from .management_api import ManagementAPIRepository
from .inmemory import InMemoryRepository

__all__ = [
    "ContentRepository",
    "ManagementAPIRepository",
    "InMemoryRepository",
]
