"""Catalog repositories package."""

from modules.catalog.repositories.in_memory import InMemoryCatalog
from modules.catalog.repositories.interfaces import ICatalog

__all__ = ["ICatalog", "InMemoryCatalog"]
