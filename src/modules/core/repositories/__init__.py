"""Core repositories package."""

from modules.core.repositories.django_repository import SnapshotDjangoRepository
from modules.core.repositories.in_memory import InMemorySnapshotStore
from modules.core.repositories.interfaces import ISnapshotStore
from modules.core.repositories.snapshot_repository import SnapshotRepository

__all__ = [
    "ISnapshotStore",
    "InMemorySnapshotStore",
    "SnapshotDjangoRepository",
    "SnapshotRepository",
]
