"""Order repositories package."""

from modules.orders.repositories.interfaces import IOrderRepository
from modules.orders.repositories.snapshot_repository import OrderSnapshotRepository

__all__ = ["IOrderRepository", "OrderSnapshotRepository"]
