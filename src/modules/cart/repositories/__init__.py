from modules.cart.repositories.interfaces import ICartRepository
from modules.cart.repositories.snapshot_repository import CartSnapshotRepository

__all__ = ["ICartRepository", "CartSnapshotRepository"]
