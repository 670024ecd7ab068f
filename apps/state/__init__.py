"""In-memory state containers mirroring service results for a UI layer.

Each store holds serialized copies, never model instances, so what a store
shows can lag the database until the next fetch.
"""
from .base import Store
from .menu import MenuStore
from .orders import OrderStore
from .restaurants import RestaurantStore

__all__ = ["Store", "MenuStore", "OrderStore", "RestaurantStore"]
