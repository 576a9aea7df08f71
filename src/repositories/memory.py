"""Bellek içi anahtar-değer depoları."""

from __future__ import annotations

import threading
from typing import Generic, Optional, TypeVar

from src.models.supply_chain import InventoryItem

T = TypeVar("T")


class InMemoryRepository(Generic[T]):
    """Tek anahtarlı (id) bellek içi depo: find_by_id / save / find_all / delete."""

    def __init__(self, key_attr: str) -> None:
        self.key_attr = key_attr
        self._items: dict[str, T] = {}
        self._lock = threading.Lock()

    def find_by_id(self, entity_id: str) -> Optional[T]:
        with self._lock:
            return self._items.get(entity_id)

    def save(self, entity: T) -> T:
        with self._lock:
            self._items[getattr(entity, self.key_attr)] = entity
        return entity

    def find_all(self) -> list[T]:
        with self._lock:
            return list(self._items.values())

    def delete(self, entity_id: str) -> None:
        # Olmayan anahtar için no-op
        with self._lock:
            self._items.pop(entity_id, None)


class InMemoryInventoryRepository:
    """(product_id, warehouse_id) bileşik anahtarlı stok deposu."""

    def __init__(self) -> None:
        self._items: dict[tuple[str, str], InventoryItem] = {}
        self._lock = threading.Lock()

    def find_by_product_and_warehouse(
        self, product_id: str, warehouse_id: str
    ) -> Optional[InventoryItem]:
        with self._lock:
            return self._items.get((product_id, warehouse_id))

    def save(self, item: InventoryItem) -> InventoryItem:
        with self._lock:
            self._items[(item.product_id, item.warehouse_id)] = item
        return item

    def find_all(self) -> list[InventoryItem]:
        with self._lock:
            return list(self._items.values())

    def find_by_product(self, product_id: str) -> list[InventoryItem]:
        return [i for i in self.find_all() if i.product_id == product_id]

    def find_by_warehouse(self, warehouse_id: str) -> list[InventoryItem]:
        return [i for i in self.find_all() if i.warehouse_id == warehouse_id]
