from __future__ import annotations

import threading
from typing import Optional, Sequence

from .model import Product
from .repository import ProductRepository


class InMemoryProductRepository(ProductRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, Product] = {}
        self._next_id = 1

    def get_by_id(self, product_id: int) -> Optional[Product]:
        with self._lock:
            return self._rows.get(int(product_id))

    def list_all(self) -> Sequence[Product]:
        with self._lock:
            return sorted(self._rows.values(), key=lambda p: p.product_id)

    def create_product(self, *, name: str, points: int) -> int:
        with self._lock:
            product_id = self._next_id
            self._next_id += 1
            self._rows[product_id] = Product(product_id=product_id, name=name, points=int(points))
            return product_id

    def update_product(self, product_id: int, *, name: str, points: int) -> bool:
        with self._lock:
            if int(product_id) not in self._rows:
                return False
            self._rows[int(product_id)] = Product(product_id=int(product_id), name=name, points=int(points))
            return True

    def delete_by_id(self, product_id: int) -> bool:
        with self._lock:
            return self._rows.pop(int(product_id), None) is not None
