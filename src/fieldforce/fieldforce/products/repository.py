from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Product


class ProductRepository(Protocol):
    def get_by_id(self, product_id: int) -> Optional[Product]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Product]:
        raise NotImplementedError

    def create_product(self, *, name: str, points: int) -> int:
        raise NotImplementedError

    def update_product(self, product_id: int, *, name: str, points: int) -> bool:
        raise NotImplementedError

    def delete_by_id(self, product_id: int) -> bool:
        raise NotImplementedError
