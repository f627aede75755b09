from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_positive_int
from ..core.exceptions import ProductNotFoundError, UnauthorizedError
from ..employees.model import Actor
from .model import Product
from .repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """Use case: maintain the product catalog that sales points come from.

    Editing a product never touches sales reports: each report keeps the
    points it snapshotted when it was created.
    """

    def __init__(self, products: ProductRepository):
        self._products = products

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise UnauthorizedError("Only admins can manage products")

    def get(self, product_id: int) -> Product:
        product = self._products.get_by_id(int(product_id))
        if product is None:
            raise ProductNotFoundError("Product not found")
        return product

    def list_all(self) -> Sequence[Product]:
        return self._products.list_all()

    def create(self, actor: Actor, *, name: str, points) -> Product:
        self._require_admin(actor)
        name = require_non_empty(name, "Product name")
        points = require_positive_int(points, "Points")
        product_id = self._products.create_product(name=name, points=points)
        logger.info("Product %s (%s, %s points) created by %s", product_id, name, points, actor.employee_id)
        return self.get(product_id)

    def update(self, actor: Actor, product_id: int, *, name: Optional[str] = None, points=None) -> Product:
        self._require_admin(actor)
        current = self.get(product_id)
        new_name = require_non_empty(name, "Product name") if name is not None else current.name
        new_points = require_positive_int(points, "Points") if points is not None else current.points

        if not self._products.update_product(current.product_id, name=new_name, points=new_points):
            raise ProductNotFoundError("Product not found")
        logger.info("Product %s updated by %s (points %s -> %s)", current.product_id, actor.employee_id, current.points, new_points)
        return self.get(current.product_id)

    def delete(self, actor: Actor, product_id: int) -> None:
        self._require_admin(actor)
        if not self._products.delete_by_id(int(product_id)):
            raise ProductNotFoundError("Product not found")
        logger.info("Product %s deleted by %s", product_id, actor.employee_id)
