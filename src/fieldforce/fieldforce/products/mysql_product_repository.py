from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Product
from .repository import ProductRepository


def _to_product(row: dict) -> Product:
    return Product(product_id=int(row["product_id"]), name=row["name"], points=int(row["points"]))


class MySQLProductRepository(ProductRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, product_id: int) -> Optional[Product]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT product_id, name, points FROM products WHERE product_id=%s", (int(product_id),))
            row = fetchone(cur)
            return _to_product(row) if row else None

    def list_all(self) -> Sequence[Product]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT product_id, name, points FROM products ORDER BY name ASC")
            return [_to_product(r) for r in fetchall(cur)]

    def create_product(self, *, name: str, points: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO products(name, points) VALUES(%s,%s)", (name, int(points)))
            return int(cur.lastrowid)

    def update_product(self, product_id: int, *, name: str, points: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE products SET name=%s, points=%s WHERE product_id=%s",
                (name, int(points), int(product_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, product_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM products WHERE product_id=%s", (int(product_id),))
            return cur.rowcount > 0
