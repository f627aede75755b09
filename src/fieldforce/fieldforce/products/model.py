from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    product_id: int
    name: str
    points: int

    def to_dict(self) -> dict:
        return {"product_id": self.product_id, "name": self.name, "points": self.points}
