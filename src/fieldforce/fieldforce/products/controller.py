from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import json_body, login_required
from ..container import Container
from ..employees.model import Actor


def register(app: Flask, container: Container) -> None:
    @app.route("/api/products", methods=["GET"], endpoint="products_list")
    @login_required
    def products_list(actor: Actor):
        return jsonify([p.to_dict() for p in container.product_service.list_all()])

    @app.route("/api/products", methods=["POST"], endpoint="products_create")
    @login_required
    def products_create(actor: Actor):
        data = json_body()
        product = container.product_service.create(actor, name=data.get("name"), points=data.get("points"))
        return jsonify(product.to_dict()), 201

    @app.route("/api/products/<int:product_id>", methods=["PATCH"], endpoint="products_update")
    @login_required
    def products_update(actor: Actor, product_id: int):
        data = json_body()
        product = container.product_service.update(
            actor, product_id, name=data.get("name"), points=data.get("points")
        )
        return jsonify(product.to_dict())

    @app.route("/api/products/<int:product_id>", methods=["DELETE"], endpoint="products_delete")
    @login_required
    def products_delete(actor: Actor, product_id: int):
        container.product_service.delete(actor, product_id)
        return "", 204
