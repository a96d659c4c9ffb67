"""HTTP service that stores orders and serves them back."""

from __future__ import annotations

import argparse
from typing import Sequence

from flask import Flask, Response, jsonify, request

from . import logs
from .models import Order
from .store import RECORD_INSERTED, OrderStore, StoreError

DEFAULT_PORT = 7071
DEFAULT_DATA_DIR = "tmp/badger"
DEFAULT_LOG_FILE = "consumerdb.log"


def create_app(store: OrderStore) -> Flask:
    """Build the application exposing the store under /db."""
    app = Flask(__name__)

    @app.post("/db/insert")
    def insert_order() -> tuple[Response, int]:
        try:
            order = Order.from_json(request.get_data())
        except ValueError as exc:
            return jsonify(str(exc)), 400
        logs.log_request(
            "Invoked controller to insert order with key" + order.order_id, request
        )
        try:
            store.upsert(order.order_id, order)
        except StoreError as exc:
            return jsonify(str(exc)), 500
        return jsonify(RECORD_INSERTED), 201

    @app.get("/db/fetch/<order_id>")
    def fetch_order_by_key(order_id: str) -> tuple[Response, int]:
        logs.log_request("Invoked controller to fetch order with key" + order_id, request)
        try:
            order = store.fetch(order_id)
        except KeyError:
            return jsonify({"error": f"key not found: {order_id}"}), 404
        except StoreError as exc:
            return jsonify({"error": str(exc)}), 500
        return jsonify(order.to_dict()), 200

    @app.get("/db/fetch")
    def fetch_all_orders() -> tuple[Response, int]:
        logs.log_request("Invoked controller to fetch orders", request)
        try:
            orders = store.fetch_all()
        except StoreError as exc:
            return jsonify({"error": str(exc)}), 500
        return jsonify({key: order.to_dict() for key, order in orders.items()}), 200

    return app


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the order store over HTTP.")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument(
        "--data-dir", default=DEFAULT_DATA_DIR, help="directory holding the database"
    )
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="file to log to")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Start the store service and block until it stops."""
    args = _parse_args(argv)
    logs.init_logging(args.log_file)
    logs.info("logger initialized")
    logs.info("initializing router")
    logs.info("Ready to use order store")
    with OrderStore(args.data_dir) as store:
        create_app(store).run(host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())