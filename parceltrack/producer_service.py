"""HTTP service where orders are placed and updated, publishing every change."""

from __future__ import annotations

import argparse
import json
import threading
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Iterator, Sequence

from flask import Flask, Response, jsonify, request

from . import logs
from .messaging import ZmqPublisher
from .models import Address, Order, Status
from .openapi import openapi_spec
from .producer import OrderProducer, ProduceError

DEFAULT_PORT = 8080
DEFAULT_ENDPOINT = "tcp://*:5556"
DEFAULT_LOG_FILE = "producer.log"
DATE_FORMAT = "%m-%d-%Y %H:%M:%S"
DELIVERED = "delivered"

_SWAGGER_PAGE = """<!DOCTYPE html>
<html>
<head><title>{title}</title></head>
<body>
<h1>{title}</h1>
<p>The API description is available as <a href="doc.json">doc.json</a>.</p>
</body>
</html>
"""


def _timestamp(now: datetime | None) -> str:
    return (now or datetime.now()).strftime(DATE_FORMAT)


def default_orders() -> list[Order]:
    """The orders the service starts with."""
    return [
        Order(
            order_id="1001",
            order_date="15-08-2024 15:04:05",
            order_total=234.55,
            status=Status(state="placed", status_date="15-08-2024 15:04:05"),
            address=Address(city="bangalore", state="karnataka", pincode=560037),
        )
    ]


class OrderBook:
    """The orders known to the service, in the order they were placed."""

    def __init__(self, orders: Iterable[Order] | None = None) -> None:
        self._orders = list(orders or ())
        self._lock = threading.Lock()

    def __iter__(self) -> Iterator[Order]:
        with self._lock:
            return iter(list(self._orders))

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    def place(self, order: Order, now: datetime | None = None) -> Order:
        """Record a new order, stamping its order and status dates; returns the stored order."""
        stamp = _timestamp(now)
        placed = replace(
            order,
            order_date=stamp,
            status=replace(order.status, status_date=stamp),
        )
        with self._lock:
            self._orders.append(placed)
        return placed

    def pending(self) -> list[Order]:
        """Orders whose state is anything but delivered."""
        with self._lock:
            return [o for o in self._orders if o.status.state.lower() != DELIVERED]

    def delivered(self) -> list[Order]:
        """Orders whose state is delivered, in any letter case."""
        with self._lock:
            return [o for o in self._orders if o.status.state.lower() == DELIVERED]

    def change_state(
        self, order_id: str, state: str, now: datetime | None = None
    ) -> list[Order]:
        """Set the state of every order with this id; returns the updated orders."""
        stamp = _timestamp(now)
        changed: list[Order] = []
        with self._lock:
            for index, order in enumerate(self._orders):
                if order.order_id == order_id:
                    updated = replace(
                        order,
                        status=replace(order.status, state=state, status_date=stamp),
                    )
                    self._orders[index] = updated
                    changed.append(updated)
        return changed

    def change_address(self, order_id: str, address: Address) -> list[Order]:
        """Set the address of every order with this id; returns the updated orders."""
        changed: list[Order] = []
        with self._lock:
            for index, order in enumerate(self._orders):
                if order.order_id == order_id:
                    updated = replace(order, address=replace(address))
                    self._orders[index] = updated
                    changed.append(updated)
        return changed


def _order_list(orders: list[Order]) -> Response:
    # An empty result is rendered as null, as the service always has.
    return jsonify([o.to_dict() for o in orders] or None)


def _publish(producer: OrderProducer, order: Order) -> None:
    try:
        producer.produce(order)
    except ProduceError as exc:
        logs.info(str(exc))


def create_app(book: OrderBook, producer: OrderProducer) -> Flask:
    """Build the application exposing the order book under /producer."""
    app = Flask(__name__)

    @app.post("/producer/place")
    def place_order() -> tuple[Response, int]:
        try:
            order = Order.from_json(request.get_data())
        except ValueError as exc:
            return jsonify(str(exc)), 400
        logs.log_request("placed new order with id : " + order.order_id, request)
        placed = book.place(order)
        _publish(producer, placed)
        return jsonify("order successfully added with id : " + placed.order_id), 202

    @app.get("/producer/pending")
    def get_pending_orders() -> tuple[Response, int]:
        orders = book.pending()
        logs.log_request("fetching pending orders", request)
        return _order_list(orders), 200

    @app.get("/producer/delivered")
    def get_delivered_orders() -> tuple[Response, int]:
        orders = book.delivered()
        logs.log_request("fetching delivered orders", request)
        return _order_list(orders), 200

    @app.get("/producer/changeState")
    def change_state() -> tuple[Response, int]:
        state = request.args.get("state", "")
        order_id = request.args.get("id", "")
        for order in book.change_state(order_id, state):
            _publish(producer, order)
        logs.log_request("state changed to " + state + ", with id : " + order_id, request)
        return jsonify("order state changed successfully with id : " + order_id), 202

    @app.post("/producer/changeAddress/<order_id>")
    def change_address(order_id: str) -> tuple[Response, int]:
        try:
            address = Address.from_dict(json.loads(request.get_data()))
        except ValueError as exc:
            return jsonify(str(exc)), 400
        for order in book.change_address(order_id, address):
            _publish(producer, order)
        logs.log_request(
            "Address changed to "
            + address.city
            + ", "
            + address.state
            + ", with id : "
            + order_id,
            request,
        )
        return jsonify("order address changed successfully with id : " + order_id), 202

    @app.get("/producer/swagger/", defaults={"resource": "index.html"})
    @app.get("/producer/swagger/<path:resource>")
    def swagger(resource: str) -> tuple[Response | str, int]:
        if resource == "doc.json":
            return jsonify(openapi_spec()), 200
        if resource == "index.html":
            spec = openapi_spec()
            return _SWAGGER_PAGE.format(title=spec["info"]["title"]), 200
        return jsonify({"error": "not found"}), 404

    return app


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the order producer over HTTP.")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument(
        "--endpoint", default=DEFAULT_ENDPOINT, help="endpoint to publish order events on"
    )
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="file to log to")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Start the producer service and block until it stops."""
    args = _parse_args(argv)
    logs.init_logging(args.log_file)
    logs.info("logger initialized")
    logs.info("router initializing")
    logs.info("Ready to produce events")
    publisher = ZmqPublisher(args.endpoint)
    try:
        producer = OrderProducer(publisher)
        book = OrderBook(default_orders())
        for order in book:
            _publish(producer, order)
        create_app(book, producer).run(host=args.host, port=args.port)
    finally:
        publisher.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())