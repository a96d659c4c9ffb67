"""HTTP service that follows order events and shows where each order is."""

from __future__ import annotations

import argparse
import json
import os
import threading
from typing import Protocol, Sequence

from flask import Flask, Response, jsonify, render_template, request

from . import logs
from .dbclient import DEFAULT_HOST, OrderDBClient
from .messaging import Message, ZmqSubscriber
from .models import Order

DEFAULT_PORT = 8081
DEFAULT_ENDPOINT = "tcp://localhost:5556"
DEFAULT_TOPIC = "orders"
DEFAULT_TEMPLATE_DIR = "templates"
DEFAULT_LOG_FILE = "consumer.log"
POLL_INTERVAL = 0.1

_VIEWS = {
    "placed": "placed.html",
    "out-for-delivery": "out.html",
    "delivered": "delivered.html",
}
_DEFAULT_VIEW = "shipped.html"


class Transport(Protocol):
    def poll(self, timeout: float = ...) -> Message | None: ...


class OrderClient(Protocol):
    def upsert(self, order: Order) -> bool: ...

    def fetch_all(self) -> dict[str, Order]: ...

    def fetch(self, key: str) -> Order: ...


def view_for_state(state: str) -> str:
    """Template that shows an order in the given state."""
    return _VIEWS.get(state, _DEFAULT_VIEW)


class OrderConsumer:
    """Reads order events and stores each order through the client."""

    def __init__(self, transport: Transport, client: OrderClient) -> None:
        self.transport = transport
        self.client = client

    def handle(self, message: Message) -> Order | None:
        """Store the order carried by a message; None if the message is not an order."""
        key = message.key.decode("utf-8", errors="replace")
        value = message.value.decode("utf-8", errors="replace")
        try:
            order = Order.from_json(message.value)
        except ValueError as exc:
            logs.info(f"Skipping malformed order from topic {message.topic}: {exc}")
            return None
        self.client.upsert(order)
        text = (
            "Read order from topic " + message.topic + ": key = " + key + " value = " + value
        )
        print(text)
        logs.info(text)
        return order

    def run(self, stop_event: threading.Event) -> None:
        """Handle messages until stop_event is set."""
        while not stop_event.is_set():
            message = self.transport.poll(POLL_INTERVAL)
            if message is not None:
                self.handle(message)


def create_app(client: OrderClient, template_dir: str | os.PathLike[str]) -> Flask:
    """Build the application exposing stored orders under /consumer."""
    app = Flask(__name__, template_folder=os.fspath(template_dir))

    @app.get("/consumer/order/<order_id>")
    def get_order(order_id: str) -> tuple[Response, int]:
        order = client.fetch(order_id)
        payload = order.to_dict()
        logs.log_request("status fetched for order : " + json.dumps(payload), request)
        return jsonify(payload), 200

    @app.get("/consumer/status/<order_id>")
    def get_status(order_id: str) -> tuple[str, int]:
        order = client.fetch(order_id)
        page = render_template(
            view_for_state(order.status.state),
            id=order_id,
            orderDate=order.order_date,
            status=order.status.state,
            statusDate=order.status.status_date,
            total=order.order_total,
            city=order.address.city,
            state=order.address.state,
            pincode=order.address.pincode,
        )
        return page, 200

    @app.get("/consumer/orders")
    def get_all_orders() -> tuple[Response, int]:
        orders = client.fetch_all()
        return jsonify({key: order.to_dict() for key, order in orders.items()}), 200

    return app


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Follow order events and serve their status.")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument("--db-host", default=DEFAULT_HOST, help="URL of the order store service")
    parser.add_argument(
        "--endpoint", default=DEFAULT_ENDPOINT, help="endpoint order events are published on"
    )
    parser.add_argument("--topic", default=DEFAULT_TOPIC, help="topic to consume")
    parser.add_argument(
        "--templates", default=DEFAULT_TEMPLATE_DIR, help="directory of status page templates"
    )
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="file to log to")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Start consuming order events and serving them; blocks until stopped."""
    args = _parse_args(argv)
    logs.init_logging(args.log_file)
    logs.info("logger initialized")
    logs.info("initializing router")
    logs.info("ready to consume events")
    client = OrderDBClient(args.db_host)
    subscriber = ZmqSubscriber(args.endpoint, args.topic)
    stop = threading.Event()
    consumer = OrderConsumer(subscriber, client)
    worker = threading.Thread(target=consumer.run, args=(stop,), daemon=True)
    worker.start()
    try:
        app = create_app(client, os.path.abspath(args.templates))
        app.run(host=args.host, port=args.port)
    finally:
        logs.info("terminating")
        stop.set()
        worker.join(timeout=1.0)
        subscriber.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())