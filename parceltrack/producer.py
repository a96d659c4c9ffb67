"""Publishing order events to the order topic."""

from __future__ import annotations

import re
from typing import Iterable, Protocol

from . import logs
from .messaging import Message
from .models import Order

DEFAULT_TOPIC = "orders"
PARTITIONS = 5

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class Transport(Protocol):
    def publish(self, message: Message) -> None: ...


class ProduceError(Exception):
    """Raised when an event could not be handed to the transport."""


def _to_int32(value: int) -> int:
    return ((value + 2**31) % 2**32) - 2**31


def partition_for(order_id: str, partitions: int = PARTITIONS) -> int:
    """Partition for an order id: its decimal value as a 32-bit integer modulo partitions.

    Ids that are not decimal integers map to partition 0; out-of-range values
    are clamped to 64 bits before being narrowed, and the remainder keeps the
    sign of the id.
    """
    if partitions <= 0:
        raise ValueError("partitions must be positive")
    if _INTEGER.fullmatch(order_id):
        value = min(max(int(order_id), _INT64_MIN), _INT64_MAX)
    else:
        value = 0
    value = _to_int32(value)
    remainder = abs(value) % partitions
    return -remainder if value < 0 else remainder


class OrderProducer:
    """Turns orders into keyed events on a topic."""

    def __init__(self, transport: Transport, topic: str = DEFAULT_TOPIC) -> None:
        self.transport = transport
        self.topic = topic

    def produce(self, order: Order) -> Message:
        """Publish the order keyed by its id; returns the message sent."""
        message = Message(
            topic=self.topic,
            key=order.order_id.encode("utf-8"),
            value=order.to_json(),
            partition=partition_for(order.order_id),
        )
        where = f"{self.topic}[{message.partition}]"
        try:
            self.transport.publish(message)
        except Exception as exc:
            logs.info("Failed to produce event for order : " + where)
            raise ProduceError(f"failed to produce event to {where}: {exc}") from exc
        key = message.key.decode("utf-8")
        value = message.value.decode("utf-8")
        logs.info(
            "Produced event to topic : " + self.topic + " key : " + key + " value : " + value
        )
        print(f"Produced event to topic {self.topic}: key = {key:<10} value = {value}")
        return message

    def produce_all(self, orders: Iterable[Order]) -> list[Message]:
        """Publish every order in turn."""
        return [self.produce(order) for order in orders]