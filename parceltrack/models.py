"""Order records and their JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping


def _field(data: Mapping[str, Any], name: str) -> Any:
    """Look a key up exactly first, then ignoring case."""
    if name in data:
        return data[name]
    folded = name.casefold()
    for key, value in data.items():
        if isinstance(key, str) and key.casefold() == folded:
            return value
    return None


def _as_object(data: Any, what: str) -> Mapping[str, Any] | None:
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise ValueError(f"{what}: expected a JSON object, got {type(data).__name__}")
    return data


def _as_str(value: Any, name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{name}: expected a string, got {type(value).__name__}")
    return value


def _as_float(value: Any, name: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name}: expected a number, got {type(value).__name__}")
    return float(value)


def _as_int(value: Any, name: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name}: expected an integer, got {type(value).__name__}")
    return value


def _number(value: float) -> int | float:
    """Render whole numbers without a fractional part."""
    if value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def _load(data: str | bytes | bytearray) -> Any:
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    return json.loads(data)


@dataclass
class Address:
    """Delivery address of an order."""

    city: str = ""
    state: str = ""
    pincode: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"City": self.city, "State": self.state, "Pincode": self.pincode}

    @classmethod
    def from_dict(cls, data: Any) -> Address:
        obj = _as_object(data, "Address")
        if obj is None:
            return cls()
        return cls(
            city=_as_str(_field(obj, "City"), "City"),
            state=_as_str(_field(obj, "State"), "State"),
            pincode=_as_int(_field(obj, "Pincode"), "Pincode"),
        )


@dataclass
class Status:
    """Delivery state of an order and when it was reached."""

    state: str = ""
    status_date: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"State": self.state, "StatusDate": self.status_date}

    @classmethod
    def from_dict(cls, data: Any) -> Status:
        obj = _as_object(data, "Status")
        if obj is None:
            return cls()
        return cls(
            state=_as_str(_field(obj, "State"), "State"),
            status_date=_as_str(_field(obj, "StatusDate"), "StatusDate"),
        )


@dataclass
class Order:
    """A customer order being tracked."""

    order_id: str = ""
    order_date: str = ""
    order_total: float = 0.0
    status: Status = field(default_factory=Status)
    address: Address = field(default_factory=Address)

    def to_dict(self) -> dict[str, Any]:
        return {
            "OrderId": self.order_id,
            "OrderDate": self.order_date,
            "OrderTotal": _number(float(self.order_total)),
            "Status": self.status.to_dict(),
            "Address": self.address.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Order:
        obj = _as_object(data, "Order")
        if obj is None:
            return cls()
        return cls(
            order_id=_as_str(_field(obj, "OrderId"), "OrderId"),
            order_date=_as_str(_field(obj, "OrderDate"), "OrderDate"),
            order_total=_as_float(_field(obj, "OrderTotal"), "OrderTotal"),
            status=Status.from_dict(_field(obj, "Status")),
            address=Address.from_dict(_field(obj, "Address")),
        )

    def to_json(self) -> bytes:
        """Compact JSON encoding of the order."""
        return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_json(cls, data: str | bytes | bytearray) -> Order:
        """Decode an order; raises ValueError on malformed input."""
        return cls.from_dict(_load(data))


def orders_from_json(data: str | bytes | bytearray) -> dict[str, Order]:
    """Decode a JSON object mapping keys to orders."""
    obj = _as_object(_load(data), "orders")
    if obj is None:
        return {}
    return {key: Order.from_dict(value) for key, value in obj.items()}