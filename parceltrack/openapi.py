"""OpenAPI description of the producer service."""

from __future__ import annotations

import copy
from typing import Any

TITLE = "Delivery Tracking API"
DESCRIPTION = (
    "This API allows the management and tracking of delivery orders including "
    "placing orders, changing addresses, and checking order states."
)
VERSION = "1.0.0"
HOST = "localhost:8080"
BASE_PATH = "/producer"
SCHEMES = ("http",)

_TAG = BASE_PATH.strip("/")
_ORDER_ID_TEXT = "The unique identifier of the order"
_ORDER_STATES = ("pending", "shipped", "out-for-delivery", "delivered")


def _typed(kind: str) -> dict[str, Any]:
    return {"type": kind}


def _obj(**properties: Any) -> dict[str, Any]:
    return {"type": "object", "properties": properties}


def _ref(name: str) -> dict[str, Any]:
    return {"$ref": f"#/components/schemas/{name}"}


def _json(schema: dict[str, Any]) -> dict[str, Any]:
    return {"application/json": {"schema": schema}}


def _responses(*entries: tuple[int, str, dict[str, Any] | None]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for code, text, schema in entries:
        response: dict[str, Any] = {"description": text}
        if schema is not None:
            response["content"] = _json(schema)
        result[str(code)] = response
    return result


def _param(location: str, name: str, schema: dict[str, Any], text: str) -> dict[str, Any]:
    return {
        "in": location,
        "name": name,
        "required": True,
        "schema": schema,
        "description": text,
    }


def _operation(
    summary: str,
    text: str,
    responses: dict[str, Any],
    *,
    operation_id: str | None = None,
    parameters: list[dict[str, Any]] | None = None,
    body: str | None = None,
) -> dict[str, Any]:
    op: dict[str, Any] = {"summary": summary, "description": text}
    if operation_id is not None:
        op["operationId"] = operation_id
    op["tags"] = [_TAG]
    if parameters is not None:
        op["parameters"] = parameters
    if body is not None:
        op["requestBody"] = {"required": True, "content": _json(_ref(body))}
    op["responses"] = responses
    return op


def _order_list() -> dict[str, Any]:
    return {"type": "array", "items": _ref("Order")}


_SERVER_ERROR = (500, "Server error", None)
_NOT_FOUND = (404, "Order not found", None)


def _status_schema() -> dict[str, Any]:
    return _obj(State=_typed("string"), StatusDate=_typed("string"))


def _address_schema() -> dict[str, Any]:
    return _obj(City=_typed("string"), State=_typed("string"), Pincode=_typed("integer"))


def _build() -> dict[str, Any]:
    order_id_path = _param("path", "id", _typed("string"), _ORDER_ID_TEXT)
    order_id_query = _param("query", "id", _typed("string"), _ORDER_ID_TEXT)
    state_query = _param(
        "query",
        "state",
        {"type": "string", "enum": list(_ORDER_STATES)},
        "The new state to change the order to",
    )
    paths = {
        f"{BASE_PATH}/place": {
            "post": _operation(
                "Place a new order",
                "Create a new order by providing the necessary order details.",
                _responses(
                    (201, "Order placed successfully", _typed("string")),
                    (400, "Invalid input, order not created", None),
                    _SERVER_ERROR,
                ),
                body="Order",
            )
        },
        f"{BASE_PATH}/pending": {
            "get": _operation(
                "Get all pending orders",
                "Retrieve a list of orders that are pending delivery",
                _responses((200, "List of pending orders", _order_list()), _SERVER_ERROR),
                operation_id="getPendingOrders",
            )
        },
        f"{BASE_PATH}/delivered": {
            "get": _operation(
                "Get all delivered orders",
                "Retrieve a list of orders that have been delivered.",
                _responses((200, "List of delivered orders", _order_list()), _SERVER_ERROR),
                operation_id="getDeliveredOrders",
            )
        },
        f"{BASE_PATH}/changeState": {
            "get": _operation(
                "Change the state of an order",
                "Change the state of an order (e.g., from pending to delivered).",
                _responses(
                    (200, "Order state changed successfully", _typed("string")),
                    (400, "Invalid state or orderId", None),
                    _NOT_FOUND,
                    _SERVER_ERROR,
                ),
                operation_id="changeOrderState",
                parameters=[order_id_query, state_query],
            )
        },
        f"{BASE_PATH}/changeAddress/{{id}}": {
            "post": _operation(
                "Change the delivery address of an order",
                "Update the delivery address of an existing order using the "
                "order's unique ID.",
                _responses(
                    (200, "Address changed successfully", _typed("string")),
                    (400, "Invalid input, unable to change address", None),
                    _NOT_FOUND,
                    _SERVER_ERROR,
                ),
                operation_id="changeAddress",
                parameters=[order_id_path],
                body="Address",
            )
        },
    }
    schemas = {
        "Status": _status_schema(),
        "Address": _address_schema(),
        "Order": _obj(
            orderId=_typed("string"),
            OrderDate=_typed("string"),
            OrderTotal=_typed("number"),
            Status=_status_schema(),
            Address=_address_schema(),
        ),
    }
    return {
        "openapi": "3.0.0",
        "info": {"title": TITLE, "description": DESCRIPTION, "version": VERSION},
        "paths": paths,
        "components": {"schemas": schemas},
    }


_SPEC: dict[str, Any] = _build()


def openapi_spec() -> dict[str, Any]:
    """A fresh copy of the producer API's OpenAPI document."""
    return copy.deepcopy(_SPEC)