import json
from unittest.mock import patch

import pytest
from flask import Flask

from parceltrack.dbservice import create_app, main
from parceltrack.models import Address, Order, Status
from parceltrack.store import OrderStore

ORDER_JSON = (
    '{"OrderId": "1001", "OrderDate": "15-08-2024 15:04:05", "OrderTotal": 234.55, '
    '"Status": {"State": "placed", "StatusDate": "15-08-2024 15:04:05"}, '
    '"Address": {"City": "bangalore", "State": "karnataka", "Pincode": 560037}}'
)


def _order(order_id: str = "1001") -> Order:
    return Order(
        order_id=order_id,
        order_date="15-08-2024 15:04:05",
        order_total=234.55,
        status=Status(state="placed", status_date="15-08-2024 15:04:05"),
        address=Address(city="bangalore", state="karnataka", pincode=560037),
    )


@pytest.fixture
def store(tmp_path):
    with OrderStore(tmp_path / "db") as opened:
        yield opened


@pytest.fixture
def client(store):
    return create_app(store).test_client()


def test_insert_order(client, store):
    response = client.post("/db/insert", data=ORDER_JSON)
    assert response.status_code == 201
    assert json.loads(response.data) == "Record Inserted Successfully"
    assert store.fetch("1001") == _order()


def test_insert_order_replaces_existing(client, store):
    client.post("/db/insert", data=ORDER_JSON)
    changed = _order()
    changed.status = Status(state="delivered", status_date="16-08-2024 10:00:00")
    response = client.post("/db/insert", data=changed.to_json())
    assert response.status_code == 201
    assert store.fetch("1001").status.state == "delivered"
    assert list(store.fetch_all()) == ["1001"]


def test_insert_order_rejects_malformed_json(client, store):
    response = client.post("/db/insert", data="{not json")
    assert response.status_code == 400
    assert isinstance(json.loads(response.data), str)
    assert store.fetch_all() == {}


def test_insert_order_rejects_empty_body(client):
    response = client.post("/db/insert", data=b"")
    assert response.status_code == 400


def test_insert_order_rejects_wrong_field_type(client, store):
    response = client.post("/db/insert", data='{"OrderId": "1001", "OrderTotal": "lots"}')
    assert response.status_code == 400
    assert store.fetch_all() == {}


def test_fetch_order_by_key(client, store):
    store.upsert("1001", _order())
    response = client.get("/db/fetch/1001")
    assert response.status_code == 200
    assert json.loads(response.data) == json.loads(ORDER_JSON)


def test_fetch_order_by_missing_key(client):
    response = client.get("/db/fetch/9999")
    assert response.status_code == 404
    assert "9999" in json.loads(response.data)["error"]


def test_fetch_all_orders(client, store):
    store.upsert("1001", _order())
    response = client.get("/db/fetch")
    assert response.status_code == 200
    assert json.loads(response.data) == {"1001": json.loads(ORDER_JSON)}


def test_fetch_all_orders_empty(client):
    response = client.get("/db/fetch")
    assert response.status_code == 200
    assert json.loads(response.data) == {}


def test_fetch_all_after_inserts(client):
    client.post("/db/insert", data=_order("1001").to_json())
    client.post("/db/insert", data=_order("1002").to_json())
    body = json.loads(client.get("/db/fetch").data)
    assert sorted(body) == ["1001", "1002"]
    assert Order.from_dict(body["1002"]) == _order("1002")


def test_main_runs_app_on_given_port(tmp_path):
    log_file = tmp_path / "service.log"
    with patch.object(Flask, "run") as run:
        result = main(
            [
                "--port",
                "7072",
                "--data-dir",
                str(tmp_path / "data"),
                "--log-file",
                str(log_file),
            ]
        )
    assert result == 0
    run.assert_called_once_with(host="0.0.0.0", port=7072)
    assert log_file.exists()
    assert "logger initialized" in log_file.read_text(encoding="utf-8")