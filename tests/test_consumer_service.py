import threading

import pytest

from parceltrack.consumer_service import OrderConsumer, create_app, view_for_state
from parceltrack.messaging import MemoryBroker, Message
from parceltrack.models import Address, Order, Status

ORDER_JSON = {
    "OrderId": "1001",
    "OrderDate": "15-08-2024 15:04:05",
    "OrderTotal": 234.55,
    "Status": {"State": "placed", "StatusDate": "15-08-2024 15:04:05"},
    "Address": {"City": "bangalore", "State": "karnataka", "Pincode": 560037},
}


def make_order(order_id="1001", state="placed"):
    return Order(
        order_id=order_id,
        order_date="15-08-2024 15:04:05",
        order_total=234.55,
        status=Status(state=state, status_date="15-08-2024 15:04:05"),
        address=Address(city="bangalore", state="karnataka", pincode=560037),
    )


class FakeClient:
    def __init__(self, orders=None):
        self.records = dict(orders or {})
        self.upserted = []

    def upsert(self, order):
        self.upserted.append(order)
        self.records[order.order_id] = order
        return True

    def fetch_all(self):
        return dict(self.records)

    def fetch(self, key):
        return self.records.get(key, Order())


class BrokerTransport:
    """Reads one topic of a MemoryBroker and sets stop when it runs dry."""

    def __init__(self, broker, topic, stop):
        self.broker = broker
        self.topic = topic
        self.stop = stop

    def poll(self, timeout=0.1):
        message = self.broker.poll(self.topic, 0)
        if message is None:
            self.stop.set()
        return message


@pytest.fixture
def template_dir(tmp_path):
    for name in ("placed.html", "out.html", "delivered.html", "shipped.html"):
        (tmp_path / name).write_text(
            f"<h1>{name}</h1><p>{{{{ id }}}} {{{{ status }}}} {{{{ total }}}} "
            "{{ city }} {{ pincode }}</p>"
        )
    return tmp_path


@pytest.mark.parametrize(
    "state,view",
    [
        ("placed", "placed.html"),
        ("out-for-delivery", "out.html"),
        ("delivered", "delivered.html"),
        ("shipped", "shipped.html"),
        ("", "shipped.html"),
        ("Delivered", "shipped.html"),
    ],
)
def test_view_for_state(state, view):
    assert view_for_state(state) == view


def test_get_order(template_dir):
    client = FakeClient({"1001": make_order()})
    response = create_app(client, template_dir).test_client().get("/consumer/order/1001")
    assert response.status_code == 200
    assert response.get_json() == ORDER_JSON


def test_get_order_unknown_gives_empty_order(template_dir):
    client = FakeClient({"1001": make_order()})
    response = create_app(client, template_dir).test_client().get("/consumer/order/1002")
    assert response.status_code == 200
    body = response.get_json()
    assert body["OrderId"] == ""
    assert body["OrderTotal"] == 0


def test_get_status_placed(template_dir):
    client = FakeClient({"1001": make_order(state="placed")})
    response = create_app(client, template_dir).test_client().get("/consumer/status/1001")
    assert response.status_code == 200
    text = response.get_data(as_text=True)
    assert "placed.html" in text
    assert "1001 placed 234.55 bangalore 560037" in text


def test_get_status_delivered(template_dir):
    client = FakeClient({"1001": make_order(state="delivered")})
    response = create_app(client, template_dir).test_client().get("/consumer/status/1001")
    assert response.status_code == 200
    assert "delivered.html" in response.get_data(as_text=True)


def test_get_status_shipped(template_dir):
    client = FakeClient({"1001": make_order(state="shipped")})
    response = create_app(client, template_dir).test_client().get("/consumer/status/1001")
    assert response.status_code == 200
    text = response.get_data(as_text=True)
    assert "shipped.html" in text
    assert "1001 shipped" in text


def test_get_status_out_for_delivery(template_dir):
    client = FakeClient({"1001": make_order(state="out-for-delivery")})
    response = create_app(client, template_dir).test_client().get("/consumer/status/1001")
    assert "out.html" in response.get_data(as_text=True)


def test_get_all_orders(template_dir):
    client = FakeClient({"1001": make_order()})
    response = create_app(client, template_dir).test_client().get("/consumer/orders")
    assert response.status_code == 200
    assert response.get_json() == {"1001": ORDER_JSON}


def test_handle_stores_order():
    client = FakeClient()
    consumer = OrderConsumer(None, client)
    order = make_order("1002", "shipped")
    message = Message("orders", b"1002", order.to_json(), 2)
    assert consumer.handle(message) == order
    assert client.upserted == [order]


def test_handle_skips_malformed_message():
    client = FakeClient()
    consumer = OrderConsumer(None, client)
    assert consumer.handle(Message("orders", b"x", b"not json")) is None
    assert client.upserted == []


def test_run_consumes_until_stopped():
    broker = MemoryBroker()
    stop = threading.Event()
    client = FakeClient()
    orders = [make_order("1001"), make_order("1002", "delivered")]
    for order in orders:
        broker.publish(Message("orders", order.order_id.encode(), order.to_json()))
    broker.publish(Message("other", b"9", make_order("9").to_json()))
    OrderConsumer(BrokerTransport(broker, "orders", stop), client).run(stop)
    assert stop.is_set()
    assert client.upserted == orders
    assert set(client.records) == {"1001", "1002"}


def test_run_returns_at_once_when_already_stopped():
    broker = MemoryBroker()
    stop = threading.Event()
    stop.set()
    client = FakeClient()
    broker.publish(Message("orders", b"1001", make_order().to_json()))
    OrderConsumer(BrokerTransport(broker, "orders", stop), client).run(stop)
    assert client.upserted == []
    assert broker.poll("orders", 0) is not None