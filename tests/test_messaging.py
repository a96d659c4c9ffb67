import time
import uuid

import pytest

from parceltrack.messaging import MemoryBroker, Message, ZmqPublisher, ZmqSubscriber


def _message(key=b"1001", topic="orders", partition=1):
    return Message(topic=topic, key=key, value=b'{"OrderId":"' + key + b'"}', partition=partition)


def test_memory_round_trip():
    broker = MemoryBroker()
    message = _message()
    broker.publish(message)
    assert broker.poll("orders", 0.1) == message


def test_memory_keeps_order():
    broker = MemoryBroker()
    sent = [_message(key) for key in (b"1001", b"1002", b"1003")]
    for message in sent:
        broker.publish(message)
    received = [broker.poll("orders", 0.1) for _ in sent]
    assert received == sent


def test_memory_topics_are_separate():
    broker = MemoryBroker()
    broker.publish(_message(topic="other"))
    assert broker.poll("orders", 0) is None
    assert broker.poll("other", 0).topic == "other"


def test_memory_poll_waits_for_timeout():
    broker = MemoryBroker()
    started = time.monotonic()
    result = broker.poll("orders", 0.05)
    assert result is None
    assert time.monotonic() - started >= 0.04


@pytest.fixture
def zmq_pair():
    endpoint = f"inproc://parceltrack-{uuid.uuid4().hex}"
    publisher = ZmqPublisher(endpoint)
    subscriber = ZmqSubscriber(publisher.endpoint, "orders")
    yield publisher, subscriber
    subscriber.close()
    publisher.close()


def _exchange(publisher, subscriber, messages, attempts=100):
    for _ in range(attempts):
        for message in messages:
            publisher.publish(message)
        received = subscriber.poll(0.05)
        if received is not None:
            return received
    raise AssertionError("no message delivered")


def test_zmq_round_trip(zmq_pair):
    publisher, subscriber = zmq_pair
    message = _message(partition=3)
    assert _exchange(publisher, subscriber, [message]) == message


def test_zmq_ignores_topics_sharing_a_prefix(zmq_pair):
    publisher, subscriber = zmq_pair
    wanted = _message(b"1002")
    received = _exchange(publisher, subscriber, [_message(topic="orders2"), wanted])
    assert received == wanted


def test_zmq_poll_times_out(zmq_pair):
    _, subscriber = zmq_pair
    started = time.monotonic()
    result = subscriber.poll(0.05)
    assert result is None
    assert time.monotonic() - started >= 0.04