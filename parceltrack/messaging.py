"""Topic messaging between the order services."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass

import zmq


@dataclass(frozen=True)
class Message:
    """A keyed record published on a topic partition."""

    topic: str
    key: bytes
    value: bytes
    partition: int = 0


class MemoryBroker:
    """In-process broker; subscribers of a topic share its queue."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._queues: dict[str, queue.Queue[Message]] = {}

    def _queue(self, topic: str) -> queue.Queue[Message]:
        with self._lock:
            return self._queues.setdefault(topic, queue.Queue())

    def publish(self, message: Message) -> None:
        self._queue(message.topic).put(message)

    def poll(self, topic: str, timeout: float = 0.1) -> Message | None:
        """Next message on topic, or None if none arrives within timeout seconds."""
        pending = self._queue(topic)
        try:
            if timeout <= 0:
                return pending.get_nowait()
            return pending.get(timeout=timeout)
        except queue.Empty:
            return None


def _encode(message: Message) -> list[bytes]:
    return [
        message.topic.encode("utf-8"),
        bytes(message.key),
        bytes(message.value),
        str(message.partition).encode("ascii"),
    ]


def _decode(frames: list[bytes]) -> Message | None:
    if len(frames) != 4:
        return None
    topic, key, value, partition = frames
    try:
        return Message(topic.decode("utf-8"), key, value, int(partition))
    except (UnicodeDecodeError, ValueError):
        return None


class ZmqPublisher:
    """Publishes messages on a bound ZeroMQ PUB socket."""

    def __init__(self, endpoint: str) -> None:
        self._socket = zmq.Context.instance().socket(zmq.PUB)
        self._socket.bind(endpoint)
        last = self._socket.getsockopt(zmq.LAST_ENDPOINT)
        self.endpoint = last.decode() if last else endpoint

    def publish(self, message: Message) -> None:
        self._socket.send_multipart(_encode(message))

    def close(self) -> None:
        self._socket.close(linger=0)


class ZmqSubscriber:
    """Receives messages of one topic from a ZeroMQ publisher."""

    def __init__(self, endpoint: str, topic: str) -> None:
        self.topic = topic
        self._socket = zmq.Context.instance().socket(zmq.SUB)
        self._socket.setsockopt(zmq.SUBSCRIBE, topic.encode("utf-8"))
        self._socket.connect(endpoint)

    def poll(self, timeout: float = 0.1) -> Message | None:
        """Next message on the topic, or None if none arrives within timeout seconds."""
        deadline = time.monotonic() + max(timeout, 0.0)
        while True:
            remaining = max(deadline - time.monotonic(), 0.0)
            if not self._socket.poll(int(remaining * 1000)):
                return None
            message = _decode(self._socket.recv_multipart())
            if message is not None and message.topic == self.topic:
                return message

    def close(self) -> None:
        self._socket.close(linger=0)