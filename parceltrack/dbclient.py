"""HTTP client for the order store service."""

from __future__ import annotations

import urllib.error
import urllib.parse
import urllib.request

from . import logs
from .models import Order, orders_from_json

DEFAULT_HOST = "http://dta-consumer1db-service.default.svc.cluster.local:7071"


class OrderDBClient:
    """Reads and writes orders through the store service's HTTP API.

    Network failures are logged and answered with empty results.
    """

    timeout = 10.0

    def __init__(self, host: str = DEFAULT_HOST) -> None:
        self.host = host.rstrip("/")

    def _read(self, url: str) -> bytes | None:
        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as response:
                return response.read()
        except urllib.error.HTTPError as exc:
            with exc:
                return exc.read()
        except (urllib.error.URLError, OSError):
            return None

    def upsert(self, order: Order) -> bool:
        """Store the order under its id; True if the service accepted it."""
        url = self.host + "/db/insert"
        req = urllib.request.Request(
            url,
            data=order.to_json(),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout):
                pass
        except urllib.error.HTTPError as exc:
            exc.close()
            logs.info("unable to insert record in : " + url)
            return False
        except (urllib.error.URLError, OSError):
            logs.info("unable to insert record in : " + url)
            return False
        logs.info("Record Inserted Successfully into : " + url)
        return True

    def fetch_all(self) -> dict[str, Order]:
        """All stored orders by key; empty if the service cannot be reached."""
        url = self.host + "/db/fetch"
        content = self._read(url)
        if content is None:
            logs.info("unable to fetch records from : " + url)
            return {}
        logs.info("Records fetched Successfully from : " + url)
        try:
            return orders_from_json(content)
        except ValueError:
            return {}

    def fetch(self, key: str) -> Order:
        """The order under key; an empty order if it cannot be had."""
        url = self.host + "/db/fetch/" + urllib.parse.quote(key, safe="")
        content = self._read(url)
        if content is None:
            logs.info("unable to fetch record from : " + url)
            return Order()
        logs.info("Record fetched Successfully from : " + url)
        try:
            return Order.from_json(content)
        except ValueError:
            return Order()