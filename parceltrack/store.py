"""Persistent key-value storage of orders."""

from __future__ import annotations

import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from . import logs
from .models import Order

RECORD_INSERTED = "Record Inserted Successfully"

_DB_FILE = "orders.sqlite3"


class StoreError(Exception):
    """Raised when the underlying database fails."""


class OrderStore:
    """Orders kept under their keys in a database inside a directory."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.path / _DB_FILE, check_same_thread=False)
            with self._conn:
                self._conn.execute(
                    "CREATE TABLE IF NOT EXISTS orders (key TEXT PRIMARY KEY, value BLOB NOT NULL)"
                )
        except (OSError, sqlite3.Error) as exc:
            logs.info("unable to open db")
            raise StoreError(str(exc)) from exc
        logs.info("db opened successfully")

    @contextmanager
    def _guard(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                yield self._conn
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc

    def upsert(self, key: str, order: Order) -> None:
        """Insert the order under key, replacing any earlier value."""
        with self._guard() as conn, conn:
            conn.execute(
                "INSERT OR REPLACE INTO orders (key, value) VALUES (?, ?)",
                (key, order.to_json()),
            )
        logs.info(RECORD_INSERTED)

    def fetch_all(self) -> dict[str, Order]:
        """All stored orders, in key order."""
        with self._guard() as conn:
            rows = conn.execute("SELECT key, value FROM orders ORDER BY key").fetchall()
        orders = {key: Order.from_json(value) for key, value in rows}
        logs.info("All records fetched successfully")
        return orders

    def fetch(self, key: str) -> Order:
        """The order stored under key; KeyError if there is none."""
        with self._guard() as conn:
            row = conn.execute("SELECT value FROM orders WHERE key = ?", (key,)).fetchone()
        if row is None:
            raise KeyError(key)
        logs.info("Records fetched successfully with key : " + key)
        return Order.from_json(row[0])

    def close(self) -> None:
        with self._guard() as conn:
            conn.close()

    def __enter__(self) -> OrderStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()