# parceltrack

A set of small HTTP services for tracking delivery orders.

- **Producer service** (`parceltrack.producer_service`) keeps the list of
  orders in an `OrderBook`. It accepts new orders, lets you change an
  order's state or delivery address, and publishes every change as an
  event on the `orders` topic.
- **Consumer service** (`parceltrack.consumer_service`) follows the
  `orders` topic, stores each order it receives through the DB service,
  and serves the orders as JSON and as HTML status pages.
- **DB service** (`parceltrack.dbservice`) serves an `OrderStore`, a
  persistent key-value store of orders kept in an SQLite file, over HTTP.

Events travel over ZeroMQ (`ZmqPublisher` / `ZmqSubscriber` in
`parceltrack.messaging`); an in-process `MemoryBroker` is available for
tests and single-process use.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the services

Each service is its own command:

```
parceltrack-db
parceltrack-producer
parceltrack-consumer
```

Start the DB service first, then the consumer, then the producer. The
producer publishes its built-in sample order (`default_orders()`) when it
starts.

All three take `--host` (default `0.0.0.0`), `--port` and `--log-file`.
Beyond those:

| Command                | Default port | Other options                                                        |
|------------------------|--------------|----------------------------------------------------------------------|
| `parceltrack-db`       | 7071         | `--data-dir` (default `tmp/badger`; the database is `orders.sqlite3` inside it) |
| `parceltrack-producer` | 8080         | `--endpoint` to bind the publisher on (default `tcp://*:5556`)       |
| `parceltrack-consumer` | 8081         | `--endpoint` to connect to (default `tcp://localhost:5556`), `--topic` (default `orders`), `--db-host` (URL of the DB service), `--templates` (default `templates`) |

The consumer's default `--db-host` is a cluster-internal address; pass
`--db-host http://localhost:7071` when running everything on one machine.

## HTTP API

### Producer (`/producer`)

| Method | Path                           | Purpose                                       | Status |
|--------|--------------------------------|-----------------------------------------------|--------|
| POST   | `/producer/place`              | Place a new order (JSON `Order` body)         | 202    |
| GET    | `/producer/pending`            | Orders whose state is not `delivered`         | 200    |
| GET    | `/producer/delivered`          | Orders whose state is `delivered`             | 200    |
| GET    | `/producer/changeState`        | Query `id` and `state`: set an order's state  | 202    |
| POST   | `/producer/changeAddress/<id>` | Replace an order's address (JSON `Address`)   | 202    |
| GET    | `/producer/swagger/doc.json`   | OpenAPI description of this API              | 200    |

Placing an order stamps its order date and status date with the current
time in the form `MM-DD-YYYY HH:MM:SS`; state changes stamp a new status
date. The state comparison ignores letter case. An empty list of pending or
delivered orders is returned as JSON `null`. Malformed bodies get a 400.

### Consumer (`/consumer`)

| Method | Path                    | Purpose                            |
|--------|-------------------------|------------------------------------|
| GET    | `/consumer/order/<id>`  | One order as JSON                  |
| GET    | `/consumer/status/<id>` | HTML status page for one order     |
| GET    | `/consumer/orders`      | All stored orders as a JSON object |

The status page template is chosen by `view_for_state`: `placed` →
`placed.html`, `out-for-delivery` → `out.html`, `delivered` →
`delivered.html`, anything else → `shipped.html`. Templates receive `id`,
`orderDate`, `status`, `statusDate`, `total`, `city`, `state` and
`pincode`.

### DB (`/db`)

| Method | Path             | Purpose                                 | Status      |
|--------|------------------|-----------------------------------------|-------------|
| POST   | `/db/insert`     | Insert or replace an order by its id    | 201 / 400   |
| GET    | `/db/fetch/<id>` | Fetch one order                         | 200 / 404   |
| GET    | `/db/fetch`      | Fetch all orders, keyed by order id     | 200         |

## Order format

```json
{
  "OrderId": "1001",
  "OrderDate": "15-08-2024 15:04:05",
  "OrderTotal": 234.55,
  "Status": {"State": "placed", "StatusDate": "15-08-2024 15:04:05"},
  "Address": {"City": "bangalore", "State": "karnataka", "Pincode": 560037}
}
```

Field names are matched without regard to case when decoding; missing
fields take empty defaults. In Python these are the `Order`, `Status` and
`Address` classes in `parceltrack.models`, with `to_dict` / `from_dict` and
`to_json` / `from_json`; `orders_from_json` decodes a key-to-order object.

Events are keyed by order id and carry a partition from
`parceltrack.producer.partition_for` (the id's integer value modulo 5;
non-numeric ids go to partition 0).

## Using the pieces from Python

```python
from parceltrack.messaging import MemoryBroker
from parceltrack.producer import OrderProducer
from parceltrack.producer_service import OrderBook, create_app, default_orders

broker = MemoryBroker()
producer = OrderProducer(broker, "orders")
app = create_app(OrderBook(default_orders()), producer)

message = broker.poll("orders", timeout=0)  # None until something is published
```

`OrderStore` in `parceltrack.store` can be used directly as a context
manager; `fetch` raises `KeyError` for an unknown key and database failures
raise `StoreError`. `OrderDBClient` in `parceltrack.dbclient` talks to a
running DB service and answers network failures with empty results.
`OrderConsumer` in `parceltrack.consumer_service` reads from any transport
with a `poll` method and stores through any client with `upsert`.

## Logging

Each service writes indented JSON log records to its own log file
(`parceltrack.logs.init_logging`), truncated at start; if the file cannot
be created, records go to standard error.

## What is not included

- No status page templates are shipped. The consumer renders
  `placed.html`, `out.html`, `delivered.html` and `shipped.html` from the
  directory given by `--templates`; you must supply them.
- `/producer/swagger/` serves a plain page linking to `doc.json`, not an
  interactive API explorer.