"""Delivery tracking services: an order producer, an order consumer and an order store."""

__version__ = "1.0.0"