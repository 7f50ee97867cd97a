"""Adapters for files and external data: the durable store and the catalog."""
