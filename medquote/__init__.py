"""Medicine catalog with a durable "request a quote" cart."""

__version__ = "0.1.0"
