"""JSON file key-value store standing in for browser storage."""
