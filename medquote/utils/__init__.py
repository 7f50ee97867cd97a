"""Config and logging helpers."""
