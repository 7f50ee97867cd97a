"""Quote submission state machine and its timers."""
