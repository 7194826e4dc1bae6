"""Backend abstraction layer for input injection."""
