"""Items API — CRUD over a single items table with a connection monitor."""

__version__ = "1.0.0"
