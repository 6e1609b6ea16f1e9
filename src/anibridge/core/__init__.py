"""Core title resolution logic (no I/O)."""
