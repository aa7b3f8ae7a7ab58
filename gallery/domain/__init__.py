"""Domain types and pure helpers (no I/O)."""
