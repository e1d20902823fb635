"""Shared helpers (merging, atomic file I/O)."""
