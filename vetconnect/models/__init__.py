"""Models package placeholder."""

__all__ = [
    "kv_entry",
]
