"""Helpers for e-paper shelf label tags: structures, messages, transfers, rendering and content."""

__version__ = "0.1.0"

__all__ = [
    "protocol",
    "imaging",
    "messages",
    "transfers",
    "weather",
    "content",
]