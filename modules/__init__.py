"""Helper modules for the print shop dashboard."""

__all__ = [
    "pricing",
    "forms",
]
