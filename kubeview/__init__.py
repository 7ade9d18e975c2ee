"""Terminal rendering helpers for a Kubernetes fleet dashboard."""

__version__ = "0.1.0"

__all__ = [
    "ansi",
    "theme",
    "sidebar",
    "pods",
    "nodes",
    "namespaces",
    "picker",
    "confirm",
    "logs",
]