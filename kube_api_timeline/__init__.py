"""
Kubernetes API Timeline

Builds a consolidated history of the Kubernetes API surface from per-release snapshots.
"""

__version__ = "0.1.0"

from .timeline import TimelineError, create_timeline

__all__ = ["TimelineError", "create_timeline"]
