"""CHRONICLE

A small event-sourcing persistence toolkit. Documents derive their state by
replaying an append-only event stream, and a repository loads, tracks, and
saves them under optimistic concurrency control.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
