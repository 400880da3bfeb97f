"""Core logic for a documentation hosting service: versions, releases, features, pages and queue helpers."""

__version__ = "0.1.0"