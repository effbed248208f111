"""Publish npm packages with version bump, changelog and rollback."""

__version__ = "0.3.0"
