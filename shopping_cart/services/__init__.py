"""Shared services: money helpers, models and repositories."""
