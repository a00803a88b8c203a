"""API route handlers."""

from api.routes import health, sim

__all__ = ["health", "sim"]
