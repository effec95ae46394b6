"""API routers."""

from . import boundaries, compatibility, fares, health

__all__ = ["boundaries", "compatibility", "fares", "health"]
