"""Zone boundary drawing, storage and fare resolution."""

__version__ = "0.1.0"
