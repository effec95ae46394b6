from .service import CompatibilityService

__all__ = ["CompatibilityService"]
