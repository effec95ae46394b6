from .service import FareResolutionService, clean_destination_name

__all__ = ["FareResolutionService", "clean_destination_name"]
