from .aml_service import AMLService, AMLProvider

__all__ = [
    "AMLService",
    "AMLProvider",
]
