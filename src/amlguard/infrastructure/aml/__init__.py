from .provider_client import AMLProviderClient, ProviderResponse

__all__ = ["AMLProviderClient", "ProviderResponse"]
