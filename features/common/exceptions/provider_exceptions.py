class ProviderError(Exception):
    """Base exception for remote data provider errors."""
    pass

class NetworkError(ProviderError):
    """Raised on transport failures, HTTP error statuses and timeouts."""
    pass

class ParseError(ProviderError):
    """Raised when a provider response has an unexpected shape."""
    pass

class DegenerateQueryError(ValueError):
    """Raised when a query cannot produce a valid bounding box."""
    pass

class WeatherUnavailableError(Exception):
    """Raised when the weather forecast for an aggregate request fails."""
    pass
