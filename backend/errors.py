# backend/errors.py


class StyleShiftError(Exception):
    """Base class for every error raised by the service."""


class ConfigurationError(StyleShiftError):
    pass


class InvalidImageError(StyleShiftError, ValueError):
    """The uploaded payload is not an image. Never reaches Gemini."""


class SessionStateError(StyleShiftError):
    """The requested transition is not legal in the current phase."""


class GatewayError(StyleShiftError):
    pass


class ModelDeclinedError(GatewayError):
    """Gemini answered with commentary instead of an image."""

    def __init__(self, text: str, limit: int = 100):
        self.text = text
        super().__init__(f"Model returned text instead of image: {text[:limit]}...")


class EmptyResponseError(GatewayError):
    def __init__(self, message: str = "No image data found in the response."):
        super().__init__(message)


class GatewayTransportError(GatewayError):
    """Network, HTTP status or SDK failure. The cause is chained."""
