"""Exception types raised inside the upload pipeline.

Every error is converted to a message string at the boundary that handles it,
so callers of ``IconRequestSubmitter.submit`` only ever see strings.
"""


class IconRequestError(Exception):
    """Base class for icon request failures."""


class ConfigurationMissing(IconRequestError):
    """Token or endpoint is not configured."""


class TransportFailure(IconRequestError):
    """Connection, timeout or other transport-level failure."""


class ServiceFailure(IconRequestError):
    """The service answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"HTTP {status_code}")


class DecodeFailure(IconRequestError):
    """The icon is unavailable or cannot be encoded."""


class UploadInterrupted(IconRequestError):
    """The fan-out was interrupted while admitting or joining workers."""

    def __init__(self, message: str = "Icon upload interrupted"):
        super().__init__(message)
