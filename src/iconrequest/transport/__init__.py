"""HTTP transport for the statistics service."""

from iconrequest.transport.client import Response, Transport

__all__ = ["Response", "Transport"]
