"""HTTP transports for the battery runner."""

from cors_probe.transport.aiohttp_transport import AiohttpTransport
from cors_probe.transport.base import (
    HttpTransport,
    TransportError,
    TransportResponse,
)
from cors_probe.transport.cors import CorsEnforcingTransport
from cors_probe.transport.factory import open_transport

__all__ = [
    "AiohttpTransport",
    "CorsEnforcingTransport",
    "HttpTransport",
    "TransportError",
    "TransportResponse",
    "open_transport",
]
