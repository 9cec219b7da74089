"""Construction of the transport stack from configuration."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from cors_probe.config import ProbeConfig
from cors_probe.transport.aiohttp_transport import AiohttpTransport
from cors_probe.transport.base import HttpTransport
from cors_probe.transport.cors import CorsEnforcingTransport


@asynccontextmanager
async def open_transport(config: ProbeConfig) -> AsyncGenerator[HttpTransport, None]:
    """Open the HTTP transport, wrapped in the CORS gate when enabled."""
    async with AiohttpTransport.from_config(config) as transport:
        if config.enforce_cors:
            yield CorsEnforcingTransport(inner=transport, origin=config.origin)
        else:
            yield transport
