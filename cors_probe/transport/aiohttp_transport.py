"""HTTP transport backed by an aiohttp client session."""

import json
import logging
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from yarl import URL

from cors_probe.config import ProbeConfig
from cors_probe.models.case import HttpMethod
from cors_probe.transport.base import HttpTransport, TransportError, TransportResponse

log = logging.getLogger(__name__)

TEXT_METHODS = frozenset({"HEAD", "OPTIONS"})


def decode_body(method: str, text: str) -> Any:
    """Decode a response body: text for HEAD/OPTIONS, JSON where it parses."""
    if method in TEXT_METHODS:
        return text
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


@dataclass(frozen=True, kw_only=True)
class AiohttpTransport(HttpTransport):
    """Transport issuing real HTTP requests."""

    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: ProbeConfig
    ) -> AsyncGenerator["AiohttpTransport", None]:
        """Create transport with managed session lifecycle."""
        # Timeouts are imposed by the caller around the whole battery
        async with aiohttp.ClientSession(
            headers={"User-Agent": config.user_agent},
            timeout=aiohttp.ClientTimeout(total=None),
        ) as session:
            yield cls(session=session)

    async def request(
        self,
        method: HttpMethod,
        url: str,
        *,
        headers: Mapping[str, str],
        body: Any = None,
    ) -> TransportResponse:
        """Send the request as-is and map the outcome."""
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body

        log.debug("Sending %s %s headers=%s", method, url, dict(headers))
        try:
            async with self.session.request(
                method, URL(url, encoded=True), headers=dict(headers), **kwargs
            ) as response:
                text = await response.text(errors="replace")
                status = response.status
                reason = response.reason
                response_headers = response.headers
        except aiohttp.ClientError as exc:
            log.info("Request %s %s failed: %s", method, url, exc)
            raise TransportError(0, str(exc) or type(exc).__name__) from exc

        if not 200 <= status < 300:
            raise TransportError(status, reason, headers=response_headers)

        return TransportResponse(
            status_code=status,
            headers=response_headers,
            body=decode_body(method, text),
        )
