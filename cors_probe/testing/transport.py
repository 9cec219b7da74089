"""In-memory transport for exercising the runner without a network."""

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from cors_probe.models.case import HttpMethod
from cors_probe.transport.base import HttpTransport, TransportError, TransportResponse


@dataclass(frozen=True, kw_only=True)
class RecordedRequest:
    """A request received by the fake transport."""

    method: str
    url: str
    headers: Mapping[str, str]
    body: Any = None


Handler: TypeAlias = Callable[[RecordedRequest], TransportResponse | TransportError]


def ok(request: RecordedRequest) -> TransportResponse:
    """Answer every request with an empty 200 response."""
    return TransportResponse(status_code=200)


@dataclass(frozen=True, kw_only=True)
class FakeTransport(HttpTransport):
    """Transport answering each request through a handler function.

    A handler returning a TransportError makes the request raise it.
    """

    handler: Handler = ok
    requests: list[RecordedRequest] = field(default_factory=list)

    async def request(
        self,
        method: HttpMethod,
        url: str,
        *,
        headers: Mapping[str, str],
        body: Any = None,
    ) -> TransportResponse:
        """Record the request and answer it after yielding to the loop."""
        recorded = RecordedRequest(method=method, url=url, headers=headers, body=body)
        self.requests.append(recorded)
        await asyncio.sleep(0)
        outcome = self.handler(recorded)
        if isinstance(outcome, TransportError):
            raise outcome
        return outcome
