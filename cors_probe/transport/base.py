"""Abstract base class for HTTP transports used by the battery runner."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from cors_probe.models.case import HttpMethod


@dataclass(frozen=True, kw_only=True)
class TransportResponse:
    """A completed exchange with a 2xx status."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None


class TransportError(Exception):
    """Raised when an exchange fails.

    A status code of 0 means the request never produced a readable response,
    either because of a network failure or because the CORS gate refused it.
    """

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code
        self.message = message
        self.headers: Mapping[str, str] = headers or {}


def normalize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of the headers keyed by lower-cased name."""
    return {name.lower(): value for name, value in headers.items()}


@dataclass(frozen=True, kw_only=True)
class HttpTransport(ABC):
    """Abstract base for HTTP transports."""

    @abstractmethod
    async def request(
        self,
        method: HttpMethod,
        url: str,
        *,
        headers: Mapping[str, str],
        body: Any = None,
    ) -> TransportResponse:
        """Issue a single request and return the response.

        Args:
            method: HTTP method
            url: Fully-qualified, already-encoded URL
            headers: Request headers, sent verbatim
            body: Optional JSON payload

        Returns:
            The response for a 2xx status

        Raises:
            TransportError: For non-2xx statuses and failed exchanges

        """
