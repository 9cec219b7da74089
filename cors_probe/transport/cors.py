"""Transport wrapper applying the browser's CORS checks to every request."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from cors_probe.models.case import HttpMethod
from cors_probe.transport.base import (
    HttpTransport,
    TransportError,
    TransportResponse,
    normalize_headers,
)

log = logging.getLogger(__name__)

SIMPLE_METHODS = frozenset({"GET", "HEAD", "POST"})
SAFELISTED_HEADERS = frozenset(
    {"accept", "accept-language", "content-language", "content-type"}
)
SAFELISTED_CONTENT_TYPES = frozenset(
    {"application/x-www-form-urlencoded", "multipart/form-data", "text/plain"}
)
# A wildcard in Access-Control-Allow-Headers never covers this header
WILDCARD_EXCLUDED_HEADERS = frozenset({"authorization"})


def unsafe_header_names(headers: Mapping[str, str]) -> Sequence[str]:
    """Return the sorted, lower-cased names of non-safelisted headers."""
    names: set[str] = set()
    for name, value in normalize_headers(headers).items():
        if name not in SAFELISTED_HEADERS:
            names.add(name)
        elif name == "content-type":
            mime_type = value.split(";", 1)[0].strip().lower()
            if mime_type not in SAFELISTED_CONTENT_TYPES:
                names.add(name)
    return sorted(names)


def requires_preflight(method: str, headers: Mapping[str, str]) -> bool:
    """Whether a browser would send a preflight before this request."""
    return method not in SIMPLE_METHODS or bool(unsafe_header_names(headers))


def _tokens(value: str | None) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(token.strip() for token in value.split(",") if token.strip())


@dataclass(frozen=True, kw_only=True)
class CorsEnforcingTransport(HttpTransport):
    """Wraps a transport and rejects what a browser at `origin` would block.

    Every rejection is raised as a TransportError with status 0, the same
    signal a browser gives to scripts when CORS refuses a request.
    """

    inner: HttpTransport
    origin: str

    async def request(
        self,
        method: HttpMethod,
        url: str,
        *,
        headers: Mapping[str, str],
        body: Any = None,
    ) -> TransportResponse:
        """Run the preflight when needed, then the request itself."""
        effective = dict(headers)
        if body is not None and "content-type" not in normalize_headers(effective):
            effective["Content-Type"] = "application/json"

        if requires_preflight(method, effective):
            await self._preflight(method, url, unsafe_header_names(effective))

        try:
            response = await self.inner.request(
                method, url, headers={**effective, "Origin": self.origin}, body=body
            )
        except TransportError as exc:
            if exc.status_code and not self._origin_allowed(exc.headers):
                raise self._blocked(
                    method, url, f"HTTP {exc.status_code} without allowed origin"
                ) from exc
            raise

        if not self._origin_allowed(response.headers):
            raise self._blocked(method, url, "response without allowed origin")
        return response

    async def _preflight(
        self, method: str, url: str, request_headers: Sequence[str]
    ) -> None:
        """Send the preflight request and check it permits the actual request."""
        preflight_headers = {
            "Origin": self.origin,
            "Access-Control-Request-Method": method,
        }
        if request_headers:
            preflight_headers["Access-Control-Request-Headers"] = ",".join(
                request_headers
            )

        log.debug(
            "Preflight for %s %s (headers=%s)", method, url, ",".join(request_headers)
        )
        try:
            response = await self.inner.request(
                "OPTIONS", url, headers=preflight_headers
            )
        except TransportError as exc:
            raise self._blocked(
                method, url, f"preflight failed with status {exc.status_code}"
            ) from exc

        if not self._origin_allowed(response.headers):
            raise self._blocked(method, url, "preflight without allowed origin")

        allowed = normalize_headers(response.headers)
        allowed_methods = {
            token.upper()
            for token in _tokens(allowed.get("access-control-allow-methods"))
        }
        if (
            method not in SIMPLE_METHODS
            and method not in allowed_methods
            and "*" not in allowed_methods
        ):
            raise self._blocked(method, url, f"method {method} not allowed")

        allowed_headers = {
            token.lower()
            for token in _tokens(allowed.get("access-control-allow-headers"))
        }
        for name in request_headers:
            if name in allowed_headers:
                continue
            if "*" in allowed_headers and name not in WILDCARD_EXCLUDED_HEADERS:
                continue
            raise self._blocked(method, url, f"header {name} not allowed")

    def _origin_allowed(self, headers: Mapping[str, str]) -> bool:
        allowed = normalize_headers(headers).get("access-control-allow-origin")
        return allowed is not None and allowed.strip() in {"*", self.origin}

    def _blocked(self, method: str, url: str, reason: str) -> TransportError:
        log.info("CORS blocked %s %s: %s", method, url, reason)
        return TransportError(0, f"CORS blocked: {reason}")
