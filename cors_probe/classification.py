"""Human-readable classification of exchange outcomes."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from cors_probe.models.ror import RorName, RorOrganization, RorSearchResponse
from cors_probe.transport.base import normalize_headers

CORS_HEADERS = (
    "access-control-allow-origin",
    "access-control-allow-methods",
    "access-control-allow-headers",
    "access-control-max-age",
)

DISPLAY_NAME_TYPE = "ror_display"

CORS_BLOCKED_MESSAGE = "CORS blocked - check console for details"

ERROR_MESSAGES: Mapping[int, str] = {
    0: CORS_BLOCKED_MESSAGE,
    403: "Forbidden (authentication required)",
    405: "Method not allowed",
}


def extract_cors_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Pick the CORS response headers, keyed by lower-cased name.

    Headers missing from the response are left out rather than defaulted.
    """
    normalized = normalize_headers(headers)
    return {name: normalized[name] for name in CORS_HEADERS if normalized.get(name)}


def display_name(names: Sequence[RorName] | None) -> str:
    """Resolve the display name of an organization record."""
    names = names or ()
    display = next(
        (n for n in names if DISPLAY_NAME_TYPE in (n.types or ())), None
    )
    if display is not None and display.value:
        return display.value
    if names and names[0].value:
        return names[0].value
    return "Unknown"


def _parse_search(body: Any) -> RorSearchResponse | None:
    try:
        return RorSearchResponse.model_validate(body)
    except ValidationError:
        return None


def _parse_record(body: Any) -> RorOrganization | None:
    try:
        record = RorOrganization.model_validate(body)
    except ValidationError:
        return None
    return record if record.id else None


def classify_success(method: str, body: Any) -> str:
    """Describe a successful exchange; the first matching rule wins."""
    if method == "GET":
        if (search := _parse_search(body)) is not None:
            return f"Found {search.number_of_results} results"
        if (record := _parse_record(body)) is not None:
            return f"Fetched: {display_name(record.names)}"
    if method == "HEAD":
        return "Headers received"
    if method == "OPTIONS":
        return "CORS headers received"
    return "Request completed"


def classify_error(status_code: int, message: str | None = None) -> str:
    """Describe a failed exchange, telling a CORS rejection from an HTTP error."""
    if (known := ERROR_MESSAGES.get(status_code)) is not None:
        return known
    return message or f"Error: {status_code}"
