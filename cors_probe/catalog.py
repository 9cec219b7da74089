"""Fixed battery of request shapes probing a server's CORS configuration."""

from collections.abc import Sequence
from urllib.parse import quote

from cors_probe.models.case import TestCaseSpec

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_."
_URI_COMPONENT_SAFE = "!~*'()"

JSON_HEADERS = {"Content-Type": "application/json"}
SAMPLE_BODY = {"test": "data"}


def encode_component(value: str) -> str:
    """Percent-encode a value for use as a single URL component."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_catalog(
    search_term: str, target_record_id: str, api_base: str
) -> Sequence[TestCaseSpec]:
    """Build the ordered test catalog for a search term and target record.

    The result depends only on the arguments. An empty search term is
    accepted and produces an empty query.

    Args:
        search_term: Term sent to the organization search endpoint
        target_record_id: Record identifier used by the single-record tests
        api_base: Base URL of the target API, without trailing slash

    Returns:
        Test case specifications in display order

    """
    search_url = f"{api_base}/organizations?query={encode_component(search_term)}"
    record_url = f"{api_base}/organizations/{encode_component(target_record_id)}"

    return (
        # Simple requests
        TestCaseSpec(
            id="simple-get-search",
            name="GET Search",
            method="GET",
            endpoint=search_url,
            description="Simple GET request to search endpoint",
        ),
        TestCaseSpec(
            id="simple-get-record",
            name="GET Record",
            method="GET",
            endpoint=record_url,
            description="Simple GET request to fetch single record",
        ),
        TestCaseSpec(
            id="simple-head",
            name="HEAD Request",
            method="HEAD",
            endpoint=search_url,
            description="HEAD request (like GET but no body)",
        ),
        TestCaseSpec(
            id="simple-options",
            name="OPTIONS Request",
            method="OPTIONS",
            endpoint=search_url,
            description="Explicit OPTIONS request to check CORS headers",
        ),
        # Preflight with allowed headers
        TestCaseSpec(
            id="get-content-type",
            name="GET + Content-Type",
            method="GET",
            endpoint=search_url,
            description="GET with Content-Type header (allowed)",
            expected_preflight_reason="Content-Type header",
            request_headers=JSON_HEADERS,
        ),
        TestCaseSpec(
            id="get-authorization",
            name="GET + Authorization",
            method="GET",
            endpoint=search_url,
            description="GET with Authorization header (allowed)",
            expected_preflight_reason="Authorization header",
            request_headers={"Authorization": "Bearer test-token"},
        ),
        TestCaseSpec(
            id="post-json",
            name="POST + JSON",
            method="POST",
            endpoint=search_url,
            description="POST with Content-Type: application/json",
            expected_preflight_reason="Content-Type: application/json",
            request_headers=JSON_HEADERS,
            request_body=SAMPLE_BODY,
        ),
        # Preflight expected to be blocked
        TestCaseSpec(
            id="get-custom-header",
            name="GET + Custom Header (Blocked)",
            method="GET",
            endpoint=search_url,
            description="GET with X-Custom-Header (not in allowed list)",
            expected_preflight_reason=(
                "Custom header not in Access-Control-Allow-Headers"
            ),
            request_headers={"X-Custom-Header": "test-value"},
        ),
        # Write operations
        TestCaseSpec(
            id="post-simple",
            name="POST Simple",
            method="POST",
            endpoint=search_url,
            description="Simple POST (no custom headers)",
        ),
        TestCaseSpec(
            id="put-json",
            name="PUT + JSON",
            method="PUT",
            endpoint=record_url,
            description="PUT request with JSON body",
            expected_preflight_reason="PUT method + JSON content",
            request_headers=JSON_HEADERS,
            request_body=SAMPLE_BODY,
        ),
        TestCaseSpec(
            id="delete",
            name="DELETE",
            method="DELETE",
            endpoint=record_url,
            description="DELETE request",
            expected_preflight_reason="DELETE method",
        ),
    )
