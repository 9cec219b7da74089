"""Tests for outcome classification."""

from typing import Any

import pytest

from cors_probe.classification import (
    classify_error,
    classify_success,
    display_name,
    extract_cors_headers,
)
from cors_probe.models.ror import RorName
from cors_probe.testing.payloads import name_entry, organization, search_response


class TestExtractCorsHeaders:
    """Tests for extract_cors_headers."""

    def test_only_present_headers_are_kept(self) -> None:
        """A response with only allow-origin yields a single key."""
        headers = {"Access-Control-Allow-Origin": "*", "Content-Type": "text/html"}

        assert extract_cors_headers(headers) == {"access-control-allow-origin": "*"}

    def test_all_four_headers_lower_cased(self) -> None:
        """The four CORS headers are picked case-insensitively."""
        headers = {
            "ACCESS-CONTROL-ALLOW-ORIGIN": "https://app.test",
            "access-control-allow-methods": "GET, POST",
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Max-Age": "600",
            "Access-Control-Expose-Headers": "X-Total",
        }

        assert extract_cors_headers(headers) == {
            "access-control-allow-origin": "https://app.test",
            "access-control-allow-methods": "GET, POST",
            "access-control-allow-headers": "Content-Type",
            "access-control-max-age": "600",
        }

    def test_no_cors_headers(self) -> None:
        """Returns an empty mapping when none are present."""
        assert extract_cors_headers({"Server": "nginx"}) == {}


class TestDisplayName:
    """Tests for display_name."""

    def test_prefers_display_typed_name(self) -> None:
        """Picks the ror_display name even when it is not first."""
        names = [
            RorName(value="Harvard", types=["alias"]),
            RorName(value="Harvard University", types=["label", "ror_display"]),
        ]

        assert display_name(names) == "Harvard University"

    def test_falls_back_to_first_name(self) -> None:
        """Uses the first name when none is display-typed."""
        names = [RorName(value="Alt", types=["alias"]), RorName(value="Other")]

        assert display_name(names) == "Alt"

    def test_unknown_without_names(self) -> None:
        """Returns Unknown for an empty name list."""
        assert display_name([]) == "Unknown"


class TestClassifySuccess:
    """Tests for classify_success."""

    def test_search_result_count(self) -> None:
        """GET search responses report the result count."""
        body = {"number_of_results": 3, "items": [{}, {}, {}]}

        assert classify_success("GET", body) == "Found 3 results"

    def test_search_with_zero_results(self) -> None:
        """A zero count still counts as a search response."""
        assert classify_success("GET", search_response(items=[])) == "Found 0 results"

    def test_record_with_display_name(self) -> None:
        """GET record responses report the display name."""
        body = {
            "id": "https://ror.org/03vek6s52",
            "names": [{"value": "Harvard University", "types": ["ror_display"]}],
        }

        assert classify_success("GET", body) == "Fetched: Harvard University"

    def test_record_falls_back_to_first_name(self) -> None:
        """Records without a display-typed name use the first name."""
        body = {"id": "x", "names": [{"value": "Alt", "types": ["alias"]}]}

        assert classify_success("GET", body) == "Fetched: Alt"

    def test_record_without_names(self) -> None:
        """Records without names are reported as Unknown."""
        assert classify_success("GET", {"id": "x"}) == "Fetched: Unknown"

    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            (
                {"id": "x", "names": [{"value": "Alt", "types": None}]},
                "Fetched: Alt",
            ),
            ({"id": "x", "names": None}, "Fetched: Unknown"),
            ({"id": "x", "names": [{"types": ["ror_display"]}]}, "Fetched: Unknown"),
            ({"number_of_results": 3, "items": None}, "Found 3 results"),
            ({"number_of_results": 2}, "Found 2 results"),
        ],
    )
    def test_tolerates_missing_or_null_fields(
        self, body: dict[str, Any], expected: str
    ) -> None:
        """Null or missing optional fields do not lose the classification."""
        assert classify_success("GET", body) == expected

    def test_realistic_record_payload(self) -> None:
        """Full ROR records are understood."""
        body = organization(names=[name_entry("Stanford", "alias")])

        assert classify_success("GET", body) == "Fetched: Stanford"

    def test_head(self) -> None:
        """HEAD with an empty body reports headers received."""
        assert classify_success("HEAD", "") == "Headers received"

    def test_options(self) -> None:
        """OPTIONS reports CORS headers received."""
        assert classify_success("OPTIONS", "") == "CORS headers received"

    @pytest.mark.parametrize(
        ("method", "body"),
        [
            ("POST", search_response()),
            ("PUT", organization()),
            ("DELETE", None),
            ("GET", None),
            ("GET", "<html>not json</html>"),
            ("GET", {"id": ""}),
            ("GET", {"number_of_results": "many"}),
            ("GET", {"id": "x", "names": "not-a-list"}),
            ("GET", [1, 2, 3]),
        ],
    )
    def test_falls_back_to_request_completed(self, method: str, body: Any) -> None:
        """Unrecognized combinations degrade without raising."""
        assert classify_success(method, body) == "Request completed"


class TestClassifyError:
    """Tests for classify_error."""

    @pytest.mark.parametrize(
        ("status_code", "message", "expected"),
        [
            (0, None, "CORS blocked - check console for details"),
            (
                0,
                "CORS blocked: header x not allowed",
                "CORS blocked - check console for details",
            ),
            (403, "Forbidden", "Forbidden (authentication required)"),
            (405, None, "Method not allowed"),
            (500, "Internal Server Error", "Internal Server Error"),
            (500, None, "Error: 500"),
            (404, "", "Error: 404"),
        ],
    )
    def test_classifies_by_priority(
        self, status_code: int, message: str | None, expected: str
    ) -> None:
        """Maps status codes to messages in priority order."""
        assert classify_error(status_code, message) == expected
