"""Models for the test cases making up a battery."""

from collections.abc import Mapping
from typing import Any, Literal, TypeAlias

from pydantic import Field

from cors_probe.models.base import Model

HttpMethod: TypeAlias = Literal["GET", "HEAD", "OPTIONS", "POST", "PUT", "DELETE"]


class TestCaseSpec(Model):
    """A single request shape to send against the target API."""

    __test__ = False

    id: str = Field(..., description="Stable key, unique within a catalog")
    name: str = Field(..., description="Human-readable test name")
    description: str = Field(..., description="What the request exercises")
    method: HttpMethod = Field(..., description="HTTP method to issue")
    endpoint: str = Field(..., description="Fully-qualified request URL")
    expected_preflight_reason: str | None = Field(
        default=None,
        description="Why a preflight is expected (None means simple request)",
    )
    request_headers: Mapping[str, str] | None = Field(
        default=None, description="Headers applied verbatim to the request"
    )
    request_body: Mapping[str, Any] | None = Field(
        default=None, description="JSON payload, only for POST/PUT"
    )
