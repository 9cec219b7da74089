"""Models for test execution results."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias

TestStatus: TypeAlias = Literal["pending", "success", "error"]


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Outcome of a single test case within a run.

    Contains only the execution outcome - the caller pairs it with its
    test case by id.
    """

    __test__ = False

    status: TestStatus
    status_code: int = 0
    duration_ms: int = 0
    message: str | None = None
    cors_headers: Mapping[str, str] = field(default_factory=dict)
    response_body: Any = None

    @property
    def is_terminal(self) -> bool:
        """Whether the result has left the pending state."""
        return self.status != "pending"
