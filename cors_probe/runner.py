"""Battery runner dispatching each test case as an independent exchange."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from cors_probe.classification import (
    classify_error,
    classify_success,
    extract_cors_headers,
)
from cors_probe.models.case import TestCaseSpec
from cors_probe.models.result import TestResult
from cors_probe.transport.base import HttpTransport, TransportError

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Exchange:
    """Context captured when a test case is dispatched.

    Completion handlers only ever consult this object, never the runner's
    current catalog, so a late completion can tell which run it belongs to.
    """

    generation: int
    case: TestCaseSpec


@dataclass(kw_only=True)
class BatteryRunner:
    """Runs a test catalog against a transport and tracks per-test results.

    Each call to start() begins a new run generation. Results of a previous
    run are discarded immediately and any of its exchanges that are still in
    flight are ignored when they complete.
    """

    transport: HttpTransport

    _generation: int = field(default=0, init=False)
    _results: dict[str, TestResult] = field(default_factory=dict, init=False)
    _in_progress: bool = field(default=False, init=False)
    _completed: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _tasks: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False
    )

    @property
    def generation(self) -> int:
        """Generation of the latest run (0 before the first run)."""
        return self._generation

    @property
    def in_progress(self) -> bool:
        """Whether the latest run still has pending results."""
        return self._in_progress

    @property
    def results(self) -> Mapping[str, TestResult]:
        """Snapshot of the latest run's results, in catalog order."""
        return dict(self._results)

    def start(self, catalog: Sequence[TestCaseSpec]) -> int:
        """Start a new run and dispatch every test case without waiting.

        Must be called from within a running event loop.

        Returns:
            The generation of the new run

        Raises:
            ValueError: If two test cases share an id

        """
        results = {case.id: TestResult(status="pending") for case in catalog}
        if len(results) != len(catalog):
            raise ValueError("Test case ids must be unique within a catalog")

        self._generation += 1
        generation = self._generation
        self._results = results
        self._in_progress = True
        # Wake waiters of a superseded run so they follow the new one
        self._completed.set()
        self._completed = asyncio.Event()

        log.info("Dispatching %d test(s) for run %d", len(catalog), generation)
        for case in catalog:
            exchange = Exchange(generation=generation, case=case)
            task = asyncio.create_task(
                self._execute(exchange), name=f"cors-probe-{generation}-{case.id}"
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        self._check_complete()
        return generation

    async def wait(self) -> Mapping[str, TestResult]:
        """Wait until the latest run has no pending results and return them."""
        while self._in_progress:
            await self._completed.wait()
        return self.results

    async def run(self, catalog: Sequence[TestCaseSpec]) -> Mapping[str, TestResult]:
        """Run all test cases and wait for every result to be terminal.

        Args:
            catalog: Test cases to execute

        Returns:
            Terminal results mapped by test case id

        """
        self.start(catalog)
        return await self.wait()

    async def shutdown(self) -> None:
        """Cancel exchanges that are still outstanding."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _execute(self, exchange: Exchange) -> None:
        """Perform one exchange and record its terminal result."""
        case = exchange.case
        loop = asyncio.get_running_loop()
        started = loop.time()

        try:
            response = await self.transport.request(
                case.method,
                case.endpoint,
                headers=case.request_headers or {},
                body=case.request_body,
            )
        except TransportError as exc:
            result = TestResult(
                status="error",
                status_code=exc.status_code,
                duration_ms=_elapsed_ms(loop, started),
                message=classify_error(exc.status_code, exc.message),
            )
        except Exception as exc:
            log.error("Test %s failed unexpectedly: %s", case.id, exc, exc_info=exc)
            result = TestResult(
                status="error",
                duration_ms=_elapsed_ms(loop, started),
                message=str(exc) or type(exc).__name__,
            )
        else:
            result = TestResult(
                status="success",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(loop, started),
                message=classify_success(case.method, response.body),
                cors_headers=extract_cors_headers(response.headers),
                response_body=response.body,
            )

        self._apply(exchange, result)

    def _apply(self, exchange: Exchange, result: TestResult) -> None:
        """Store a terminal result unless its run has been superseded."""
        case_id = exchange.case.id
        if exchange.generation != self._generation:
            log.debug(
                "Discarding result of %s from superseded run %d",
                case_id,
                exchange.generation,
            )
            return

        if self._results[case_id].is_terminal:
            log.warning("Ignoring duplicate completion for %s", case_id)
            return

        self._results[case_id] = result
        log.info(
            "Test completed: id=%s status=%s code=%d duration=%dms",
            case_id,
            result.status,
            result.status_code,
            result.duration_ms,
        )
        self._check_complete()

    def _check_complete(self) -> None:
        if all(result.is_terminal for result in self._results.values()):
            self._in_progress = False
            self._completed.set()
            log.info("Run %d completed", self._generation)


def _elapsed_ms(loop: asyncio.AbstractEventLoop, started: float) -> int:
    return round((loop.time() - started) * 1000)
