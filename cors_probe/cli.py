"""CLI entry point for the CORS probe battery."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from cors_probe.catalog import build_catalog
from cors_probe.config import ProbeConfig
from cors_probe.models.case import TestCaseSpec
from cors_probe.models.result import TestResult
from cors_probe.runner import BatteryRunner
from cors_probe.transport import open_transport

STATUS_SYMBOLS = {
    "success": "✅",
    "error": "❌",
    "pending": "⏳",
}

TEST_GROUPS: Mapping[str, Sequence[str]] = {
    "Simple Requests (No Preflight)": (
        "simple-get-search",
        "simple-get-record",
        "simple-head",
        "simple-options",
    ),
    "Requests That Trigger Preflight (Allowed Headers)": (
        "get-content-type",
        "get-authorization",
        "post-json",
    ),
    "Requests That Trigger Preflight (Blocked)": ("get-custom-header",),
    "Write Operations (Require Auth)": ("post-simple", "put-json", "delete"),
}

UNGROUPED = "Other"


def group_of(test_id: str) -> str:
    """Return the display group a test case belongs to."""
    for group, ids in TEST_GROUPS.items():
        if test_id in ids:
            return group
    return UNGROUPED


def group_catalog(
    catalog: Sequence[TestCaseSpec],
) -> Mapping[str, Sequence[TestCaseSpec]]:
    """Group test cases for display, keeping catalog order within a group."""
    groups: dict[str, list[TestCaseSpec]] = {group: [] for group in TEST_GROUPS}
    for case in catalog:
        groups.setdefault(group_of(case.id), []).append(case)
    return {group: cases for group, cases in groups.items() if cases}


def _pending() -> TestResult:
    return TestResult(status="pending")


def log_results_summary(
    log: logging.Logger,
    catalog: Sequence[TestCaseSpec],
    results: Mapping[str, TestResult],
) -> None:
    """Log a grouped summary of test results with CORS headers."""
    log.info("=" * 80)
    log.info("CORS Test Results:")
    log.info("=" * 80)

    for group, cases in group_catalog(catalog).items():
        log.info("%s", group.upper())
        for case in cases:
            result = results.get(case.id) or _pending()
            symbol = STATUS_SYMBOLS.get(result.status, "?")
            log.info(
                "%s %s %s: %s (status %d, %dms)",
                symbol,
                case.method,
                case.name,
                result.status,
                result.status_code,
                result.duration_ms,
            )
            if case.expected_preflight_reason:
                log.info("  Triggers preflight: %s", case.expected_preflight_reason)
            if result.message:
                log.info("  Message: %s", result.message)
            for name, value in result.cors_headers.items():
                log.info("  %s: %s", name, value)


def format_output(
    catalog: Sequence[TestCaseSpec], results: Mapping[str, TestResult]
) -> dict[str, Any]:
    """Format test results for JSON output."""
    all_results: list[dict[str, Any]] = []
    for case in catalog:
        result = results.get(case.id) or _pending()
        all_results.append(
            {
                "id": case.id,
                "group": group_of(case.id),
                "name": case.name,
                "method": case.method,
                "endpoint": case.endpoint,
                "expected_preflight_reason": case.expected_preflight_reason,
                "status": result.status,
                "status_code": result.status_code,
                "duration_ms": result.duration_ms,
                "message": result.message,
                "cors_headers": dict(result.cors_headers),
            }
        )

    return {
        "total": len(all_results),
        "succeeded": sum(1 for r in all_results if r["status"] == "success"),
        "errors": sum(1 for r in all_results if r["status"] == "error"),
        "pending": sum(1 for r in all_results if r["status"] == "pending"),
        "results": all_results,
    }


async def run(
    search_term: str,
    config_json: str = "{}",
    *,
    fail_on_error: bool = False,
) -> int:
    """Run the CORS test battery and return exit code."""
    log = logging.getLogger("cors_probe")

    config = ProbeConfig(**json.loads(config_json))
    catalog = build_catalog(search_term, config.record_id, config.api_base)

    log.info(
        "Running %d CORS test(s) against %s (origin=%s, enforce_cors=%s)",
        len(catalog),
        config.api_base,
        config.origin,
        config.enforce_cors,
    )

    async with open_transport(config) as transport:
        runner = BatteryRunner(transport=transport)
        runner.start(catalog)
        try:
            results = await asyncio.wait_for(runner.wait(), timeout=config.timeout)
        except TimeoutError:
            log.warning(
                "Tests did not complete within %s seconds, cancelling", config.timeout
            )
            results = runner.results
        finally:
            await runner.shutdown()

    log_results_summary(log, catalog, results)

    output = format_output(catalog, results)
    print(json.dumps(output, indent=2))

    if output["pending"]:
        return 1
    if fail_on_error and output["errors"]:
        return 1
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Probe which request shapes pass a remote API's CORS policy"
    )
    parser.add_argument(
        "--query",
        default="Harvard",
        help="Search term for the organization search requests",
    )
    parser.add_argument(
        "--config",
        default="{}",
        help="JSON configuration (api_base, record_id, origin, enforce_cors, ...)",
    )
    parser.add_argument(
        "--fail-on-error",
        action="store_true",
        help="Exit with code 1 when any test ends in error",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            search_term=args.query,
            config_json=args.config,
            fail_on_error=args.fail_on_error,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
