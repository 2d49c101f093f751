"""Status aggregation and display formatting for result nodes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from specreport.results import Scenario, SpecResult, Status, SuiteResult


@dataclass(frozen=True)
class Summary:
    """Pass/fail/skip counts for a set of specs or scenarios."""

    total: int = 0
    failed: int = 0
    passed: int = 0
    skipped: int = 0


def _status(failed: bool, skipped: bool) -> Status:
    if failed:
        return Status.FAILED
    if skipped:
        return Status.SKIPPED
    return Status.PASSED


def spec_status(spec: SpecResult) -> Status:
    return _status(spec.failed, spec.skipped)


def scenario_status(scenario: Scenario) -> Status:
    return _status(scenario.failed, scenario.skipped)


def _summarize(statuses: Iterable[Status]) -> Summary:
    total = failed = skipped = 0
    for status in statuses:
        total += 1
        if status == Status.FAILED:
            failed += 1
        elif status == Status.SKIPPED:
            skipped += 1
    return Summary(total=total, failed=failed, passed=total - failed - skipped, skipped=skipped)


def summarize_suite(suite: SuiteResult) -> Summary:
    """Count specifications by outcome. A failed spec never counts as skipped."""
    return _summarize(spec_status(s) for s in suite.spec_results)


def summarize_spec(spec: SpecResult) -> Summary:
    """Count a spec's scenarios by outcome, one per table row for table-driven ones."""
    return _summarize(scenario_status(s) for s in spec.scenarios)


def success_rate(summary: Summary) -> float:
    """Percentage of passed entries, rounded to two decimals."""
    if summary.total == 0:
        return 0.0
    return round(100 * summary.passed / summary.total, 2)


def format_time(ms: int) -> str:
    """Format milliseconds as ``Xh Ym Zs``, dropping leading zero units.

    >>> format_time(3_725_000)
    '1h 2m 5s'
    >>> format_time(65_000)
    '1m 5s'
    >>> format_time(0)
    '0s'
    """
    if ms <= 0:
        return "0s"
    total_secs = ms // 1000
    hours, rest = divmod(total_secs, 3600)
    mins, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {mins}m {secs}s"
    if mins:
        return f"{mins}m {secs}s"
    return f"{secs}s"
