"""Error codes reported by the specreport CLI.

Every failure the CLI reports carries an ``SR-Exxx`` code, a one-line
message and a hint telling the user what to try next.
"""
from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TextIO


class ErrorCode(Enum):
    # Input (E0xx)
    E001 = "E001"  # result file missing
    E002 = "E002"  # result file unreadable or malformed
    E003 = "E003"  # result file fails the schema
    E004 = "E004"  # bad configuration value

    # Rendering (E1xx)
    E100 = "E100"  # section template missing or broken

    # Output (E3xx)
    E300 = "E300"  # a report page could not be written
    E301 = "E301"  # report directory not writable
    E302 = "E302"  # two specs map to the same page


@dataclass(frozen=True)
class _Entry:
    summary: str
    hint: str
    # Details are appended to the summary instead of printed on their own line.
    inline: bool = True


_REGISTRY: dict[ErrorCode, _Entry] = {
    ErrorCode.E001: _Entry("Result file not found", "Check the --input path"),
    ErrorCode.E002: _Entry(
        "Result file is invalid",
        "Make sure the file is UTF-8 YAML or JSON with a top-level mapping",
    ),
    ErrorCode.E003: _Entry(
        "Schema validation failed",
        "Run 'specreport validate --input <file>' to list every problem",
        inline=False,
    ),
    ErrorCode.E004: _Entry(
        "Invalid configuration",
        "Check SPECREPORT_* variables in the environment or .env file",
    ),
    ErrorCode.E100: _Entry("Section template error", "The report templates are broken, please report it"),
    ErrorCode.E300: _Entry(
        "Page generation failed",
        "Check permissions of the report directory; the other pages were written",
    ),
    ErrorCode.E301: _Entry("Report directory not writable", "Check permissions or pass a different --out"),
    ErrorCode.E302: _Entry(
        "Duplicate page location",
        "Give each spec a file name that is unique within the project root",
    ),
}

_UNKNOWN = _Entry("Unexpected error", "Run with --verbose for the full traceback")


@dataclass(frozen=True)
class ReportError:
    """A coded error ready to show to the user."""

    code: ErrorCode
    message: str
    hint: str
    details: Optional[str] = None

    def __str__(self) -> str:
        lines = [f"SR-{self.code.value}: {self.message}"]
        if self.details:
            lines.append(f"  Details: {self.details}")
        lines.append(f"  Next step: {self.hint}")
        return "\n".join(lines)

    def emit(self, stream: Optional[TextIO] = None) -> None:
        print(self, file=stream or sys.stderr)


def make_error(code: ErrorCode, details: Optional[str] = None) -> ReportError:
    entry = _REGISTRY.get(code, _UNKNOWN)
    if details and entry.inline:
        return ReportError(code=code, message=f"{entry.summary}: {details}", hint=entry.hint)
    return ReportError(code=code, message=entry.summary, hint=entry.hint, details=details)


_verbose = False


def set_verbose(verbose: bool) -> None:
    global _verbose
    _verbose = verbose


def is_verbose() -> bool:
    return _verbose


def handle_exception(exc: BaseException, code: ErrorCode, details: Optional[str] = None) -> None:
    """Report ``exc`` under ``code`` on stderr, with its traceback when verbose."""
    make_error(code, details or str(exc)).emit()
    if _verbose:
        print("\n--- Full Traceback ---", file=sys.stderr)
        traceback.print_exception(type(exc), exc, exc.__traceback__)
