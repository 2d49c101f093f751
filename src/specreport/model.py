"""Template-ready render model.

Produced by :mod:`specreport.adapter` from the result tree and consumed by
the section templates. Everything here is immutable; one model is built
per page and never shared between page workers.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Union

from specreport.aggregate import Summary
from specreport.results import BuildError, Status


class FragmentKind(IntEnum):
    """Closed set of step fragment kinds, each with its own markup."""

    TEXT = 0
    STATIC = 1
    DYNAMIC = 2
    SPECIAL_STRING = 3
    SPECIAL_TABLE = 4
    TABLE = 5


@dataclass(frozen=True)
class Overview:
    project_name: str
    env: str
    tags: str
    success_rate: float
    exec_time: str
    timestamp: str
    summary: Summary
    base_path: str = ""


@dataclass(frozen=True)
class SpecMeta:
    spec_name: str
    exec_time: str
    failed: bool
    skipped: bool
    tags: tuple[str, ...]
    report_file: str


@dataclass(frozen=True)
class Sidebar:
    is_before_hook_failure: bool
    specs: tuple[SpecMeta, ...]


@dataclass(frozen=True)
class HookFailure:
    hook_name: str
    error_message: str
    stack_trace: str
    screenshot: Optional[str] = None


@dataclass(frozen=True)
class SpecHeader:
    spec_name: str
    exec_time: str
    file_name: str
    tags: tuple[str, ...]
    summary: Summary


@dataclass(frozen=True)
class Row:
    cells: tuple[str, ...]
    status: Status = Status.PASSED


@dataclass(frozen=True)
class Table:
    headers: tuple[str, ...]
    rows: tuple[Row, ...]


@dataclass(frozen=True)
class Result:
    status: Status
    exec_time: str
    error_message: str = ""
    stack_trace: str = ""
    screenshot: Optional[str] = None
    skip_reason: str = ""
    messages: tuple[str, ...] = ()

    @property
    def shows_failure(self) -> bool:
        """A failure block needs both a message and a stack trace."""
        return self.status == Status.FAILED and bool(self.error_message) and bool(self.stack_trace)

    @property
    def shows_skip_reason(self) -> bool:
        return self.status == Status.SKIPPED and bool(self.skip_reason)


@dataclass(frozen=True)
class Fragment:
    kind: FragmentKind
    text: str = ""
    name: str = ""
    table: Optional[Table] = None


@dataclass(frozen=True)
class Step:
    fragments: tuple[Fragment, ...]
    result: Result
    pre_hook_failure: Optional[HookFailure] = None
    post_hook_failure: Optional[HookFailure] = None


@dataclass(frozen=True)
class Comment:
    text: str


@dataclass(frozen=True)
class Concept:
    step: Step
    items: tuple["Item", ...]


# Closed variant: the pipeline handles exactly these three.
Item = Union[Step, Comment, Concept]


@dataclass(frozen=True)
class Scenario:
    heading: str
    exec_time: str
    tags: tuple[str, ...]
    status: Status
    contexts: tuple[Item, ...] = ()
    items: tuple[Item, ...] = ()
    teardowns: tuple[Item, ...] = ()
    before_hook_failure: Optional[HookFailure] = None
    after_hook_failure: Optional[HookFailure] = None
    table_row_index: int = -1

    @property
    def is_table_driven(self) -> bool:
        return self.table_row_index >= 0

    @property
    def hidden(self) -> bool:
        """Only the first data-table row is shown until the user picks another."""
        return self.table_row_index > 0


@dataclass(frozen=True)
class Spec:
    comments_before_table: tuple[str, ...] = ()
    table: Optional[Table] = None
    comments_after_table: tuple[str, ...] = ()
    scenarios: tuple[Scenario, ...] = ()
    before_hook_failure: Optional[HookFailure] = None
    after_hook_failure: Optional[HookFailure] = None
    errors: tuple[BuildError, ...] = ()

    @property
    def has_parse_errors(self) -> bool:
        return any(e.is_parse_error for e in self.errors)
