"""Execution result tree consumed by the report generator.

A suite result is produced once by the test runner and handed to the
generator as a single immutable value. Every page worker reads it
concurrently, so all nodes are frozen dataclasses.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Status(Enum):
    """Execution status of a step, scenario or specification."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    NOT_EXECUTED = "not_executed"


class FragmentType(Enum):
    TEXT = "text"
    PARAMETER = "parameter"


class ParameterType(Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"
    SPECIAL_STRING = "special_string"
    SPECIAL_TABLE = "special_table"
    TABLE = "table"


class BuildErrorType(Enum):
    PARSE = "parse"
    VALIDATION = "validation"


@dataclass(frozen=True)
class HookFailure:
    """A failed setup/teardown hook."""

    error_message: str
    stack_trace: str = ""
    screenshot: Optional[str] = None


@dataclass(frozen=True)
class ExecutionResult:
    """Result of executing a single step.

    Attributes:
        status: Execution status.
        execution_time: Elapsed time in milliseconds.
        error_message: Failure message (failed steps).
        stack_trace: Failure stack trace (failed steps).
        screenshot: Base64 PNG captured on failure.
        skip_reason: Why the step was skipped (skipped steps).
        messages: Free-form messages written by the step.
    """

    status: Status = Status.PASSED
    execution_time: int = 0
    error_message: str = ""
    stack_trace: str = ""
    screenshot: Optional[str] = None
    skip_reason: str = ""
    messages: tuple[str, ...] = ()


@dataclass(frozen=True)
class Row:
    cells: tuple[str, ...] = ()


@dataclass(frozen=True)
class Table:
    headers: tuple[str, ...] = ()
    rows: tuple[Row, ...] = ()


@dataclass(frozen=True)
class Parameter:
    type: ParameterType
    value: str = ""
    name: str = ""
    table: Optional[Table] = None


@dataclass(frozen=True)
class Fragment:
    type: FragmentType
    text: str = ""
    parameter: Optional[Parameter] = None


@dataclass(frozen=True)
class Step:
    fragments: tuple[Fragment, ...] = ()
    result: ExecutionResult = field(default_factory=ExecutionResult)
    pre_hook_failure: Optional[HookFailure] = None
    post_hook_failure: Optional[HookFailure] = None


@dataclass(frozen=True)
class Concept:
    """A reusable step group: the defining step plus its child items."""

    step: Step
    items: tuple[Union[Step, "Concept"], ...] = ()


@dataclass(frozen=True)
class Comment:
    text: str


ScenarioItem = Union[Step, Concept, Comment]


@dataclass(frozen=True)
class Scenario:
    heading: str
    tags: tuple[str, ...] = ()
    failed: bool = False
    skipped: bool = False
    execution_time: int = 0
    contexts: tuple[ScenarioItem, ...] = ()
    items: tuple[ScenarioItem, ...] = ()
    teardowns: tuple[ScenarioItem, ...] = ()
    pre_hook_failure: Optional[HookFailure] = None
    post_hook_failure: Optional[HookFailure] = None


@dataclass(frozen=True)
class TableDrivenScenario:
    """One execution of a scenario for a single data-table row."""

    scenario: Scenario
    table_row_index: int = 0


SpecItem = Union[Comment, Table, Scenario, TableDrivenScenario]


@dataclass(frozen=True)
class BuildError:
    """A defect found while building a specification from source."""

    type: BuildErrorType
    message: str
    file_name: str = ""
    line_number: int = 0

    @property
    def is_parse_error(self) -> bool:
        return self.type == BuildErrorType.PARSE

    def __str__(self) -> str:
        if self.is_parse_error:
            return f"[Parse Error] {self.message}"
        return f"[Validation Error] {self.message}"


@dataclass(frozen=True)
class SpecResult:
    """Result of executing one specification file.

    A spec that could not be built carries ``errors`` instead of a
    meaningful item sequence.
    """

    heading: str
    file_name: str
    tags: tuple[str, ...] = ()
    items: tuple[SpecItem, ...] = ()
    failed: bool = False
    skipped: bool = False
    execution_time: int = 0
    pre_hook_failure: Optional[HookFailure] = None
    post_hook_failure: Optional[HookFailure] = None
    errors: tuple[BuildError, ...] = ()

    @property
    def scenarios(self) -> list[Scenario]:
        """All executed scenarios, one per table row for table-driven ones."""
        found: list[Scenario] = []
        for item in self.items:
            if isinstance(item, Scenario):
                found.append(item)
            elif isinstance(item, TableDrivenScenario):
                found.append(item.scenario)
        return found


@dataclass(frozen=True)
class SuiteResult:
    """Root of the result tree.

    Attributes:
        project_name: Name of the project under test.
        environment: Environment the suite ran against.
        tags: Tag expression the suite was filtered with.
        failed: Whether the suite as a whole failed.
        execution_time: Total elapsed time in milliseconds.
        timestamp: When the run happened, preformatted for display.
        pre_hook_failure: Failure of the before-suite hook.
        post_hook_failure: Failure of the after-suite hook.
        spec_results: Specification results in execution order.
    """

    project_name: str = ""
    environment: str = "default"
    tags: str = ""
    failed: bool = False
    execution_time: int = 0
    timestamp: str = ""
    pre_hook_failure: Optional[HookFailure] = None
    post_hook_failure: Optional[HookFailure] = None
    spec_results: tuple[SpecResult, ...] = ()
