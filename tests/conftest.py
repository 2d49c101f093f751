"""specreport test configuration and fixtures."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add src to path for imports
SRC_DIR = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_DIR))

from specreport.results import (  # noqa: E402
    BuildError,
    BuildErrorType,
    Comment,
    Concept,
    ExecutionResult,
    Fragment,
    FragmentType,
    HookFailure,
    Parameter,
    ParameterType,
    Row,
    Scenario,
    SpecResult,
    Status,
    Step,
    SuiteResult,
    Table,
    TableDrivenScenario,
)


def _text(value: str) -> Fragment:
    return Fragment(type=FragmentType.TEXT, text=value)


def _param(value: str, kind: ParameterType = ParameterType.STATIC, name: str = "", table: Table | None = None) -> Fragment:
    return Fragment(
        type=FragmentType.PARAMETER,
        parameter=Parameter(type=kind, value=value, name=name, table=table),
    )


def _passing_step(label: str = "Open the login page") -> Step:
    return Step(fragments=(_text(label),), result=ExecutionResult(status=Status.PASSED, execution_time=120))


def _failing_step(label: str = "Submit the form") -> Step:
    return Step(
        fragments=(_text(label),),
        result=ExecutionResult(
            status=Status.FAILED,
            execution_time=300,
            error_message="Expected 200 but got 500",
            stack_trace="at LoginSteps.submit(LoginSteps.java:42)",
        ),
    )


@pytest.fixture
def passing_spec() -> SpecResult:
    """An untagged spec whose only scenario passed."""
    return SpecResult(
        heading="Login",
        file_name="specs/login.spec",
        execution_time=1_500,
        items=(
            Comment(text="Checks the happy path"),
            Scenario(heading="Valid credentials", execution_time=1_500, items=(_passing_step(),)),
        ),
    )


@pytest.fixture
def failing_spec() -> SpecResult:
    """A tagged spec with one failed step."""
    return SpecResult(
        heading="Checkout",
        file_name="specs/shop/checkout.spec",
        tags=("shop",),
        failed=True,
        execution_time=2_000,
        items=(
            Scenario(
                heading="Pay by card",
                tags=("payments", "shop"),
                failed=True,
                items=(_passing_step("Add item to cart"), _failing_step()),
            ),
        ),
    )


@pytest.fixture
def table_driven_spec() -> SpecResult:
    """A spec whose scenario ran once per data-table row."""
    scenario = Scenario(heading="Search for <term>", tags=("search",), items=(_passing_step("Search"),))
    return SpecResult(
        heading="Search",
        file_name="specs/search.spec",
        tags=("search",),
        failed=True,
        items=(
            Comment(text="Before the table"),
            Table(headers=("term",), rows=(Row(cells=("apple",)), Row(cells=("pear",)), Row(cells=("fig",)))),
            Comment(text="After the table"),
            TableDrivenScenario(scenario=scenario, table_row_index=0),
            TableDrivenScenario(
                scenario=Scenario(heading=scenario.heading, tags=scenario.tags, failed=True, items=(_failing_step("Search"),)),
                table_row_index=1,
            ),
            TableDrivenScenario(
                scenario=Scenario(heading=scenario.heading, tags=scenario.tags, skipped=True),
                table_row_index=2,
            ),
        ),
    )


@pytest.fixture
def parse_error_spec() -> SpecResult:
    return SpecResult(
        heading="Broken",
        file_name="specs/broken.spec",
        failed=True,
        items=(Scenario(heading="Still valid", items=(_passing_step("Visible only without errors"),)),),
        errors=(
            BuildError(type=BuildErrorType.PARSE, message="Scenario heading expected", file_name="specs/broken.spec", line_number=3),
        ),
    )


@pytest.fixture
def concept_step() -> Concept:
    return Concept(
        step=Step(fragments=(_text("Log in as"), _param("admin")), result=ExecutionResult(status=Status.PASSED)),
        items=(
            _passing_step("Enter user name"),
            Concept(
                step=Step(fragments=(_text("Submit credentials"),), result=ExecutionResult(status=Status.PASSED)),
                items=(_passing_step("Click login"),),
            ),
        ),
    )


@pytest.fixture
def two_spec_suite(passing_spec: SpecResult, failing_spec: SpecResult) -> SuiteResult:
    return SuiteResult(
        project_name="shop",
        environment="default",
        failed=True,
        execution_time=3_500,
        timestamp="Oct 17, 2026 at 10:00am",
        spec_results=(passing_spec, failing_spec),
    )


@pytest.fixture
def passing_suite(passing_spec: SpecResult) -> SuiteResult:
    return SuiteResult(
        project_name="shop",
        execution_time=1_500,
        timestamp="Oct 17, 2026 at 10:00am",
        spec_results=(passing_spec,),
    )


@pytest.fixture
def before_suite_failure() -> HookFailure:
    return HookFailure(error_message="Database unreachable", stack_trace="at Hooks.beforeSuite(Hooks.java:12)")


@pytest.fixture
def project_root() -> str:
    return "/work/project"
