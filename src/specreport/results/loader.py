"""Load and validate suite result documents (YAML or JSON)."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from jsonschema import Draft202012Validator

from specreport.results import (
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
    ScenarioItem,
    SpecItem,
    SpecResult,
    Status,
    Step,
    SuiteResult,
    Table,
    TableDrivenScenario,
)

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "suite_result.schema.json"


class SchemaValidationError(ValueError):
    """The document parsed but does not match the suite result schema."""

    def __init__(self, path: Path, errors: list[str]) -> None:
        self.errors = errors
        error_details = "\n".join(f"  - {e}" for e in errors[:5])  # Show first 5
        super().__init__(f"Result validation failed for {path}:\n{error_details}")


def validate_suite_data(data: dict[str, Any]) -> list[str]:
    """Validate suite data against the JSON schema. Returns list of errors (empty if valid)."""
    schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    validator = Draft202012Validator(schema)
    errors: list[str] = []
    for error in validator.iter_errors(data):
        errors.append(f"{error.json_path}: {error.message}")
    return errors


def _hook_failure(data: Optional[dict[str, Any]]) -> Optional[HookFailure]:
    if not data:
        return None
    return HookFailure(
        error_message=data["error_message"],
        stack_trace=data.get("stack_trace", ""),
        screenshot=data.get("screenshot"),
    )


def _table(data: Optional[dict[str, Any]]) -> Optional[Table]:
    if data is None:
        return None
    return Table(
        headers=tuple(data.get("headers", [])),
        rows=tuple(Row(cells=tuple(cells)) for cells in data.get("rows", [])),
    )


def _result(data: Optional[dict[str, Any]]) -> ExecutionResult:
    data = data or {}
    return ExecutionResult(
        status=Status(data.get("status", Status.PASSED.value)),
        execution_time=data.get("execution_time", 0),
        error_message=data.get("error_message", ""),
        stack_trace=data.get("stack_trace", ""),
        screenshot=data.get("screenshot"),
        skip_reason=data.get("skip_reason", ""),
        messages=tuple(data.get("messages", [])),
    )


def _fragment(data: dict[str, Any]) -> Fragment:
    parameter = None
    param_data = data.get("parameter")
    if param_data is not None:
        parameter = Parameter(
            type=ParameterType(param_data["type"]),
            value=param_data.get("value", ""),
            name=param_data.get("name", ""),
            table=_table(param_data.get("table")),
        )
    return Fragment(type=FragmentType(data["type"]), text=data.get("text", ""), parameter=parameter)


def _step(data: dict[str, Any]) -> Step:
    return Step(
        fragments=tuple(_fragment(f) for f in data.get("fragments", [])),
        result=_result(data.get("result")),
        pre_hook_failure=_hook_failure(data.get("pre_hook_failure")),
        post_hook_failure=_hook_failure(data.get("post_hook_failure")),
    )


def _scenario_item(data: dict[str, Any]) -> ScenarioItem:
    if "step" in data:
        return _step(data["step"])
    if "concept" in data:
        concept = data["concept"]
        return Concept(
            step=_step(concept["step"]),
            items=tuple(_scenario_item(i) for i in concept.get("items", [])),
        )
    if "comment" in data:
        return Comment(text=data["comment"])
    raise ValueError(f"Unknown scenario item: {sorted(data)}")


def _scenario(data: dict[str, Any]) -> Scenario:
    return Scenario(
        heading=data["heading"],
        tags=tuple(data.get("tags", [])),
        failed=data.get("failed", False),
        skipped=data.get("skipped", False),
        execution_time=data.get("execution_time", 0),
        contexts=tuple(_scenario_item(i) for i in data.get("contexts", [])),
        items=tuple(_scenario_item(i) for i in data.get("items", [])),
        teardowns=tuple(_scenario_item(i) for i in data.get("teardowns", [])),
        pre_hook_failure=_hook_failure(data.get("pre_hook_failure")),
        post_hook_failure=_hook_failure(data.get("post_hook_failure")),
    )


def _spec_item(data: dict[str, Any]) -> SpecItem:
    if "scenario" in data:
        return _scenario(data["scenario"])
    if "table_driven_scenario" in data:
        tds = data["table_driven_scenario"]
        return TableDrivenScenario(
            scenario=_scenario(tds["scenario"]),
            table_row_index=tds.get("table_row_index", 0),
        )
    if "table" in data:
        return _table(data["table"])
    if "comment" in data:
        return Comment(text=data["comment"])
    raise ValueError(f"Unknown spec item: {sorted(data)}")


def _spec_result(data: dict[str, Any]) -> SpecResult:
    return SpecResult(
        heading=data["heading"],
        file_name=data["file_name"],
        tags=tuple(data.get("tags", [])),
        items=tuple(_spec_item(i) for i in data.get("items", [])),
        failed=data.get("failed", False),
        skipped=data.get("skipped", False),
        execution_time=data.get("execution_time", 0),
        pre_hook_failure=_hook_failure(data.get("pre_hook_failure")),
        post_hook_failure=_hook_failure(data.get("post_hook_failure")),
        errors=tuple(
            BuildError(
                type=BuildErrorType(e["type"]),
                message=e["message"],
                file_name=e.get("file_name", ""),
                line_number=e.get("line_number", 0),
            )
            for e in data.get("errors", [])
        ),
    )


def suite_result_from_dict(data: dict[str, Any]) -> SuiteResult:
    """Build a SuiteResult from already-validated data."""
    return SuiteResult(
        project_name=data.get("project_name", ""),
        environment=data.get("environment", "default"),
        tags=data.get("tags", ""),
        failed=data.get("failed", False),
        execution_time=data.get("execution_time", 0),
        timestamp=data.get("timestamp", ""),
        pre_hook_failure=_hook_failure(data.get("pre_hook_failure")),
        post_hook_failure=_hook_failure(data.get("post_hook_failure")),
        spec_results=tuple(_spec_result(s) for s in data.get("spec_results", [])),
    )


def read_suite_data(path: Path) -> dict[str, Any]:
    """Read a result document without validating it.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not valid YAML/JSON or not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Result file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(
            f"Cannot read result file {path}: encoding error.\n"
            f"Ensure the file is saved as UTF-8."
        ) from e

    # Also accepts JSON
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML/JSON in result file {path}:\n{e}") from e

    if data is None:
        raise ValueError(f"Result file is empty: {path}")

    if not isinstance(data, dict):
        raise ValueError(
            f"Result file must contain a mapping, got {type(data).__name__}: {path}"
        )
    return data


def load_suite_result(path: Path) -> SuiteResult:
    """Load a suite result file and return the validated result tree.

    Args:
        path: Path to a YAML or JSON result document

    Returns:
        SuiteResult: Immutable result tree

    Raises:
        FileNotFoundError: If the result file doesn't exist
        ValueError: If the document is malformed
        SchemaValidationError: If the document fails schema validation
    """
    data = read_suite_data(path)

    errors = validate_suite_data(data)
    if errors:
        raise SchemaValidationError(path, errors)

    return suite_result_from_dict(data)
