"""Transform the execution result tree into the render model.

Each ``to_*`` function maps one result node to its render counterpart.
The functions are pure and never raise on malformed specifications:
structural problems surface as build errors on the affected spec.
"""
from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Optional, Union

from specreport import model
from specreport.aggregate import (
    format_time,
    scenario_status,
    success_rate,
    summarize_spec,
    summarize_suite,
)
from specreport.results import (
    BuildError,
    BuildErrorType,
    Comment,
    Concept,
    ExecutionResult,
    Fragment,
    FragmentType,
    HookFailure,
    ParameterType,
    Scenario,
    SpecResult,
    Status,
    Step,
    SuiteResult,
    Table,
    TableDrivenScenario,
)

BEFORE_SUITE = "Before Suite"
AFTER_SUITE = "After Suite"
BEFORE_SPEC = "Before Spec"
AFTER_SPEC = "After Spec"
BEFORE_SCENARIO = "Before Scenario"
AFTER_SCENARIO = "After Scenario"
BEFORE_STEP = "Before Step"
AFTER_STEP = "After Step"

UNNAMED_PAGE = "unnamed"

_PARAMETER_KINDS = {
    ParameterType.STATIC: model.FragmentKind.STATIC,
    ParameterType.DYNAMIC: model.FragmentKind.DYNAMIC,
    ParameterType.SPECIAL_STRING: model.FragmentKind.SPECIAL_STRING,
    ParameterType.SPECIAL_TABLE: model.FragmentKind.SPECIAL_TABLE,
    ParameterType.TABLE: model.FragmentKind.TABLE,
}


def to_html_file_name(file_name: str, project_root: Union[str, Path]) -> str:
    """Map a spec source path to its page location inside the report dir.

    ``specs/login/basic.spec`` under the project root becomes
    ``specs/login/basic.html``. Sources outside the project root keep only
    their base name so nothing is written outside the report directory.
    A name with no base name left (empty, ``.``, the project root itself)
    becomes ``unnamed.html``.
    """
    path = file_name
    if os.path.isabs(path):
        path = os.path.relpath(path, os.fspath(project_root))
    rel = PurePath(os.path.normpath(path))
    if rel.parts and rel.parts[0] == os.pardir:
        rel = PurePath(rel.name)
    if rel.name in ("", os.curdir, os.pardir):
        rel = PurePath(UNNAMED_PAGE)
    return rel.with_suffix(".html").as_posix()


def base_path_for(report_file: str) -> str:
    """Relative prefix leading from a page back to the report root."""
    depth = len(PurePath(report_file).parent.parts)
    return "../" * depth


def to_hook_failure(failure: Optional[HookFailure], hook_name: str) -> Optional[model.HookFailure]:
    if failure is None:
        return None
    return model.HookFailure(
        hook_name=hook_name,
        error_message=failure.error_message,
        stack_trace=failure.stack_trace,
        screenshot=failure.screenshot,
    )


def to_overview(
    suite: SuiteResult,
    spec: Optional[SpecResult] = None,
    project_root: Union[str, Path] = ".",
) -> model.Overview:
    """Build the page overview.

    Summary, environment and timestamp are always suite-wide. On a spec
    page the success rate and elapsed time narrow to that spec.
    """
    suite_summary = summarize_suite(suite)
    if spec is None:
        return model.Overview(
            project_name=suite.project_name,
            env=suite.environment,
            tags=suite.tags,
            success_rate=success_rate(suite_summary),
            exec_time=format_time(suite.execution_time),
            timestamp=suite.timestamp,
            summary=suite_summary,
        )
    return model.Overview(
        project_name=suite.project_name,
        env=suite.environment,
        tags=suite.tags,
        success_rate=success_rate(summarize_spec(spec)),
        exec_time=format_time(spec.execution_time),
        timestamp=suite.timestamp,
        summary=suite_summary,
        base_path=base_path_for(to_html_file_name(spec.file_name, project_root)),
    )


def to_sidebar(
    suite: SuiteResult,
    project_root: Union[str, Path] = ".",
    base_path: str = "",
) -> model.Sidebar:
    specs = tuple(
        model.SpecMeta(
            spec_name=s.heading,
            exec_time=format_time(s.execution_time),
            failed=s.failed,
            skipped=s.skipped,
            tags=s.tags,
            report_file=base_path + to_html_file_name(s.file_name, project_root),
        )
        for s in suite.spec_results
    )
    return model.Sidebar(is_before_hook_failure=suite.pre_hook_failure is not None, specs=specs)


def to_spec_header(spec: SpecResult, project_root: Union[str, Path] = ".") -> model.SpecHeader:
    file_name = spec.file_name
    if os.path.isabs(file_name):
        file_name = os.path.relpath(file_name, os.fspath(project_root))
    return model.SpecHeader(
        spec_name=spec.heading,
        exec_time=format_time(spec.execution_time),
        file_name=file_name,
        tags=spec.tags,
        summary=summarize_spec(spec),
    )


def to_table(table: Optional[Table]) -> Optional[model.Table]:
    if table is None:
        return None
    return model.Table(
        headers=table.headers,
        rows=tuple(model.Row(cells=r.cells) for r in table.rows),
    )


def to_result(result: ExecutionResult) -> model.Result:
    return model.Result(
        status=result.status,
        exec_time=format_time(result.execution_time),
        error_message=result.error_message,
        stack_trace=result.stack_trace,
        screenshot=result.screenshot,
        skip_reason=result.skip_reason,
        messages=result.messages,
    )


def to_fragment(fragment: Fragment) -> model.Fragment:
    param = fragment.parameter
    if fragment.type == FragmentType.TEXT or param is None:
        return model.Fragment(kind=model.FragmentKind.TEXT, text=fragment.text)

    kind = _PARAMETER_KINDS[param.type]
    if kind in (model.FragmentKind.SPECIAL_TABLE, model.FragmentKind.TABLE):
        return model.Fragment(kind=kind, name=param.name, table=to_table(param.table))
    return model.Fragment(kind=kind, text=param.value, name=param.name)


def to_step(step: Step) -> model.Step:
    return model.Step(
        fragments=tuple(to_fragment(f) for f in step.fragments),
        result=to_result(step.result),
        pre_hook_failure=to_hook_failure(step.pre_hook_failure, BEFORE_STEP),
        post_hook_failure=to_hook_failure(step.post_hook_failure, AFTER_STEP),
    )


def to_concept(concept: Concept) -> model.Concept:
    return model.Concept(
        step=to_step(concept.step),
        items=tuple(to_item(i) for i in concept.items),
    )


def to_item(item: Union[Step, Concept, Comment]) -> model.Item:
    if isinstance(item, Step):
        return to_step(item)
    if isinstance(item, Concept):
        return to_concept(item)
    if isinstance(item, Comment):
        return model.Comment(text=item.text)
    raise TypeError(f"Unsupported scenario item: {type(item).__name__}")


def to_scenario(scenario: Scenario, table_row_index: int = -1) -> model.Scenario:
    return model.Scenario(
        heading=scenario.heading,
        exec_time=format_time(scenario.execution_time),
        tags=scenario.tags,
        status=scenario_status(scenario),
        contexts=tuple(to_item(i) for i in scenario.contexts),
        items=tuple(to_item(i) for i in scenario.items),
        teardowns=tuple(to_item(i) for i in scenario.teardowns),
        before_hook_failure=to_hook_failure(scenario.pre_hook_failure, BEFORE_SCENARIO),
        after_hook_failure=to_hook_failure(scenario.post_hook_failure, AFTER_SCENARIO),
        table_row_index=table_row_index,
    )


def _row_status(row_statuses: list[Status]) -> Status:
    if not row_statuses:
        return Status.PASSED
    if Status.FAILED in row_statuses:
        return Status.FAILED
    if all(s == Status.SKIPPED for s in row_statuses):
        return Status.SKIPPED
    return Status.PASSED


def _with_row_statuses(table: model.Table, rows: dict[int, list[Status]]) -> model.Table:
    return model.Table(
        headers=table.headers,
        rows=tuple(
            model.Row(cells=r.cells, status=_row_status(rows.get(i, [])))
            for i, r in enumerate(table.rows)
        ),
    )


def to_spec(spec: SpecResult) -> model.Spec:
    """Build the spec body.

    Table-driven scenarios arrive as one entry per executed row; each one
    becomes its own render scenario carrying the row index, in input order.
    """
    before: list[str] = []
    after: list[str] = []
    table: Optional[model.Table] = None
    scenarios: list[model.Scenario] = []
    row_statuses: dict[int, list[Status]] = {}
    errors = list(spec.errors)

    for item in spec.items:
        if isinstance(item, Comment):
            (after if table is not None else before).append(item.text)
        elif isinstance(item, Table):
            table = to_table(item)
        elif isinstance(item, Scenario):
            scenarios.append(to_scenario(item))
        elif isinstance(item, TableDrivenScenario):
            index = item.table_row_index
            scenarios.append(to_scenario(item.scenario, table_row_index=index))
            row_statuses.setdefault(index, []).append(scenario_status(item.scenario))

    if table is not None:
        out_of_range = sorted(i for i in row_statuses if i >= len(table.rows))
        for index in out_of_range:
            errors.append(
                BuildError(
                    type=BuildErrorType.VALIDATION,
                    message=f"Table row index {index} is out of range for the data table",
                    file_name=spec.file_name,
                )
            )
        table = _with_row_statuses(table, row_statuses)
    elif row_statuses:
        errors.append(
            BuildError(
                type=BuildErrorType.VALIDATION,
                message="Table-driven scenario without a data table",
                file_name=spec.file_name,
            )
        )

    return model.Spec(
        comments_before_table=tuple(before),
        table=table,
        comments_after_table=tuple(after),
        scenarios=tuple(scenarios),
        before_hook_failure=to_hook_failure(spec.pre_hook_failure, BEFORE_SPEC),
        after_hook_failure=to_hook_failure(spec.post_hook_failure, AFTER_SPEC),
        errors=tuple(errors),
    )
