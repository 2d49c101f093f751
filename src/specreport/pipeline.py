"""Page rendering: drive the section templates in page order.

Each ``generate_*_page`` function writes one complete HTML document to
``out``. Section order:

    index page: page start, overview, [after-suite failure], sidebar,
                [congratulations], footer
    spec page:  page start, overview, [before/after-suite failures],
                sidebar, spec header + tags, spec body, footer
    failure page (before-suite hook failed): page start, overview,
                before-suite failure, [after-suite failure], footer
"""
from __future__ import annotations

from pathlib import Path
from typing import Sequence, TextIO, Union

from specreport import model, templates as t
from specreport.adapter import (
    AFTER_SUITE,
    BEFORE_SUITE,
    base_path_for,
    to_hook_failure,
    to_html_file_name,
    to_overview,
    to_sidebar,
    to_spec,
    to_spec_header,
)
from specreport.rendering import RenderContext
from specreport.results import SpecResult, SuiteResult


def generate_overview(ctx: RenderContext, overview: model.Overview, out: TextIO) -> None:
    ctx.render(t.HTML_PAGE_START, out, overview)
    ctx.render(t.REPORT_OVERVIEW, out, overview)


def generate_page_footer(ctx: RenderContext, overview: model.Overview, out: TextIO) -> None:
    ctx.render(t.END_DIV, out)
    ctx.render(t.MAIN_END, out)
    ctx.render(t.BODY_FOOTER, out)
    ctx.render(t.HTML_PAGE_END, out, overview)


def generate_failure_page(
    ctx: RenderContext,
    suite: SuiteResult,
    out: TextIO,
    project_root: Union[str, Path] = ".",
) -> None:
    """Render the only page produced when the before-suite hook failed."""
    overview = to_overview(suite, None, project_root)
    generate_overview(ctx, overview, out)
    ctx.render(t.HOOK_FAILURE, out, to_hook_failure(suite.pre_hook_failure, BEFORE_SUITE))
    if suite.post_hook_failure is not None:
        ctx.render(t.HOOK_FAILURE, out, to_hook_failure(suite.post_hook_failure, AFTER_SUITE))
    generate_page_footer(ctx, overview, out)


def generate_index_page(
    ctx: RenderContext,
    suite: SuiteResult,
    out: TextIO,
    project_root: Union[str, Path] = ".",
) -> None:
    if suite.pre_hook_failure is not None:
        generate_failure_page(ctx, suite, out, project_root)
        return

    overview = to_overview(suite, None, project_root)
    generate_overview(ctx, overview, out)
    if suite.post_hook_failure is not None:
        ctx.render(t.HOOK_FAILURE, out, to_hook_failure(suite.post_hook_failure, AFTER_SUITE))
    ctx.render(t.SPECS_START, out)
    ctx.render(t.SIDEBAR, out, to_sidebar(suite, project_root))
    if not suite.failed:
        ctx.render(t.CONGRATS, out)
    ctx.render(t.END_DIV, out)
    generate_page_footer(ctx, overview, out)


def generate_spec_page(
    ctx: RenderContext,
    suite: SuiteResult,
    spec: SpecResult,
    out: TextIO,
    project_root: Union[str, Path] = ".",
) -> None:
    overview = to_overview(suite, spec, project_root)
    generate_overview(ctx, overview, out)

    if suite.pre_hook_failure is not None:
        ctx.render(t.HOOK_FAILURE, out, to_hook_failure(suite.pre_hook_failure, BEFORE_SUITE))
    if suite.post_hook_failure is not None:
        ctx.render(t.HOOK_FAILURE, out, to_hook_failure(suite.post_hook_failure, AFTER_SUITE))

    if suite.pre_hook_failure is None:
        base_path = base_path_for(to_html_file_name(spec.file_name, project_root))
        ctx.render(t.SPECS_START, out)
        ctx.render(t.SIDEBAR, out, to_sidebar(suite, project_root, base_path))
        generate_spec_div(ctx, spec, out, project_root)
        ctx.render(t.END_DIV, out)
    generate_page_footer(ctx, overview, out)


def generate_spec_div(
    ctx: RenderContext,
    spec_result: SpecResult,
    out: TextIO,
    project_root: Union[str, Path] = ".",
) -> None:
    header = to_spec_header(spec_result, project_root)
    spec = to_spec(spec_result)

    ctx.render(t.SPEC_CONTAINER_START, out)
    ctx.render(t.SPEC_HEADER_START, out, header)
    ctx.render(t.TAGS, out, header)
    ctx.render(t.HEADER_END, out)
    ctx.render(t.SPEC_ITEMS_CONTAINER, out)

    # A spec that failed to parse shows only its errors.
    if spec.has_parse_errors:
        ctx.render(t.SPEC_ERROR, out, spec)
        ctx.render(t.END_DIV, out)
        ctx.render(t.END_DIV, out)
        return

    if spec.errors:
        ctx.render(t.SPEC_ERROR, out, spec)
    if spec.before_hook_failure is not None:
        ctx.render(t.HOOK_FAILURE, out, spec.before_hook_failure)

    ctx.render(t.SPEC_ITEMS_CONTENTS, out)
    ctx.render(t.SPEC_COMMENTS_AND_TABLE, out, spec)
    if spec.before_hook_failure is None:
        for scenario in spec.scenarios:
            generate_scenario(ctx, scenario, out)
    ctx.render(t.END_DIV, out)
    ctx.render(t.END_DIV, out)

    if spec.after_hook_failure is not None:
        ctx.render(t.HOOK_FAILURE, out, spec.after_hook_failure)
    ctx.render(t.END_DIV, out)


def generate_scenario(ctx: RenderContext, scenario: model.Scenario, out: TextIO) -> None:
    ctx.render(t.SCENARIO_CONTAINER_START, out, scenario)
    ctx.render(t.SCENARIO_HEADER_START, out, scenario)
    ctx.render(t.TAGS, out, scenario)
    ctx.render(t.END_DIV, out)
    if scenario.before_hook_failure is not None:
        ctx.render(t.HOOK_FAILURE, out, scenario.before_hook_failure)

    for item in scenario.contexts:
        generate_context_or_teardown(ctx, item, out)
    generate_items(ctx, scenario.items, out)
    for item in scenario.teardowns:
        generate_context_or_teardown(ctx, item, out)

    if scenario.after_hook_failure is not None:
        ctx.render(t.HOOK_FAILURE, out, scenario.after_hook_failure)
    ctx.render(t.END_DIV, out)


def generate_items(ctx: RenderContext, items: Sequence[model.Item], out: TextIO) -> None:
    for item in items:
        generate_item(ctx, item, out)


def generate_context_or_teardown(ctx: RenderContext, item: model.Item, out: TextIO) -> None:
    ctx.render(t.CONTEXT_OR_TEARDOWN_START, out)
    generate_item(ctx, item, out)
    ctx.render(t.END_DIV, out)


def generate_step(ctx: RenderContext, step: model.Step, out: TextIO) -> None:
    ctx.render(t.STEP_START, out, step)
    ctx.render(t.STEP_BODY, out, step)
    if step.pre_hook_failure is not None:
        ctx.render(t.HOOK_FAILURE, out, step.pre_hook_failure)
    if step.result.shows_failure:
        ctx.render(t.STEP_FAILURE, out, step.result)
    if step.post_hook_failure is not None:
        ctx.render(t.HOOK_FAILURE, out, step.post_hook_failure)
    ctx.render(t.MESSAGE, out, step.result)
    ctx.render(t.STEP_END, out, step)
    if step.result.shows_skip_reason:
        ctx.render(t.SKIPPED_REASON, out, step.result)


def generate_concept(ctx: RenderContext, concept: model.Concept, out: TextIO) -> None:
    ctx.render(t.CONCEPT_START, out, concept.step)
    ctx.render(t.CONCEPT_SPAN, out)
    ctx.render(t.STEP_BODY, out, concept.step)
    ctx.render(t.STEP_END, out, concept.step)
    ctx.render(t.CONCEPT_STEPS_START, out)
    generate_items(ctx, concept.items, out)
    ctx.render(t.END_DIV, out)


def generate_item(ctx: RenderContext, item: model.Item, out: TextIO) -> None:
    if isinstance(item, model.Step):
        generate_step(ctx, item, out)
    elif isinstance(item, model.Comment):
        ctx.render(t.COMMENT, out, item)
    elif isinstance(item, model.Concept):
        generate_concept(ctx, item, out)
    else:
        raise TypeError(f"Unsupported item: {type(item).__name__}")
