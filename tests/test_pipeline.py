"""Tests for page assembly."""
from __future__ import annotations

import io

import pytest

from specreport import model
from specreport.adapter import to_item
from specreport.pipeline import (
    generate_failure_page,
    generate_index_page,
    generate_item,
    generate_spec_div,
    generate_spec_page,
    generate_step,
)
from specreport.rendering import RenderContext
from specreport.results import (
    Concept,
    ExecutionResult,
    HookFailure,
    Scenario,
    SpecResult,
    Status,
    Step,
    SuiteResult,
    TableDrivenScenario,
)

STEP_FAILURE_MARKER = '<h4 class="error-message">'
HOOK_FAILURE_MARKER = 'class="error-container failed hook-failure"'
SPEC_ERRORS_MARKER = 'class="error-container failed spec-errors"'


@pytest.fixture(scope="module")
def ctx() -> RenderContext:
    return RenderContext()


def _page(render) -> str:
    out = io.StringIO()
    render(out)
    return out.getvalue()


def _balanced(html: str) -> bool:
    return html.count("<div") == html.count("</div>")


# ============================================================================
# Index and failure pages
# ============================================================================


class TestIndexPage:
    """Tests for generate_index_page."""

    def test_failed_suite(self, ctx: RenderContext, two_spec_suite: SuiteResult) -> None:
        html = _page(lambda out: generate_index_page(ctx, two_spec_suite, out))
        assert html.startswith("<!doctype html>")
        assert html.rstrip().endswith("</html>")
        assert '<aside class="sidebar">' in html
        assert 'href="specs/shop/checkout.html"' in html
        assert "Congratulations!" not in html
        assert '<script src="js/search_index.js"' in html
        assert _balanced(html)

    def test_passing_suite_congratulates(self, ctx: RenderContext, passing_suite: SuiteResult) -> None:
        html = _page(lambda out: generate_index_page(ctx, passing_suite, out))
        assert html.count("Congratulations!") == 1
        assert "<span>100.0%</span>" in html

    def test_after_suite_failure_shown(self, ctx: RenderContext, passing_spec: SpecResult) -> None:
        suite = SuiteResult(
            project_name="shop",
            failed=True,
            post_hook_failure=HookFailure(error_message="cleanup failed", stack_trace="trace"),
            spec_results=(passing_spec,),
        )
        html = _page(lambda out: generate_index_page(ctx, suite, out))
        assert "After Suite Failed:" in html
        assert '<aside class="sidebar">' in html

    def test_before_suite_failure_delegates(
        self, ctx: RenderContext, passing_spec: SpecResult, before_suite_failure: HookFailure
    ) -> None:
        suite = SuiteResult(project_name="shop", failed=True, pre_hook_failure=before_suite_failure, spec_results=(passing_spec,))
        index_html = _page(lambda out: generate_index_page(ctx, suite, out))
        failure_html = _page(lambda out: generate_failure_page(ctx, suite, out))
        assert index_html == failure_html
        assert "Before Suite Failed:" in index_html
        assert "Database unreachable" in index_html
        assert '<aside class="sidebar">' not in index_html
        assert "Congratulations!" not in index_html
        assert _balanced(index_html)

    def test_failure_page_includes_after_suite(self, ctx: RenderContext, before_suite_failure: HookFailure) -> None:
        suite = SuiteResult(
            pre_hook_failure=before_suite_failure,
            post_hook_failure=HookFailure(error_message="teardown broke"),
        )
        html = _page(lambda out: generate_failure_page(ctx, suite, out))
        assert html.index("Before Suite Failed:") < html.index("After Suite Failed:")


# ============================================================================
# Spec pages
# ============================================================================


class TestSpecPage:
    """Tests for generate_spec_page and generate_spec_div."""

    def test_spec_page(self, ctx: RenderContext, two_spec_suite: SuiteResult, failing_spec: SpecResult) -> None:
        html = _page(lambda out: generate_spec_page(ctx, two_spec_suite, failing_spec, out))
        assert 'href="../../css/style.css"' in html
        assert 'href="../../specs/login.html"' in html
        assert '<script src="../../js/search_index.js"' in html
        assert "Pay by card" in html
        assert html.count(STEP_FAILURE_MARKER) == 1
        assert "Expected 200 but got 500" in html
        assert _balanced(html)

    def test_parse_errors_short_circuit(self, ctx: RenderContext, parse_error_spec: SpecResult) -> None:
        html = _page(lambda out: generate_spec_div(ctx, parse_error_spec, out))
        assert SPEC_ERRORS_MARKER in html
        assert "[Parse Error] Scenario heading expected" in html
        assert "Still valid" not in html
        assert "Visible only without errors" not in html
        assert _balanced(html)

    def test_validation_errors_render_body(self, ctx: RenderContext) -> None:
        spec = SpecResult(
            heading="No table",
            file_name="specs/no_table.spec",
            items=(TableDrivenScenario(scenario=Scenario(heading="Orphan row"), table_row_index=0),),
        )
        html = _page(lambda out: generate_spec_div(ctx, spec, out))
        assert SPEC_ERRORS_MARKER in html
        assert "[Validation Error]" in html
        assert "Orphan row" in html
        assert _balanced(html)

    def test_spec_before_hook_suppresses_scenarios(self, ctx: RenderContext) -> None:
        spec = SpecResult(
            heading="Hooked",
            file_name="specs/hooked.spec",
            failed=True,
            pre_hook_failure=HookFailure(error_message="before spec broke"),
            post_hook_failure=HookFailure(error_message="after spec broke"),
            items=(Scenario(heading="Never shown"),),
        )
        html = _page(lambda out: generate_spec_div(ctx, spec, out))
        assert "Before Spec Failed:" in html
        assert "After Spec Failed:" in html
        assert "Never shown" not in html
        assert _balanced(html)

    def test_table_driven_rows(self, ctx: RenderContext, table_driven_spec: SpecResult) -> None:
        html = _page(lambda out: generate_spec_div(ctx, table_driven_spec, out))
        assert "<div class='scenario-container passed' data-tablerow=0>" in html
        assert "<div class='scenario-container failed hidden' data-tablerow=1>" in html
        assert "<div class='scenario-container skipped hidden' data-tablerow=2>" in html
        assert "row-selector passed selected" in html
        assert "row-selector failed'" in html
        assert html.index("Before the table") < html.index("data-table") < html.index("After the table")
        assert _balanced(html)

    def test_spec_page_with_before_suite_failure(
        self, ctx: RenderContext, passing_spec: SpecResult, before_suite_failure: HookFailure
    ) -> None:
        suite = SuiteResult(pre_hook_failure=before_suite_failure, spec_results=(passing_spec,))
        html = _page(lambda out: generate_spec_page(ctx, suite, passing_spec, out))
        assert "Before Suite Failed:" in html
        assert '<aside class="sidebar">' not in html
        assert "Valid credentials" not in html


# ============================================================================
# Steps and items
# ============================================================================


class TestSteps:
    """Tests for step and item rendering."""

    def test_one_failure_block_per_failed_step(self, ctx: RenderContext) -> None:
        step = to_item(
            Step(
                result=ExecutionResult(
                    status=Status.FAILED,
                    error_message="boom",
                    stack_trace="at x",
                    messages=("retrying",),
                ),
                pre_hook_failure=HookFailure(error_message="before step"),
                post_hook_failure=HookFailure(error_message="after step"),
            )
        )
        html = _page(lambda out: generate_step(ctx, step, out))
        assert html.count(STEP_FAILURE_MARKER) == 1
        assert html.count(HOOK_FAILURE_MARKER) == 2
        assert html.index("Before Step Failed:") < html.index(STEP_FAILURE_MARKER) < html.index("After Step Failed:")
        assert "retrying" in html

    def test_failure_without_trace_has_no_block(self, ctx: RenderContext) -> None:
        step = to_item(Step(result=ExecutionResult(status=Status.FAILED, error_message="boom")))
        html = _page(lambda out: generate_step(ctx, step, out))
        assert STEP_FAILURE_MARKER not in html

    def test_skip_reason_after_step(self, ctx: RenderContext) -> None:
        step = to_item(Step(result=ExecutionResult(status=Status.SKIPPED, skip_reason="no browser")))
        html = _page(lambda out: generate_step(ctx, step, out))
        assert "Skipped Reason: no browser" in html
        assert "Execution Time" not in html

    def test_concept_renders_children(self, ctx: RenderContext, concept_step: Concept) -> None:
        html = _page(lambda out: generate_item(ctx, to_item(concept_step), out))
        assert html.count("<div class='step concept'>") == 2
        assert html.count("<div class='concept-steps'>") == 2
        assert "Click login" in html
        assert _balanced(html)

    def test_unknown_item(self, ctx: RenderContext) -> None:
        with pytest.raises(TypeError):
            generate_item(ctx, model.Table(headers=(), rows=()), io.StringIO())  # type: ignore[arg-type]
