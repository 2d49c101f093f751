"""Tests for the search index."""
from __future__ import annotations

import json
from pathlib import Path

from specreport.results import Scenario, SpecResult, SuiteResult, TableDrivenScenario
from specreport.search_index import (
    SEARCH_INDEX_FILE,
    SearchIndex,
    SearchIndexBuilder,
    build_search_index,
    render_search_index_script,
    write_search_index,
)


def _parse_script(script: str) -> dict:
    prefix, suffix = "var index = ", ";"
    assert script.startswith(prefix)
    assert script.endswith(suffix)
    return json.loads(script[len(prefix):-len(suffix)])


class TestSearchIndexBuilder:
    """Tests for SearchIndexBuilder."""

    def test_locations_deduplicated_in_order(self) -> None:
        builder = SearchIndexBuilder()
        builder.add_tag("smoke", "a.html")
        builder.add_tag("smoke", "b.html")
        builder.add_tag("smoke", "a.html")
        assert builder.build().tags == {"smoke": ["a.html", "b.html"]}

    def test_spec_and_scenario_tags_share_location(self, failing_spec: SpecResult) -> None:
        builder = SearchIndexBuilder()
        builder.add_spec_result(failing_spec)
        index = builder.build()
        assert index.tags == {
            "shop": ["specs/shop/checkout.html"],
            "payments": ["specs/shop/checkout.html"],
        }
        assert index.specs == {"Checkout": ["specs/shop/checkout.html"]}

    def test_untagged_spec_only_indexed_by_title(self, passing_spec: SpecResult) -> None:
        builder = SearchIndexBuilder()
        builder.add_spec_result(passing_spec)
        index = builder.build()
        assert index.tags == {}
        assert index.specs == {"Login": ["specs/login.html"]}

    def test_table_driven_scenario_tags(self) -> None:
        spec = SpecResult(
            heading="Rows",
            file_name="rows.spec",
            items=(
                TableDrivenScenario(scenario=Scenario(heading="r", tags=("data",)), table_row_index=0),
                TableDrivenScenario(scenario=Scenario(heading="r", tags=("data", "slow")), table_row_index=1),
            ),
        )
        builder = SearchIndexBuilder()
        builder.add_spec_result(spec)
        assert builder.build().tags == {"data": ["rows.html"], "slow": ["rows.html"]}

    def test_build_returns_copies(self) -> None:
        builder = SearchIndexBuilder()
        builder.add_spec("A", "a.html")
        first = builder.build()
        builder.add_spec("A", "b.html")
        assert first.specs == {"A": ["a.html"]}


class TestBuildSearchIndex:
    """Tests for build_search_index over a whole suite."""

    def test_same_title_maps_to_all_pages(self) -> None:
        suite = SuiteResult(
            spec_results=(
                SpecResult(heading="Login", file_name="web/login.spec", tags=("auth",)),
                SpecResult(heading="Login", file_name="api/login.spec", tags=("auth",)),
            )
        )
        index = build_search_index(suite)
        assert index.specs == {"Login": ["web/login.html", "api/login.html"]}
        assert index.tags == {"auth": ["web/login.html", "api/login.html"]}

    def test_absolute_file_names(self, project_root: str) -> None:
        suite = SuiteResult(
            spec_results=(SpecResult(heading="A", file_name=f"{project_root}/specs/a.spec"),)
        )
        assert build_search_index(suite, project_root).specs == {"A": ["specs/a.html"]}


class TestSearchIndexScript:
    """Tests for the serialized script."""

    def test_script_format(self) -> None:
        index = SearchIndex(tags={"smoke": ["a.html"]}, specs={"Login": ["a.html"]})
        script = render_search_index_script(index)
        assert script == 'var index = {"tags":{"smoke":["a.html"]},"specs":{"Login":["a.html"]}};'

    def test_empty_index(self) -> None:
        assert _parse_script(render_search_index_script(SearchIndex())) == {"tags": {}, "specs": {}}

    def test_non_ascii_kept(self) -> None:
        index = SearchIndex(specs={"Überweisung": ["u.html"]})
        assert "Überweisung" in render_search_index_script(index)

    def test_write_search_index(self, tmp_path: Path, two_spec_suite: SuiteResult) -> None:
        index = build_search_index(two_spec_suite)
        path = write_search_index(index, tmp_path)
        assert path == tmp_path / SEARCH_INDEX_FILE
        data = _parse_script(path.read_text(encoding="utf-8"))
        assert data["specs"] == {"Login": ["specs/login.html"], "Checkout": ["specs/shop/checkout.html"]}
        assert data["tags"]["payments"] == ["specs/shop/checkout.html"]
