"""Search index for the client-side spec/tag search box.

The index maps every tag to the spec pages carrying it (on the spec itself
or on any of its scenarios) and every spec title to the pages with that
title. It is written as a single script statement, ``var index = {...};``,
that the report pages include.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from specreport.adapter import to_html_file_name
from specreport.results import SpecResult, SuiteResult

SEARCH_INDEX_FILE = Path("js") / "search_index.js"
SEARCH_INDEX_VAR = "index"


@dataclass(frozen=True)
class SearchIndex:
    tags: dict[str, list[str]] = field(default_factory=dict)
    specs: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"tags": self.tags, "specs": self.specs}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))


class SearchIndexBuilder:
    """Accumulates de-duplicated (key, location) pairs in insertion order."""

    def __init__(self, project_root: Union[str, Path] = ".") -> None:
        self.project_root = project_root
        self._tags: dict[str, list[str]] = {}
        self._specs: dict[str, list[str]] = {}

    @staticmethod
    def _add(mapping: dict[str, list[str]], key: str, location: str) -> None:
        locations = mapping.setdefault(key, [])
        if location not in locations:
            locations.append(location)

    def add_tag(self, tag: str, location: str) -> None:
        self._add(self._tags, tag, location)

    def add_spec(self, title: str, location: str) -> None:
        self._add(self._specs, title, location)

    def add_spec_result(self, spec: SpecResult) -> None:
        location = to_html_file_name(spec.file_name, self.project_root)
        for tag in spec.tags:
            self.add_tag(tag, location)
        # Table-driven rows all map to the spec page.
        for scenario in spec.scenarios:
            for tag in scenario.tags:
                self.add_tag(tag, location)
        self.add_spec(spec.heading, location)

    def build(self) -> SearchIndex:
        return SearchIndex(
            tags={k: list(v) for k, v in self._tags.items()},
            specs={k: list(v) for k, v in self._specs.items()},
        )


def build_search_index(suite: SuiteResult, project_root: Union[str, Path] = ".") -> SearchIndex:
    """Build the index from every spec in the suite."""
    builder = SearchIndexBuilder(project_root)
    for spec in suite.spec_results:
        builder.add_spec_result(spec)
    return builder.build()


def render_search_index_script(index: SearchIndex, var_name: str = SEARCH_INDEX_VAR) -> str:
    return f"var {var_name} = {index.to_json()};"


def write_search_index(index: SearchIndex, report_dir: Path) -> Path:
    """Write ``js/search_index.js`` under the report dir and return its path."""
    path = report_dir / SEARCH_INDEX_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_search_index_script(index), encoding="utf-8")
    return path
