"""Generate the full report: index page, spec pages and search index.

Pages are independent: one worker renders the index page and one worker
renders each spec page, all reading the same immutable result tree. The
search index is built after every page worker has finished.

A failing worker does not cancel its siblings. Every page that can be
written is written, then all failures are reported together. ``index.html``
belongs to the aggregate page; a spec whose page location is already taken
is reported as a failure instead of overwriting it.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

from specreport.adapter import to_html_file_name
from specreport.pipeline import generate_failure_page, generate_index_page, generate_spec_page
from specreport.rendering import RenderContext
from specreport.results import SuiteResult
from specreport.search_index import build_search_index, write_search_index

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


@dataclass(frozen=True)
class PageFailure:
    """A page that could not be written."""

    page: Path
    error: BaseException

    def __str__(self) -> str:
        return f"{self.page}: {self.error}"


class PageCollisionError(ValueError):
    """Two documents map to the same page location."""


class ReportGenerationError(RuntimeError):
    """One or more pages failed; carries every failure."""

    def __init__(self, failures: list[PageFailure]) -> None:
        self.failures = failures
        details = "; ".join(str(f) for f in failures)
        super().__init__(f"Failed to generate {len(failures)} page(s): {details}")


@dataclass
class GenerationResult:
    """Files written by one generation run."""

    report_dir: Path
    pages: list[Path] = field(default_factory=list)
    search_index: Optional[Path] = None


def _write_page(path: Path, render: Callable[[TextIO], None]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as out:
        render(out)
    logger.debug("Wrote %s", path)
    return path


def generate_reports(
    suite: SuiteResult,
    report_dir: Path,
    project_root: Union[str, Path] = ".",
    *,
    context: Optional[RenderContext] = None,
    max_workers: Optional[int] = None,
) -> GenerationResult:
    """Write all report documents for ``suite`` under ``report_dir``.

    Args:
        suite: The execution result tree.
        report_dir: Output directory, created if missing.
        project_root: Root that spec file names are relative to.
        context: Compiled section templates; built here if omitted.
        max_workers: Page worker limit (default: ThreadPoolExecutor's).

    Returns:
        GenerationResult listing the written files.

    Raises:
        RenderError: If the section templates fail to compile.
        ReportGenerationError: If any page could not be written. Raised
            after every other page and the search index are written.
    """
    ctx = context or RenderContext()
    report_dir.mkdir(parents=True, exist_ok=True)
    result = GenerationResult(report_dir=report_dir)
    index_path = report_dir / INDEX_FILE
    failures: list[PageFailure] = []

    if suite.pre_hook_failure is not None:
        logger.info("Before-suite hook failed, writing failure page only")
        try:
            result.pages.append(
                _write_page(index_path, lambda out: generate_failure_page(ctx, suite, out, project_root))
            )
        except Exception as e:
            logger.error("Failed to write %s: %s", index_path, e)
            failures.append(PageFailure(page=index_path, error=e))
    else:
        jobs: dict[Path, Callable[[TextIO], None]] = {
            index_path: lambda out: generate_index_page(ctx, suite, out, project_root),
        }
        owners: dict[Path, str] = {index_path: "the index page"}
        for spec in suite.spec_results:
            page = report_dir / to_html_file_name(spec.file_name, project_root)
            source = spec.file_name or "<empty file name>"
            if page in jobs:
                error = PageCollisionError(f"{source} maps to the page already used by {owners[page]}")
                logger.error("Skipping %s: %s", page, error)
                failures.append(PageFailure(page=page, error=error))
                continue
            jobs[page] = lambda out, spec=spec: generate_spec_page(ctx, suite, spec, out, project_root)
            owners[page] = source

        logger.info("Writing %d page(s) to %s", len(jobs), report_dir)
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="page") as pool:
            futures: dict[Future[Path], Path] = {
                pool.submit(_write_page, page, render): page for page, render in jobs.items()
            }
            wait(futures)

        # Submission order, independent of completion order.
        for future, page in futures.items():
            error = future.exception()
            if error is None:
                result.pages.append(future.result())
            else:
                logger.error("Failed to write %s: %s", page, error)
                failures.append(PageFailure(page=page, error=error))

    index = build_search_index(suite, project_root)
    result.search_index = write_search_index(index, report_dir)

    if failures:
        raise ReportGenerationError(failures)
    return result
