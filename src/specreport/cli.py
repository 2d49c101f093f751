from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path

from specreport import __version__
from specreport.config import PROJECT_ROOT_VAR, load_config
from specreport.errors import ErrorCode, handle_exception, is_verbose, set_verbose
from specreport.generator import PageCollisionError, ReportGenerationError, generate_reports
from specreport.rendering import RenderContext, RenderError
from specreport.results.loader import (
    SchemaValidationError,
    load_suite_result,
    read_suite_data,
    validate_suite_data,
)


def _failure_code(error: BaseException) -> ErrorCode:
    if isinstance(error, RenderError):
        return ErrorCode.E100
    if isinstance(error, PageCollisionError):
        return ErrorCode.E302
    return ErrorCode.E300


def _cmd_generate(args: argparse.Namespace) -> int:
    """Generate the HTML report for a suite result file."""
    config = load_config(
        env_file=args.env_file,
        cli_overrides={
            "project_root": args.project_root,
            "max_workers": args.max_workers,
            "overwrite_reports": False if args.no_overwrite else None,
        },
    )

    input_path = Path(args.input)
    try:
        suite = load_suite_result(input_path)
    except SchemaValidationError as e:
        handle_exception(e, ErrorCode.E003)
        return 1
    except ValueError as e:
        handle_exception(e, ErrorCode.E002)
        return 1

    report_dir = Path(args.out) if args.out else config.report_dir()
    print(f"Project: {suite.project_name or '-'}")
    print(f"Specs: {len(suite.spec_results)}")
    print(f"Report dir: {report_dir}")
    if config.env_file_path:
        print(f"Env file: {config.env_file_path}")

    try:
        context = RenderContext()
        result = generate_reports(
            suite,
            report_dir,
            config.project_root,
            context=context,
            max_workers=config.max_workers,
        )
    except RenderError as e:
        handle_exception(e, ErrorCode.E100)
        return 1
    except ReportGenerationError as e:
        for failure in e.failures:
            code = _failure_code(failure.error)
            handle_exception(failure.error, code, str(failure))
        return 1

    print()
    print(f"Pages written: {len(result.pages)}")
    print(f"Search index: {result.search_index}")
    print(f"Report: {report_dir / 'index.html'}")
    return 1 if suite.failed else 0


def _cmd_validate(args: argparse.Namespace) -> int:
    """Validate a suite result file against the schema."""
    input_path = Path(args.input)
    try:
        data = read_suite_data(input_path)
    except ValueError as e:
        handle_exception(e, ErrorCode.E002)
        return 1

    errors = validate_suite_data(data)
    if errors:
        print(f"✗ {input_path}: {len(errors)} error(s)")
        for error in errors:
            print(f"  - {error}")
        return 1

    print(f"✓ {input_path}: valid ({len(data.get('spec_results', []))} specs)")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="specreport",
        description="Generate static HTML reports and a search index from test suite results",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging and full tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    gen = sub.add_parser("generate", help="Render HTML report pages and the search index")
    gen.add_argument("--input", required=True, help="Suite result file (YAML or JSON)")
    gen.add_argument("--out", help="Output directory (default: <reports dir>/html-report)")
    gen.add_argument(
        "--project-root",
        dest="project_root",
        help=f"Root that spec file names are relative to (default: ${PROJECT_ROOT_VAR} or cwd)",
    )
    gen.add_argument("--env-file", dest="env_file", help=".env file to read (default: nearest .env)")
    gen.add_argument("--max-workers", dest="max_workers", type=int, help="Maximum concurrent page workers")
    gen.add_argument(
        "--no-overwrite",
        dest="no_overwrite",
        action="store_true",
        help="Write into a new timestamped directory instead of replacing the last report",
    )
    gen.set_defaults(func=_cmd_generate)

    val = sub.add_parser("validate", help="Check a suite result file against the schema")
    val.add_argument("--input", required=True, help="Suite result file (YAML or JSON)")
    val.set_defaults(func=_cmd_validate)
    return p


# Exceptions escaping a command, most specific first.
_EXIT_ERRORS: tuple[tuple[type[Exception], ErrorCode], ...] = (
    (FileNotFoundError, ErrorCode.E001),
    (ValueError, ErrorCode.E004),
    (OSError, ErrorCode.E301),
)


def _run(args: argparse.Namespace) -> int:
    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        for exc_type, code in _EXIT_ERRORS:
            if isinstance(e, exc_type):
                handle_exception(e, code)
                return 1
        if is_verbose():
            traceback.print_exc()
        else:
            print(f"Unexpected error: {e}", file=sys.stderr)
            print("Run with --verbose for the full traceback", file=sys.stderr)
        return 1


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    set_verbose(args.verbose)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )
    raise SystemExit(_run(args))


if __name__ == "__main__":
    main()
