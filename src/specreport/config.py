"""Runtime configuration for specreport.

Values come from three layers, highest first: command-line options, a
``.env`` file (given explicitly or found by walking up from the working
directory), and the process environment.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

PROJECT_ROOT_VAR = "SPECREPORT_PROJECT_ROOT"
REPORTS_DIR_VAR = "SPECREPORT_REPORTS_DIR"
OVERWRITE_VAR = "SPECREPORT_OVERWRITE_REPORTS"
MAX_WORKERS_VAR = "SPECREPORT_MAX_WORKERS"

DEFAULT_REPORTS_DIR = "reports"
HTML_REPORT_SUBDIR = "html-report"
RUN_DIR_FORMAT = "%Y-%m-%d %H.%M.%S"

_ENV_LINE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")
_BOOLS = {
    "1": True, "true": True, "yes": True, "on": True,
    "0": False, "false": False, "no": False, "off": False,
}


@dataclass
class Config:
    project_root: Path = Path(".")
    reports_dir: Path = Path(DEFAULT_REPORTS_DIR)
    overwrite_reports: bool = True
    max_workers: int | None = None
    env_file_path: Path | None = None

    def report_dir(self, now: datetime | None = None) -> Path:
        """Directory this run writes into.

        ``<project root>/<reports dir>/html-report`` when overwriting,
        otherwise a fresh timestamped directory below it.
        """
        root = self.project_root / self.reports_dir / HTML_REPORT_SUBDIR
        if self.overwrite_reports:
            return root
        return root / (now or datetime.now()).strftime(RUN_DIR_FORMAT)


def parse_bool(value: str) -> bool:
    try:
        return _BOOLS[value.strip().lower()]
    except KeyError:
        raise ValueError(f"Expected a boolean value, got {value!r}") from None


def parse_env_file(env_file: Path) -> dict[str, str]:
    """Read ``KEY=value`` pairs from a .env file.

    ``export`` prefixes, ``#`` comment lines and matching quotes around a
    value are understood; anything else that is not a pair is ignored. A
    missing file yields an empty dict.
    """
    if not env_file.exists():
        return {}

    values: dict[str, str] = {}
    for raw in env_file.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if line.startswith("#"):
            continue
        match = _ENV_LINE.match(line)
        if match is None:
            continue
        key, value = match.group(1), match.group(2).strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key] = value
    return values


def _find_env_file(start: Path | None = None) -> Path | None:
    """Nearest ``.env`` at or above ``start`` (default: the working directory).

    The walk ends at the first directory containing ``.git``, at the home
    directory, or at the filesystem root.
    """
    here = (start or Path.cwd()).resolve()
    try:
        home: Path | None = Path.home()
    except RuntimeError:
        home = None

    for directory in (here, *here.parents):
        candidate = directory / ".env"
        if candidate.exists():
            return candidate
        if directory == home or (directory / ".git").exists():
            break
    return None


def _max_workers(cli: Mapping[str, Any], settings: Mapping[str, str]) -> int | None:
    value = cli.get("max_workers")
    if value is None and settings.get(MAX_WORKERS_VAR):
        raw = settings[MAX_WORKERS_VAR]
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"{MAX_WORKERS_VAR} must be an integer, got {raw!r}") from None
    if value is not None and value < 1:
        raise ValueError(f"max_workers must be at least 1, got {value}")
    return value


def load_config(
    env_file: str | Path | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> Config:
    """Resolve the configuration for one run.

    Args:
        env_file: .env file to read; discovered from the working directory
            when omitted. A path that does not exist is ignored.
        cli_overrides: Command-line values keyed by ``Config`` field name.
            ``None`` means the option was not given.

    Raises:
        ValueError: If a configured value cannot be parsed.
    """
    env_path = Path(env_file) if env_file else _find_env_file()
    if env_path is not None and not env_path.exists():
        env_path = None

    settings = dict(os.environ)
    if env_path is not None:
        settings.update(parse_env_file(env_path))
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    if "overwrite_reports" in cli:
        overwrite = bool(cli["overwrite_reports"])
    elif settings.get(OVERWRITE_VAR):
        overwrite = parse_bool(settings[OVERWRITE_VAR])
    else:
        overwrite = True

    return Config(
        project_root=Path(cli.get("project_root") or settings.get(PROJECT_ROOT_VAR) or Path.cwd()),
        reports_dir=Path(cli.get("reports_dir") or settings.get(REPORTS_DIR_VAR) or DEFAULT_REPORTS_DIR),
        overwrite_reports=overwrite,
        max_workers=_max_workers(cli, settings),
        env_file_path=env_path,
    )
