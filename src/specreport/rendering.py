"""Rendering context: the compiled section templates for one invocation.

A context is built once and passed down to every page worker. It holds
no per-page state.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, TextIO

import markdown as markdown_lib
import nh3
from jinja2 import DictLoader, Environment, StrictUndefined, Template, TemplateError
from markupsafe import Markup, escape

from specreport.results import Status
from specreport.templates import SECTIONS

logger = logging.getLogger(__name__)

_STATUS_CLASSES = {
    Status.PASSED: "passed",
    Status.FAILED: "failed",
    Status.SKIPPED: "skipped",
    Status.NOT_EXECUTED: "not-executed",
}


class RenderError(RuntimeError):
    """A section template is missing, invalid, or failed to render."""


def parse_markdown(text: str) -> str:
    return markdown_lib.markdown(text)


def sanitize_html(html: str) -> str:
    return nh3.clean(html)


def encode_newlines(text: str) -> Markup:
    """Escape text and turn newlines into ``<br/>``."""
    return Markup(str(escape(text)).replace("\n", "<br/>"))


def status_class(status: Status) -> str:
    return _STATUS_CLASSES[status]


class RenderContext:
    """Compiled section templates keyed by section name.

    Raises:
        RenderError: If any section fails to compile.
    """

    def __init__(self, sections: Optional[Mapping[str, str]] = None) -> None:
        sections = dict(SECTIONS if sections is None else sections)
        self._env = Environment(
            loader=DictLoader(sections),
            autoescape=True,
            undefined=StrictUndefined,
        )
        self._env.filters["markdown"] = parse_markdown
        self._env.filters["sanitize"] = sanitize_html
        self._env.filters["encode_newlines"] = encode_newlines
        self._env.filters["status_class"] = status_class

        self._templates: dict[str, Template] = {}
        for name in sections:
            try:
                self._templates[name] = self._env.get_template(name)
            except TemplateError as e:
                raise RenderError(f"Cannot compile section template {name!r}: {e}") from e
        logger.debug("Compiled %d section templates", len(self._templates))

    @property
    def section_names(self) -> list[str]:
        return list(self._templates)

    def render(self, section: str, out: TextIO, data: Any = None) -> None:
        """Render one section straight into ``out``.

        Write errors on ``out`` propagate unchanged; template problems are
        raised as RenderError.
        """
        template = self._templates.get(section)
        if template is None:
            raise RenderError(f"Unknown section template: {section!r}")
        try:
            for chunk in template.generate(data=data):
                out.write(chunk)
        except TemplateError as e:
            raise RenderError(f"Failed to render section {section!r}: {e}") from e
