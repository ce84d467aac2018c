"""Executor for Jinja2 templates.

Templates are addressed by their resolved absolute path. Extra search paths
make ``{% include %}`` and ``{% extends %}`` work with relative names. The
``do`` extension is enabled so templates can drive captures through the view
alias:

    {% do view.start_capture("sidebar") %}
    <ul>...</ul>
    {% do view.end_capture("sidebar") %}

Output is streamed chunk by chunk into the output channel, so a capture
started halfway through a template intercepts everything after it.
"""

import logging
import os
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    TemplateNotFound,
    select_autoescape,
)

from viewcontext.buffering import OutputStack
from viewcontext.executors.base import TemplateExecutor

logger = logging.getLogger(__name__)


class AbsolutePathLoader(BaseLoader):
    """Loads templates whose name is an absolute filesystem path."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def get_source(
        self,
        environment: Environment,
        template: str,
    ) -> tuple[str, str, Callable[[], bool]]:
        if not os.path.isabs(template) or not os.path.isfile(template):
            raise TemplateNotFound(template)

        mtime = os.path.getmtime(template)
        with open(template, encoding=self.encoding) as f:
            source = f.read()

        def uptodate() -> bool:
            try:
                return os.path.getmtime(template) == mtime
            except OSError:
                return False

        return source, template, uptodate


class JinjaExecutor(TemplateExecutor):
    """Renders Jinja2 templates into the view's output channel."""

    name = "jinja"

    def __init__(
        self,
        search_paths: Sequence[str] | None = None,
        autoescape: bool | Sequence[str] = ("html", "xml"),
        trim_blocks: bool = True,
        lstrip_blocks: bool = True,
        encoding: str = "utf-8",
        filters: Mapping[str, Callable[..., Any]] | None = None,
    ) -> None:
        """Initialize the Jinja2 environment.

        Args:
            search_paths: Directories for relative include/extends names
            autoescape: True/False, or file extensions to autoescape
            trim_blocks: Remove the first newline after a block tag
            lstrip_blocks: Strip whitespace before a block tag
            encoding: Template file encoding
            filters: Extra filters to register
        """
        self.search_paths = list(search_paths or [])

        if isinstance(autoescape, bool):
            autoescape_setting: Any = autoescape
        else:
            autoescape_setting = select_autoescape(list(autoescape))

        self._env = Environment(
            loader=ChoiceLoader([
                AbsolutePathLoader(encoding),
                FileSystemLoader(self.search_paths, encoding=encoding),
            ]),
            autoescape=autoescape_setting,
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
            keep_trailing_newline=True,
            extensions=["jinja2.ext.do"],
        )

        if filters:
            self._env.filters.update(filters)

    @property
    def environment(self) -> Environment:
        """The underlying Jinja2 environment."""
        return self._env

    def execute(
        self,
        path: str,
        scope: Mapping[str, Any],
        output: OutputStack,
    ) -> None:
        template = self._env.get_template(os.path.abspath(path))
        logger.debug("Rendering Jinja template %s", template.filename)

        for chunk in template.generate(**scope):
            output.write(chunk)
