"""Executor for plain Python view scripts.

The script runs as a fresh module with the scope bound as globals. Anything
it prints lands in the view's output channel, so a view script is just:

    print(f"<h1>{title}</h1>")
"""

import logging
import runpy
from collections.abc import Mapping
from typing import Any

from viewcontext.buffering import OutputStack
from viewcontext.executors.base import TemplateExecutor

logger = logging.getLogger(__name__)


class PythonScriptExecutor(TemplateExecutor):
    """Runs ``.py`` view scripts with ``runpy``."""

    name = "python"

    def __init__(self, run_name: str = "__view__") -> None:
        """Initialize the executor.

        Args:
            run_name: ``__name__`` given to the executed script
        """
        self.run_name = run_name

    def execute(
        self,
        path: str,
        scope: Mapping[str, Any],
        output: OutputStack,
    ) -> None:
        logger.debug("Running view script %s with %d variables", path, len(scope))
        with output.redirect_stdout():
            runpy.run_path(path, init_globals=dict(scope), run_name=self.run_name)
