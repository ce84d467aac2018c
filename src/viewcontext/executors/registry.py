"""Registry mapping template file suffixes to executors.

Adding a template language:
    1. Implement TemplateExecutor
    2. Register it for its suffixes
    3. No changes needed in the view
"""

import logging
import os
from typing import Any

from viewcontext.errors import ExecutorNotFoundError
from viewcontext.executors.base import TemplateExecutor
from viewcontext.executors.jinja import JinjaExecutor
from viewcontext.executors.python import PythonScriptExecutor

logger = logging.getLogger(__name__)

PYTHON_SUFFIXES = (".py",)
JINJA_SUFFIXES = (".j2", ".jinja", ".jinja2", ".html", ".txt")


class ExecutorRegistry:
    """Chooses the executor for a template by its file suffix."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._executors: dict[str, TemplateExecutor] = {}
        self._default: TemplateExecutor | None = None

    def register(
        self,
        suffix: str,
        executor: TemplateExecutor,
        is_default: bool = False,
    ) -> None:
        """Register an executor for a suffix.

        Args:
            suffix: File suffix, with or without the leading dot
            executor: Executor instance
            is_default: Use this executor for unregistered suffixes
        """
        self._executors[_normalize_suffix(suffix)] = executor
        if is_default:
            self._default = executor

    def get(self, path: str) -> TemplateExecutor:
        """Get the executor for a template path.

        Raises:
            ExecutorNotFoundError: If the suffix is unknown and no default is set
        """
        suffix = os.path.splitext(os.fspath(path))[1].lower()
        executor = self._executors.get(suffix)

        if executor is None:
            if self._default is None:
                raise ExecutorNotFoundError(suffix, self.list_suffixes())
            executor = self._default

        logger.debug("Using %s executor for %s", executor.name, path)
        return executor

    def list_suffixes(self) -> list[str]:
        """Get registered suffixes."""
        return sorted(self._executors)

    def get_metadata(self) -> dict[str, Any]:
        """Get registry metadata for logging and debugging."""
        return {
            "executors": {s: e.name for s, e in sorted(self._executors.items())},
            "default": self._default.name if self._default else None,
        }


def _normalize_suffix(suffix: str) -> str:
    suffix = suffix.lower()
    return suffix if suffix.startswith(".") else f".{suffix}"


def default_registry(jinja: JinjaExecutor | None = None) -> ExecutorRegistry:
    """Build a registry with the Python and Jinja2 executors.

    Args:
        jinja: Preconfigured Jinja executor (a default one is built otherwise)

    Returns:
        Registry with Jinja2 as the fallback executor
    """
    registry = ExecutorRegistry()
    python = PythonScriptExecutor()
    jinja = jinja or JinjaExecutor()

    for suffix in PYTHON_SUFFIXES:
        registry.register(suffix, python)
    for suffix in JINJA_SUFFIXES:
        registry.register(suffix, jinja, is_default=True)

    return registry
