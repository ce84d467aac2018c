"""Template executors.

- base: TemplateExecutor interface
- python: runs ``.py`` view scripts, capturing ``print()``
- jinja: renders Jinja2 templates
- registry: suffix to executor lookup
"""

from viewcontext.executors.base import TemplateExecutor
from viewcontext.executors.jinja import JinjaExecutor
from viewcontext.executors.python import PythonScriptExecutor
from viewcontext.executors.registry import ExecutorRegistry, default_registry

__all__ = [
    "TemplateExecutor",
    "JinjaExecutor",
    "PythonScriptExecutor",
    "ExecutorRegistry",
    "default_registry",
]
