"""viewcontext - view/template data container.

A View holds content items and configuration items, captures rendered output
into named content slots, and renders template files (Python scripts or
Jinja2 templates) with a data scope merged in.
"""

from viewcontext.config import ViewConfig, load_config
from viewcontext.errors import (
    CaptureStateError,
    ExecutorNotFoundError,
    KeyNotFoundError,
    ViewError,
)
from viewcontext.view import View

__version__ = "0.1.0"
__author__ = "viewcontext Contributors"

__all__ = [
    "View",
    "ViewConfig",
    "load_config",
    "ViewError",
    "KeyNotFoundError",
    "CaptureStateError",
    "ExecutorNotFoundError",
]
