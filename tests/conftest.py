"""Shared pytest fixtures for viewcontext tests.

Fixtures are organized by category:
- Views directory fixtures: temporary template trees
- View fixtures: preconfigured View instances
"""

import io
import logging
from pathlib import Path

import pytest

from viewcontext import View

# =============================================================================
# Views Directory Fixtures
# =============================================================================


@pytest.fixture
def views_dir(tmp_path: Path) -> Path:
    """Create a temporary views directory with sample templates."""
    views = tmp_path / "views"
    views.mkdir()

    (views / "greeting.j2").write_text("Hello, {{ name }}!\n")
    (views / "hello.py").write_text('print(f"Hello, {name}!")\n')
    (views / "empty.j2").write_text("")
    (views / "content.j2").write_text("{{ view.content('title', 'Untitled') }}\n")

    (views / "sidebar.j2").write_text(
        '{% do view.start_capture("sidebar") %}\n'
        "<li>{{ item }}</li>\n"
        '{% do view.end_capture("sidebar") %}\n'
        "Main body\n"
    )
    (views / "header.py").write_text(
        'view.start_capture("header")\n'
        'print("<h1>" + title + "</h1>")\n'
        'view.end_capture("header")\n'
        'print("body")\n'
    )
    (views / "unclosed.py").write_text(
        'print("before")\n'
        'view.start_capture("never_closed")\n'
        'print("inside")\n'
    )
    (views / "broken.py").write_text('print("partial")\nraise RuntimeError("template failed")\n')

    return views


# =============================================================================
# View Fixtures
# =============================================================================


@pytest.fixture
def sink() -> io.StringIO:
    """Stream standing in for the process output."""
    return io.StringIO()


@pytest.fixture
def view(views_dir: Path, sink: io.StringIO) -> View:
    """Create a view rooted at the sample views directory."""
    return View(
        {"views_path": str(views_dir), "this_alias": "view"},
        output=sink,
    )


@pytest.fixture
def reset_logging():
    """Restore the viewcontext logger after a test configures it."""
    logger = logging.getLogger("viewcontext")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
