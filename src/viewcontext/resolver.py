"""View resolution: turn view candidates into one template path.

Relative candidates are joined onto the configured views directory. A single
candidate is returned as-is without touching the filesystem; from several
candidates the first readable file wins.
"""

import logging
import os
from collections.abc import Sequence

logger = logging.getLogger(__name__)

ViewName = str | os.PathLike[str]
ViewCandidates = ViewName | Sequence[ViewName]


def is_readable_file(path: str) -> bool:
    """Return True if ``path`` is a regular file the process can read."""
    return os.path.isfile(path) and os.access(path, os.R_OK)


def resolve_path(candidate: ViewName, views_path: str | None = None) -> str:
    """Resolve one candidate against the views directory.

    Args:
        candidate: Relative or absolute template path
        views_path: Base directory for relative candidates

    Returns:
        Absolute candidates unchanged, relative ones joined onto views_path
    """
    candidate = os.fspath(candidate)
    if os.path.isabs(candidate) or not views_path:
        return candidate
    return os.path.join(os.fspath(views_path), candidate)


def as_candidates(view: ViewCandidates) -> list[ViewName]:
    """Normalize one view name or a sequence of them to a list."""
    if isinstance(view, (str, os.PathLike)):
        return [view]
    return list(view)


def find_view(view: ViewCandidates, views_path: str | None = None) -> str | None:
    """Pick the template to render from one or more candidates.

    Args:
        view: A view name or an ordered sequence of candidates
        views_path: Base directory for relative candidates

    Returns:
        Resolved path, or None if no candidate among several is readable
    """
    candidates = [resolve_path(c, views_path) for c in as_candidates(view)]

    if len(candidates) == 1:
        return candidates[0]

    for path in candidates:
        if is_readable_file(path):
            return path
        logger.debug("View candidate not readable: %s", path)

    return None
