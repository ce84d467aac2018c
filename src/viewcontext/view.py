"""The view context.

A ``View`` holds two item stores, content and configuration, and renders
template files with a data scope. Templates can capture part of their output
into a named content item and read it back later, which is how layouts are
built:

    view = View({"views_path": "templates", "this_alias": "view"})
    view.set_content_item("title", "Home")
    html = view.render_to_string(["home.custom.j2", "home.j2"], {"user": user})

Capturing from Python code:

    view.start_capture("sidebar")
    view.write("<ul>...</ul>")
    view.end_capture("sidebar")

    with view.capture("footer"):
        view.write("...")

A view is not thread-safe; confine each instance to one thread at a time.
"""

import contextlib
import logging
import os
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, TextIO

from markupsafe import Markup

from viewcontext.buffering import OutputStack
from viewcontext.config import (
    CONFIG_ENCODING,
    CONFIG_THIS_ALIAS,
    CONFIG_VIEWS_PATH,
    JinjaSettings,
    ViewConfig,
)
from viewcontext.errors import CaptureStateError, KeyNotFoundError
from viewcontext.executors import (
    ExecutorRegistry,
    JinjaExecutor,
    default_registry,
)
from viewcontext.resolver import ViewCandidates, find_view
from viewcontext.store import ItemStore
from viewcontext.utils.logging import log_structured

logger = logging.getLogger(__name__)


def _present(content_id: str | None) -> bool:
    return content_id is not None and content_id != ""


class View:
    """Content and configuration container that renders templates.

    Attributes:
        executors: Registry choosing the executor for each template file
    """

    def __init__(
        self,
        config: Mapping[str, Any] | ViewConfig | None = None,
        content: Mapping[str, Any] | None = None,
        executors: ExecutorRegistry | None = None,
        output: TextIO | None = None,
    ) -> None:
        """Initialize the view.

        Args:
            config: Configuration items, or a ViewConfig
            content: Initial content items
            executors: Executor registry. By default the Python and Jinja2
                executors, with ``views_path`` as the Jinja2 search path and
                the ``encoding`` config item as the template encoding.
            output: Stream for unbuffered output (current stdout by default)
        """
        jinja = JinjaSettings()
        if isinstance(config, ViewConfig):
            jinja = config.jinja
            config = config.to_items()

        self._config = ItemStore("config", {CONFIG_VIEWS_PATH: "", CONFIG_THIS_ALIAS: None})
        self._config.set_items(config or {})
        self._content = ItemStore("content", content)
        # (content id, output depth before the frame's buffer was pushed)
        self._captures: list[tuple[str | None, int]] = []
        self._capture_floor = 0
        self._output = OutputStack(output)
        self.executors = executors or self._default_executors(jinja)

    @classmethod
    def from_config(cls, config: ViewConfig, **kwargs: Any) -> "View":
        """Build a view from loaded configuration.

        Same as ``View(config, **kwargs)``.
        """
        return cls(config, **kwargs)

    def _default_executors(self, jinja: JinjaSettings) -> ExecutorRegistry:
        # Search paths are fixed here; a views_path changed later only
        # affects view resolution, not Jinja2 include/extends lookups.
        search_paths = [os.fspath(p) for p in jinja.search_paths]
        views_path = self._config_value(CONFIG_VIEWS_PATH)
        if views_path and os.fspath(views_path) not in search_paths:
            search_paths.insert(0, os.fspath(views_path))

        executor = JinjaExecutor(
            search_paths=search_paths,
            autoescape=jinja.autoescape,
            trim_blocks=jinja.trim_blocks,
            lstrip_blocks=jinja.lstrip_blocks,
            encoding=self._config_value(CONFIG_ENCODING) or "utf-8",
        )
        return default_registry(executor)

    # =========================================================================
    # Content items
    # =========================================================================

    def get_content_item(self, content_id: str) -> Any:
        """Get a content item.

        Raises:
            KeyNotFoundError: If the item is not set
        """
        return self._content.get_item(content_id)

    def get_content_items(self, content_ids: Iterable[str] | None = None) -> dict[str, Any]:
        """Get the named content items, or all of them when none are named."""
        return self._content.get_items(content_ids)

    def set_content_item(self, content_id: str, value: Any) -> None:
        self._content.set_item(content_id, value)

    def set_content_items(self, items: Mapping[str, Any]) -> None:
        self._content.set_items(items)

    def unset_content_item(self, content_id: str) -> None:
        self._content.unset_item(content_id)

    def unset_content_items(self, content_ids: Iterable[str]) -> None:
        self._content.unset_items(content_ids)

    def has_content_item(self, content_id: str) -> bool:
        """Return True if the item is set, even to None."""
        return self._content.has_item(content_id)

    def content(self, content_id: str, default: Any = None) -> Any:
        """Get a content item, or ``default`` if it is not usable.

        Shorthand meant for templates. What counts as usable is decided by
        ``get_defaulted_content``.
        """
        return self.get_defaulted_content(content_id, default)

    def get_defaulted_content(self, content_id: str, default: Any) -> Any:
        """Decide between a content item and its default.

        Returns ``default`` when the item is None or not set. Subclass and
        override for custom logic (for example, treating blank strings as
        missing).

        Args:
            content_id: Content item identifier
            default: Fallback value

        Returns:
            The content item value or ``default``
        """
        try:
            value = self.get_content_item(content_id)
        except KeyNotFoundError:
            return default
        return default if value is None else value

    # =========================================================================
    # Configuration items
    # =========================================================================

    def get_config_item(self, config_id: str) -> Any:
        """Get a configuration item.

        Raises:
            KeyNotFoundError: If the item is not set
        """
        return self._config.get_item(config_id)

    def get_config_items(self, config_ids: Iterable[str] | None = None) -> dict[str, Any]:
        return self._config.get_items(config_ids)

    def set_config_item(self, config_id: str, value: Any) -> None:
        self._config.set_item(config_id, value)

    def set_config_items(self, items: Mapping[str, Any]) -> None:
        self._config.set_items(items)

    def unset_config_item(self, config_id: str) -> None:
        self._config.unset_item(config_id)

    def unset_config_items(self, config_ids: Iterable[str]) -> None:
        self._config.unset_items(config_ids)

    def has_config_item(self, config_id: str) -> bool:
        return self._config.has_item(config_id)

    def _config_value(self, config_id: str) -> Any:
        if self._config.has_item(config_id):
            return self._config.get_item(config_id)
        return None

    # =========================================================================
    # Output and capture
    # =========================================================================

    @property
    def capturing(self) -> int:
        """Number of open capture frames."""
        return len(self._captures)

    def write(self, text: str) -> None:
        """Emit text on the current output channel."""
        self._output.write(str(text))

    def start_capture(self, content_id: str | None = None) -> None:
        """Begin capturing output into a content item.

        Args:
            content_id: Item to store the captured text in. May be left out
                and given to ``end_capture`` instead.
        """
        depth = self._output.push()
        self._captures.append((content_id, depth))

    def end_capture(self, content_id: str | None = None) -> str | None:
        """Finish the most recent capture.

        The captured output is always released. It is stored when the start
        and end identifiers agree, or when only one of them was given; it is
        discarded when they conflict or when neither was given. Stored text is
        ``Markup``, so autoescaping templates print it as-is.

        Args:
            content_id: Expected identifier of the capture being ended

        Returns:
            Identifier the text was stored under, or None if discarded

        Raises:
            CaptureStateError: If no capture is open
        """
        if len(self._captures) <= self._capture_floor:
            raise CaptureStateError(
                f"end_capture({content_id!r}) called with no capture in progress"
            )

        start_id, _ = self._captures.pop()
        text = self._output.pop()

        if _present(start_id) and _present(content_id):
            target = start_id if start_id == content_id else None
        elif _present(start_id):
            target = start_id
        elif _present(content_id):
            target = content_id
        else:
            target = None

        if target is None:
            log_structured(
                logger,
                logging.WARNING,
                "Discarded capture: start id %r does not match end id %r",
                start_id,
                content_id,
                start_id=start_id,
                end_id=content_id,
                length=len(text),
            )
            return None

        self.set_content_item(target, Markup(text))
        log_structured(
            logger,
            logging.DEBUG,
            "Captured %d characters into %r",
            len(text),
            target,
            content_id=target,
            length=len(text),
        )
        return target

    @contextlib.contextmanager
    def capture(self, content_id: str) -> Iterator["View"]:
        """Capture output written inside the block into a content item.

        If the block raises, the capture is abandoned: the buffer is released,
        nothing is stored and the exception propagates. If the block already
        ended this capture with ``end_capture``, nothing more is done on exit.
        """
        self.start_capture(content_id)
        level = len(self._captures)
        try:
            yield self
        except BaseException:
            if self._unwind_captures(level - 1, flush=False):
                logger.debug("Abandoned capture %r after error", content_id)
            raise

        if len(self._captures) < level:
            logger.debug("Capture %r was ended inside its block", content_id)
            return
        self._unwind_captures(level)
        self.end_capture(content_id)

    def _unwind_captures(self, level: int, flush: bool = True) -> list[str | None]:
        """Close capture frames above ``level`` without storing them.

        Args:
            level: Number of capture frames to keep
            flush: Write the closed frames' text outward instead of dropping it

        Returns:
            Identifiers of the closed frames, outermost first
        """
        if len(self._captures) <= level:
            return []

        dropped = [content_id for content_id, _ in self._captures[level:]]
        depth = self._captures[level][1]
        del self._captures[level:]
        self._output.unwind(depth, flush=flush)

        if flush:
            logger.warning("Closed %d unterminated capture(s): %r", len(dropped), dropped)
        return dropped

    # =========================================================================
    # Rendering
    # =========================================================================

    def find_view(self, view: ViewCandidates) -> str | None:
        """Resolve view candidates against the ``views_path`` config item.

        A single candidate is returned without checking the filesystem; of
        several, the first readable file wins.

        Returns:
            Template path, or None if no candidate among several is readable
        """
        return find_view(view, self._config_value(CONFIG_VIEWS_PATH))

    def build_scope(self, data: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Assemble the variables a template sees.

        The view is bound under the ``this_alias`` config item when one is
        set; a data entry with the same name is dropped.
        """
        scope = dict(data or {})
        alias = self._config_value(CONFIG_THIS_ALIAS)

        if alias:
            if alias in scope:
                logger.debug("Dropping data entry %r: reserved for the view", alias)
                del scope[alias]
            scope[alias] = self

        return scope

    def render(
        self,
        view: ViewCandidates,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        """Render a template to the current output channel.

        Does nothing if none of several candidates is readable. Errors from
        the template propagate.

        Args:
            view: View name or ordered candidates
            data: Variables exposed to the template
        """
        path = self.find_view(view)
        if path is None:
            logger.debug("No readable view among %r", view)
            return

        executor = self.executors.get(path)
        executor.execute(path, self.build_scope(data), self._output)

    def render_to_string(
        self,
        view: ViewCandidates,
        data: Mapping[str, Any] | None = None,
    ) -> Markup:
        """Render a template and return its output instead of emitting it.

        Returns an empty string if none of several candidates is readable.
        Captures the template leaves open are closed and flushed into the
        result. The result is ``Markup`` so it can be stored as content and
        printed unescaped by an autoescaping layout.
        """
        captures = len(self._captures)
        floor = self._capture_floor
        self._capture_floor = captures
        self._output.push()
        try:
            self.render(view, data)
        finally:
            self._unwind_captures(captures)
            text = self._output.pop()
            self._capture_floor = floor
        return Markup(text)

    def __repr__(self) -> str:
        return (
            f"View(content={len(self._content)}, config={len(self._config)}, "
            f"capturing={self.capturing})"
        )
