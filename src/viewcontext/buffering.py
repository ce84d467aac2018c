"""Nested output interception.

An ``OutputStack`` is the output channel a view writes to. While no buffer is
pushed, writes go straight to the sink (the process stdout unless another
stream was given). Each ``push`` starts intercepting writes into a fresh
buffer; the matching ``pop`` stops intercepting and returns what was written.
Buffers nest strictly: only the innermost one receives writes.
"""

import contextlib
import io
import sys
from collections.abc import Iterator
from typing import TextIO

from viewcontext.errors import CaptureStateError


class _StackWriter(io.TextIOBase):
    """File-like adapter that forwards writes to an OutputStack."""

    def __init__(self, stack: "OutputStack") -> None:
        super().__init__()
        self._stack = stack

    def writable(self) -> bool:
        return True

    def write(self, text: str) -> int:
        self._stack.write(text)
        return len(text)


class OutputStack:
    """Strictly nested stack of output buffers over a sink stream."""

    def __init__(self, sink: TextIO | None = None) -> None:
        """Initialize the stack.

        Args:
            sink: Stream receiving unbuffered output. When None, the current
                ``sys.stdout`` is looked up on every write.
        """
        self._sink = sink
        self._pinned_sink: TextIO | None = None
        self._buffers: list[io.StringIO] = []

    @property
    def sink(self) -> TextIO:
        """Stream receiving output while no buffer is active."""
        if self._pinned_sink is not None:
            return self._pinned_sink
        if self._sink is not None:
            return self._sink
        return sys.stdout

    @property
    def depth(self) -> int:
        """Number of active buffers."""
        return len(self._buffers)

    def write(self, text: str) -> None:
        """Write text to the innermost buffer, or to the sink."""
        if not text:
            return
        if self._buffers:
            self._buffers[-1].write(text)
        else:
            self.sink.write(text)

    def push(self) -> int:
        """Start intercepting output.

        Returns:
            Depth before the push; pass it to ``unwind`` to restore this level
        """
        level = len(self._buffers)
        self._buffers.append(io.StringIO())
        return level

    def pop(self) -> str:
        """Stop the innermost interception and return its text.

        Raises:
            CaptureStateError: If no buffer is active
        """
        if not self._buffers:
            raise CaptureStateError("No output buffer to release")
        return self._buffers.pop().getvalue()

    def unwind(self, level: int, flush: bool = True) -> int:
        """Release buffers above ``level``.

        Args:
            level: Depth to return to, as returned by ``push``
            flush: Write each released buffer's text outward; when False the
                text is dropped

        Returns:
            Number of buffers released
        """
        released = 0
        while len(self._buffers) > level:
            text = self.pop()
            if flush:
                self.write(text)
            released += 1
        return released

    @contextlib.contextmanager
    def redirect_stdout(self) -> Iterator[None]:
        """Route ``print()`` and other ``sys.stdout`` writes into this stack.

        The sink is pinned to the stream that was current on entry so that
        unbuffered output does not loop back into the redirect.
        """
        previous = self._pinned_sink
        self._pinned_sink = self.sink
        try:
            with contextlib.redirect_stdout(_StackWriter(self)):
                yield
        finally:
            self._pinned_sink = previous

    def __repr__(self) -> str:
        return f"OutputStack(depth={self.depth})"
