"""Exceptions raised by the view context.

Template and executor failures are not wrapped; they propagate unchanged.
"""


class ViewError(Exception):
    """Base class for view context errors."""


class KeyNotFoundError(ViewError, KeyError):
    """Raised when a strict getter is asked for an item that is not set."""

    def __init__(self, store: str, key: str) -> None:
        self.store = store
        self.key = key
        self.message = f"{store.capitalize()} item not set: {key!r}"
        super().__init__(self.message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class CaptureStateError(ViewError):
    """Raised when capture calls are unbalanced (end without start)."""


class ExecutorNotFoundError(ViewError):
    """Raised when no template executor handles a view file."""

    def __init__(self, suffix: str, available: list[str]) -> None:
        self.suffix = suffix
        self.available = available
        super().__init__(
            f"No template executor registered for '{suffix}'. Available: {available}"
        )
