"""Keyed item store backing both content and configuration.

A store distinguishes an item that is absent from one that is set to None:
strict getters raise for the former, ``has_item`` is True for the latter.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from viewcontext.errors import KeyNotFoundError


class ItemStore:
    """A named mapping of string identifiers to arbitrary values.

    Attributes:
        name: Store label used in error messages ("content", "config")
    """

    def __init__(self, name: str, items: Mapping[str, Any] | None = None) -> None:
        """Initialize the store.

        Args:
            name: Store label
            items: Initial items
        """
        self.name = name
        self._items: dict[str, Any] = dict(items or {})

    # =========================================================================
    # Reading
    # =========================================================================

    def get_item(self, key: str) -> Any:
        """Get one item.

        Args:
            key: Item identifier

        Returns:
            Stored value (may be None)

        Raises:
            KeyNotFoundError: If the item is not set
        """
        try:
            return self._items[key]
        except KeyError:
            raise KeyNotFoundError(self.name, key) from None

    def get_items(self, keys: Iterable[str] | None = None) -> dict[str, Any]:
        """Get several items, or all of them.

        Args:
            keys: Item identifiers; None or empty returns every item. A single
                string is one identifier.

        Returns:
            New dictionary of the requested items

        Raises:
            KeyNotFoundError: If any requested item is not set
        """
        if isinstance(keys, str):
            keys = [keys]
        keys = list(keys or [])
        if not keys:
            return dict(self._items)

        return {key: self.get_item(key) for key in keys}

    def has_item(self, key: str) -> bool:
        """Return True if the item is set, even when its value is None."""
        return key in self._items

    # =========================================================================
    # Writing
    # =========================================================================

    def set_item(self, key: str, value: Any) -> None:
        self._items[key] = value

    def set_items(self, items: Mapping[str, Any]) -> None:
        """Merge a mapping into the store, overwriting existing keys."""
        for key, value in items.items():
            self.set_item(key, value)

    def unset_item(self, key: str) -> None:
        """Remove one item. Removing an absent item is a no-op."""
        self._items.pop(key, None)

    def unset_items(self, keys: Iterable[str]) -> None:
        if isinstance(keys, str):
            keys = [keys]
        for key in keys:
            self.unset_item(key)

    # =========================================================================
    # Container protocol
    # =========================================================================

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ItemStore(name={self.name!r}, keys={sorted(self._items)!r})"
