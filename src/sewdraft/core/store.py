"""Shared key/value store for cross-part data within one draft.

The store is the only channel through which parts depend on each other: an
earlier part writes a derived quantity (say the back armhole length) and a
later part reads it. A fresh store is created for every draft and handed to
each part explicitly; nothing is global.

Parts run strictly one after another, so the store needs no locking. Its one
guarantee is that a write by part i is visible to every part that runs after
it.
"""

from collections.abc import Iterator
from typing import Any

from sewdraft.exceptions import DependencyOrderError, StoreError
from sewdraft.utils.logging import DraftLogger

_UNSET: Any = object()


class Store:
    """Per-draft key/value state with set/get/push semantics.

    Reading a key nobody wrote is a normal condition and returns None (or
    the supplied default), so parts can branch on presence. In strict mode,
    a read of an unwritten key without an explicit default raises
    DependencyOrderError instead, which catches a misconfigured part order
    early.

    Example:
        store = Store()
        store.set("sleevecap_ease", 0)
        store.push("cutlist", {"part": "back", "cut": 1})
        store.get("sleevecap_ease")  # 0
        store.get("missing")  # None
    """

    def __init__(self, strict: bool = False, logger: DraftLogger | None = None) -> None:
        """Initialize an empty store.

        Args:
            strict: Escalate reads of unwritten keys to DependencyOrderError
            logger: Optional draft logger that records writes
        """
        self.strict = strict
        self._logger = logger
        self._data: dict[str, Any] = {}
        self._writers: dict[str, str | None] = {}
        self._exported: dict[str, None] = {}
        self._part: str | None = None

    def bind(self, part: str | None) -> None:
        """Mark which part is currently executing."""
        self._part = part

    @property
    def current_part(self) -> str | None:
        return self._part

    def _record_write(self, key: str, operation: str, export: bool) -> None:
        self._writers[key] = self._part
        if export:
            self._exported[key] = None
        if self._logger is not None:
            self._logger.log_store_write(self._part, key, operation)

    def set(self, key: str, value: Any, *, export: bool = False) -> "Store":
        """Set a key, replacing any previous value.

        Args:
            key: Store key
            value: Any value (number, string, Path, ...)
            export: Include the key in the pattern document

        Returns:
            The store, so calls can be chained
        """
        self._data[key] = value
        self._record_write(key, "set", export)
        return self

    def set_if_unset(self, key: str, value: Any, *, export: bool = False) -> "Store":
        """Set a key only when nobody has written it yet."""
        if key not in self._data:
            self.set(key, value, export=export)
        return self

    def push(self, key: str, value: Any, *, export: bool = False) -> "Store":
        """Append to the list at a key, creating the list if needed.

        Raises:
            StoreError: If the key already holds a non-list value
        """
        current = self._data.get(key, _UNSET)
        if current is _UNSET:
            self._data[key] = [value]
        elif isinstance(current, list):
            current.append(value)
        else:
            raise StoreError(key, f"push onto a {type(current).__name__}, not a list")
        self._record_write(key, "push", export)
        return self

    def get(self, key: str, default: Any = _UNSET) -> Any:
        """Read a key.

        Args:
            key: Store key
            default: Value returned when the key is absent. Passing a default
                declares the key optional, so strict mode does not raise.

        Returns:
            The stored value, the default, or None

        Raises:
            DependencyOrderError: In strict mode, for an absent key read
                without a default
        """
        if key in self._data:
            return self._data[key]
        if default is not _UNSET:
            return default
        if self.strict:
            raise DependencyOrderError(key, self._part)
        return None

    def has(self, key: str) -> bool:
        """Check for a key. Never raises, even in strict mode."""
        return key in self._data

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def keys(self) -> list[str]:
        """Keys in write order."""
        return list(self._data)

    def writer_of(self, key: str) -> str | None:
        """Name of the part that last wrote a key, None if unwritten."""
        return self._writers.get(key)

    def exported(self) -> dict[str, Any]:
        """Entries tagged for the pattern document, in write order."""
        return {key: self._data[key] for key in self._exported}

    def to_dict(self) -> dict[str, Any]:
        """Snapshot of every entry."""
        return dict(self._data)
