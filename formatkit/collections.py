"""
formatkit Collections
"""

# Standard library -----------------------------------------------------------------------------------------------------
from collections.abc import Mapping, Iterable, Iterator, KeysView, ValuesView, ItemsView
from enum import Enum
from typing import Any, Generic, TypeVar

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import FormatOptionError
from .tools import fmt_value

# Classes --------------------------------------------------------------------------------------------------------------

K = TypeVar("K")
V = TypeVar("V")
E = TypeVar("E", bound=Enum)


class BiDirectionalMap(Mapping[K, V], Generic[K, V]):
    """
    A bidirectional map with Mapping-compatible API on the forward direction.

    - Forward direction (key -> value) implements the stdlib Mapping protocol.
      Membership (x in bimap) applies to KEYS only, like dict.
    - Reverse direction (value -> key) available via get_key(value) and has_value(value).
    - Enforces uniqueness of both keys and values (both must be hashable).
    """

    def __init__(self, initial: Mapping[K, V] | Iterable[tuple[K, V]] | None = None) -> None:
        self._forward_map: dict[K, V] = {}
        self._backward_map: dict[V, K] = {}
        if initial:
            self.update(initial)

    def __getitem__(self, key: K) -> V:
        return self._forward_map[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._forward_map)

    def __len__(self) -> int:
        return len(self._forward_map)

    def keys(self) -> KeysView[K]:
        return self._forward_map.keys()

    def values(self) -> ValuesView[V]:
        return self._forward_map.values()

    def items(self) -> ItemsView[K, V]:
        return self._forward_map.items()

    def get_key(self, value: V) -> K:
        """Lookup key by value."""
        return self._backward_map[value]

    def has_value(self, value: V) -> bool:
        """True if value exists in reverse map."""
        return value in self._backward_map

    def add(self, key: K, value: V) -> None:
        """
        Add a key-value pair; both key and value must be unique.

        Raises:
            ValueError if key already exists or value already exists (mapped from a different key).
        """
        if key in self._forward_map:
            raise ValueError(f"Key {fmt_value(key)} already exists (maps to {self._forward_map[key]!r})")
        if value in self._backward_map:
            raise ValueError(f"Value {fmt_value(value)} already exists (mapped from {self._backward_map[value]!r})")
        self._forward_map[key] = value
        self._backward_map[value] = key

    def update(self, other: Mapping[K, V] | Iterable[tuple[K, V]]) -> None:
        """Bulk add. Enforces uniqueness constraints across all pairs."""
        iterable = other.items() if isinstance(other, Mapping) else other
        for k, v in iterable:
            self.add(k, v)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._forward_map!r})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Mapping):
            return dict(self._forward_map.items()) == dict(other.items())
        return NotImplemented


class LabelMap(BiDirectionalMap[E, str]):
    """
    Read-only enum member <-> option label table for one formatter option.

    Tables are written out by hand next to their enum, one entry per member, and built once
    at import time. The option name is used in validation errors.

    Examples:
        >>> class Width(Enum):
        ...     LONG = 1
        ...     SHORT = 2
        >>> WIDTH_LABELS = LabelMap("width", {Width.LONG: "long", Width.SHORT: "short"})
        >>> WIDTH_LABELS.parse("short")
        <Width.SHORT: 2>
        >>> WIDTH_LABELS.label(Width.LONG)
        'long'
    """

    def __init__(self, option: str, table: Mapping[E, str]) -> None:
        if not table:
            raise ValueError(f"label table for {option!r} must not be empty")
        self._frozen = False
        super().__init__(table)
        self._frozen = True
        self.option = option

    def add(self, key: E, value: str) -> None:
        if self._frozen:
            raise TypeError(f"{type(self).__name__} {self.option!r} is read-only")
        super().add(key, value)

    def labels(self) -> tuple[str, ...]:
        """Accepted labels in declaration order."""
        return tuple(self.values())

    def label(self, member: E) -> str:
        """Label of an enum member."""
        return self[member]

    def parse(self, value: E | str) -> E:
        """
        Resolve an enum member or its label to the enum member.

        Raises:
            FormatOptionError: value is neither a member of this table nor one of its labels.
        """
        if isinstance(value, Enum) and value in self:
            return value
        if isinstance(value, str) and self.has_value(value):
            return self.get_key(value)
        raise FormatOptionError.invalid_choice(self.option, value, self.labels())
