# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Key mapping and record property access.

Records handed to an AssetGraph are opaque: the graph only reads a few
properties from them, and which property names it reads is configured by
a KeyMapping. Records can be mappings (read by item access) or any other
object (read by attribute access).

Example:
    >>> keys = KeyMapping(id='assetId', children='subAssets', label='assetName')
    >>> read_key({'assetId': 'a1'}, keys.id)
    'a1'
    >>> keys['label']
    'assetName'
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from numbers import Number
from types import MemberDescriptorType
from typing import Any

from .exceptions import KeyMappingError

#: Keys the graph itself reads from records.
RECOGNIZED_KEYS = ('id', 'children')

#: Record properties seeding a node's flags on insertion.
TERMINAL_KEY = 'isTerminal'
EXHAUSTED_KEY = 'isExhausted'


class KeyMapping:
    """Immutable mapping of logical key names to record property names.

    ``id`` and ``children`` are read by the graph. Any other key (``label``,
    ``route``, ``icon``, ...) is kept as a passthrough for callers.

    Example:
        >>> keys = KeyMapping()
        >>> keys.id, keys.children
        ('id', 'children')
    """

    __slots__ = ('_id', '_children', '_extra')

    def __init__(self, id: str = 'id', children: str = 'children', **extra: Any) -> None:
        """Initialize a KeyMapping.

        Args:
            id: Property holding a record's unique identifier.
            children: Property holding a record's nested children list.
            **extra: Passthrough keys, kept as given and not interpreted
                by the graph.

        Raises:
            KeyMappingError: If id or children is not a non-empty string.
        """
        for name, value in (('id', id), ('children', children)):
            if not isinstance(value, str) or not value:
                raise KeyMappingError(
                    f"Key '{name}' must be a non-empty string, got {value!r}"
                )
        self._id = id
        self._children = children
        self._extra = dict(extra)

    @classmethod
    def from_value(cls, value: KeyMapping | Mapping[str, str] | None) -> KeyMapping:
        """Build a KeyMapping from None, a KeyMapping or a plain mapping.

        A plain mapping customizing keys must name every recognized key:
        giving ``id`` without ``children`` (or the reverse) is an error,
        not a silent fill from the defaults.

        Raises:
            KeyMappingError: On a partial override, a non-mapping value or a
                non-string key name.
        """
        if value is None:
            return cls()
        if isinstance(value, KeyMapping):
            return value
        if not isinstance(value, Mapping):
            raise KeyMappingError(
                f"keys must be a mapping or KeyMapping, not {type(value).__name__}"
            )
        if not value:
            return cls()
        bad = [k for k in value if not isinstance(k, str)]
        if bad:
            raise KeyMappingError(f"Key names must be strings, got {bad[0]!r}")
        missing = [k for k in RECOGNIZED_KEYS if k not in value]
        if missing:
            raise KeyMappingError(
                f"All of {', '.join(RECOGNIZED_KEYS)} must be set when customizing "
                f"keys, missing: {', '.join(missing)}"
            )
        return cls(**value)

    @property
    def id(self) -> str:
        """Property name of the record identifier."""
        return self._id

    @property
    def children(self) -> str:
        """Property name of the nested children list."""
        return self._children

    @property
    def extra(self) -> dict[str, Any]:
        """Copy of the passthrough keys."""
        return dict(self._extra)

    def __getitem__(self, name: str) -> Any:
        if name == 'id':
            return self._id
        if name == 'children':
            return self._children
        return self._extra[name]

    def get(self, name: str, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    def __iter__(self) -> Iterator[str]:
        yield 'id'
        yield 'children'
        yield from self._extra

    def as_dict(self) -> dict[str, Any]:
        """Return all keys as a plain dict."""
        return {'id': self._id, 'children': self._children, **self._extra}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyMapping):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        return hash((self._id, self._children, tuple(sorted(self._extra))))

    def __repr__(self) -> str:
        args = ', '.join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"KeyMapping({args})"


def resolve_key(value: Any, fallback: str) -> str:
    """Return value if it is a non-empty string, otherwise fallback."""
    if isinstance(value, str) and value:
        return value
    return fallback


def read_key(record: Any, key: str, default: Any = None) -> Any:
    """Read a property from a record.

    Mappings are read by item access, everything else by attribute access.
    """
    if isinstance(record, Mapping):
        return record.get(key, default)
    return getattr(record, key, default)


def has_own_key(record: Any, key: str) -> bool:
    """True if the record itself carries the property.

    For mappings this is key membership. For objects, instance attributes,
    set slots and properties count; plain class attributes do not.
    """
    if isinstance(record, Mapping):
        return key in record
    instance_dict = getattr(record, '__dict__', None)
    if instance_dict is not None and key in instance_dict:
        return True
    descriptor = getattr(type(record), key, None)
    if isinstance(descriptor, (MemberDescriptorType, property)):
        return hasattr(record, key)
    return False


def is_record(value: Any) -> bool:
    """True if value can be attached to a graph as a node.

    Scalars, strings, bytes, None, list/tuple batches and iterators
    (generators included) are not records.
    """
    if value is None or isinstance(
        value, (str, bytes, bytearray, Number, list, tuple, Iterator)
    ):
        return False
    return True
