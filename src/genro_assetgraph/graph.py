# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""AssetGraph - hierarchical index over caller-owned records.

This module provides the AssetGraph class, the engine that tracks plain
records (navigation items, asset records, ...) as nodes of a tree without
changing them. Records stay exactly as the caller built them: structure and
per-node flags live in side tables keyed by object identity.

Key Features:
    - **Identity nodes**: two equal records are two distinct nodes
    - **Virtual root**: ``None`` addresses the top level, never returned
    - **Recursive insertion**: nested children lists inserted in one call
    - **Routes**: identifier paths from the top level down to a node
    - **Flags**: per-node *terminal* and *exhausted* tri-state flags

Example:
    Basic usage::

        graph = AssetGraph()
        site = {'id': 'site', 'children': [{'id': 'pump'}, {'id': 'valve'}]}
        graph.add_children(None, [site], recursive=True)

        pump = graph.get_node_at_route(['site', 'pump'])
        graph.get_route(pump)         # ['site', 'pump']
        graph.get_parent(pump)        # site
        graph.get_parent(site)        # None (top level)

    Lazy loading::

        graph.add_children(pump, [{'id': 'motor'}], is_exhausted=True)
        graph.is_exhausted(pump)      # True
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Iterator

from .exceptions import (
    DuplicateNodeError,
    InvalidChildrenError,
    InvalidParentError,
    InvalidRouteError,
    RootTerminalError,
)
from .keys import (
    EXHAUSTED_KEY,
    TERMINAL_KEY,
    KeyMapping,
    has_own_key,
    is_record,
    read_key,
    resolve_key,
)
from .tree import IdentityTree

logger = logging.getLogger(__name__)

_MISSING = object()


class _VirtualRoot:
    """Sentinel owning all top-level nodes. Never returned to callers."""

    __slots__ = ()

    def __repr__(self) -> str:
        return '<virtual root>'


class _NodeMeta:
    """Tri-state flags of one node: True, False or None (unset)."""

    __slots__ = ('is_terminal', 'is_exhausted')

    def __init__(self, is_terminal: Any = None, is_exhausted: Any = None) -> None:
        self.is_terminal = is_terminal
        self.is_exhausted = is_exhausted


@dataclass(frozen=True)
class NodeInfo:
    """Snapshot of a node and its surroundings, as returned by get_info()."""

    item: Any
    parent: Any
    siblings: list[Any]
    children: list[Any]
    path: list[Any]
    route: list[str | None]
    has_children: bool
    is_terminal: bool
    is_exhausted: bool

    def as_dict(self) -> dict[str, Any]:
        """Return the fields as a dict, records kept by reference."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


class AssetGraph:
    """A tree of caller-owned records with O(depth) ancestor queries.

    AssetGraph provides:
    - add_children(node, children, ...): attach records, optionally recursively
    - get_parent / get_siblings / get_children / get_path: navigation
    - get_route / get_node_at_route: identifier-based addressing
    - is_terminal / is_exhausted and their setters: per-node flags

    Passing ``None`` as the node addresses the virtual root (the top level)
    wherever the operation allows it. Queries on records that are not in
    the graph return None instead of raising.

    Attributes:
        keys: The KeyMapping naming the identifier and children properties.
    """

    __slots__ = ('_keys', '_root', '_tree', '_meta')

    def __init__(self, keys: KeyMapping | Mapping[str, str] | None = None) -> None:
        """Initialize an empty AssetGraph.

        Args:
            keys: Optional key mapping, as a KeyMapping or a plain mapping
                naming both ``id`` and ``children``.

        Raises:
            KeyMappingError: If keys is partial or malformed.
        """
        self._keys = KeyMapping.from_value(keys)
        self._root = _VirtualRoot()
        self._tree = IdentityTree(self._root)
        self._meta: dict[int, _NodeMeta] = {}

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"AssetGraph({len(self)} nodes, keys={self._keys!r})"

    def __len__(self) -> int:
        """Return the number of nodes, virtual root excluded."""
        return len(self._tree) - 1

    def __contains__(self, node: Any) -> bool:
        return self.has_node(node)

    def __iter__(self) -> Iterator[Any]:
        """Iterate over top-level nodes in insertion order."""
        return self._tree.iter_children(self._root)

    @property
    def keys(self) -> KeyMapping:
        return self._keys

    # ==================== Internals ====================

    def _target(self, node: Any) -> Any:
        """Resolve node to a tree object: None means the virtual root.

        Returns None when node is neither None nor in the graph.
        """
        if node is None:
            return self._root
        if self.has_node(node):
            return node
        return None

    def _node_meta(self, obj: Any) -> _NodeMeta:
        meta = self._meta.get(id(obj))
        if meta is None:
            meta = self._meta[id(obj)] = _NodeMeta()
        return meta

    def _nested(self, record: Any, children_key: str) -> list[Any] | tuple[Any, ...] | None:
        """Return the record's non-empty nested children list, if any."""
        nested = read_key(record, children_key)
        if isinstance(nested, (list, tuple)) and nested:
            return nested
        return None

    def _check_batch(
        self,
        batch: list[Any] | tuple[Any, ...],
        children_key: str,
        recursive: bool,
        seen: set[int],
    ) -> None:
        """Validate a batch (and its nested batches) before any mutation."""
        for child in batch:
            if not is_record(child):
                raise InvalidChildrenError(
                    f"Children must be records, got {type(child).__name__}"
                )
            if child in self._tree or id(child) in seen:
                raise DuplicateNodeError(
                    f"{child!r} is already in the graph or repeated in the batch"
                )
            seen.add(id(child))
            if recursive:
                nested = self._nested(child, children_key)
                if nested is not None:
                    self._check_batch(nested, self._keys.children, True, seen)

    def _insert(
        self,
        parent: Any,
        batch: list[Any] | tuple[Any, ...],
        children_key: str,
        recursive: bool,
    ) -> None:
        for child in batch:
            self._meta[id(child)] = _NodeMeta(
                read_key(child, TERMINAL_KEY) if has_own_key(child, TERMINAL_KEY) else None,
                read_key(child, EXHAUSTED_KEY) if has_own_key(child, EXHAUSTED_KEY) else None,
            )
            self._tree.append_child(parent, child)
            if recursive:
                nested = self._nested(child, children_key)
                if nested is not None:
                    # Deeper levels read the configured key, not the override.
                    self._insert(child, nested, self._keys.children, True)

    # ==================== Queries ====================

    def has_node(self, node: Any) -> bool:
        """True if node is attached to the graph."""
        return node is not self._root and node in self._tree

    def get_info(self, node: Any, route_key: str | None = None) -> NodeInfo | None:
        """Return a NodeInfo snapshot for node, or None if it is absent.

        Args:
            node: A node in the graph.
            route_key: Property used to build the route. Defaults to the
                mapping's ``id`` key.
        """
        if not self.has_node(node):
            return None
        path = self.get_path(node)
        children = self.get_children(node)
        return NodeInfo(
            item=node,
            parent=self.get_parent(node),
            siblings=self.get_siblings(node),
            children=children,
            path=path,
            route=self.path_to_route(path, resolve_key(route_key, self._keys.id)),
            has_children=bool(children),
            is_terminal=self.is_terminal(node),
            is_exhausted=self.is_exhausted(node),
        )

    def get_parent(self, node: Any) -> Any:
        """Return the parent of node.

        Returns None if node is absent or is a top-level node: the virtual
        root is never returned.
        """
        if not self.has_node(node):
            return None
        parent = self._tree.parent(node)
        return None if parent is self._root else parent

    def get_siblings(self, node: Any) -> list[Any] | None:
        """Return the children of node's parent, node itself included.

        Filter node out of the result if only the other siblings are wanted.
        Returns None if node is absent.
        """
        if not self.has_node(node):
            return None
        return self._tree.children(self._tree.parent(node))

    def has_siblings(self, node: Any) -> bool:
        """True if node has at least one sibling besides itself."""
        siblings = self.get_siblings(node)
        return siblings is not None and len(siblings) > 1

    def get_path(self, node: Any) -> list[Any] | None:
        """Return the nodes from the top level down to node, inclusive.

        The virtual root is not part of the path. Returns None if node is
        absent.
        """
        if not self.has_node(node):
            return None
        ancestors = list(self._tree.ancestors(node))
        ancestors.reverse()
        return ancestors[1:]

    def get_route(self, node: Any, route_key: str | None = None) -> list[str | None] | None:
        """Return the identifiers along get_path(node).

        Each entry is the node's ``route_key`` property when it is a
        non-empty string, None otherwise. Returns None if node is absent.

        Example:
            >>> graph.get_route(pump)
            ['site', 'pump']
        """
        path = self.get_path(node)
        if path is None:
            return None
        return self.path_to_route(path, resolve_key(route_key, self._keys.id))

    def get_node_at_route(self, route: list[str] | tuple[str, ...], route_key: str | None = None) -> Any:
        """Find the node addressed by a route of identifiers.

        The search is greedy and never backtracks: at each level the first
        sibling whose identifier matches the segment is taken. Siblings that
        do not match are skipped, and so is a matching sibling without
        children when more segments remain. Records without the
        identifier property never match, not even a None segment.

        Args:
            route: Non-empty list of identifier segments, top level first.
            route_key: Property compared with the segments. Defaults to the
                mapping's ``id`` key.

        Returns:
            The matching node, or None.

        Raises:
            InvalidRouteError: If route is not a non-empty list or tuple.
        """
        if not isinstance(route, (list, tuple)) or not route:
            raise InvalidRouteError("A non-empty list of route segments is required")

        key = resolve_key(route_key, self._keys.id)
        last = len(route) - 1
        candidates = self._tree.iter_children(self._root)

        for depth, segment in enumerate(route):
            for item in candidates:
                value = read_key(item, key, _MISSING)
                if value is _MISSING or value != segment:
                    continue
                if depth == last:
                    return item
                if self._tree.child_count(item):
                    candidates = self._tree.iter_children(item)
                    break
            else:
                return None
        return None

    def get_children(self, node: Any) -> list[Any] | None:
        """Return the children of node, or of the top level if node is None.

        Returns None only if node is not None and not in the graph.
        """
        target = self._target(node)
        if target is None:
            return None
        return self._tree.children(target)

    def has_children(self, node: Any) -> bool | None:
        """True if node (or the top level, for None) has children.

        Returns None only if node is not None and not in the graph.
        """
        target = self._target(node)
        if target is None:
            return None
        return self._tree.child_count(target) > 0

    def walk(self) -> Iterator[tuple[tuple[str | None, ...], Any]]:
        """Yield (route, node) for every node, depth first.

        Example:
            >>> for route, node in graph.walk():
            ...     print('/'.join(s or '?' for s in route))
        """
        for node in self._tree.iter_descendants(self._root):
            yield tuple(self.get_route(node)), node

    # ==================== Mutation ====================

    def add_children(
        self,
        node: Any,
        children: Any,
        *,
        children_key: str | None = None,
        recursive: bool = False,
        is_exhausted: bool | None = None,
    ) -> list[Any]:
        """Append one record or a list of records under node.

        Every argument is validated before the graph is touched, so a
        failing call leaves the graph unchanged.

        Args:
            node: Parent node, or None for the top level.
            children: A record or a non-empty list/tuple of records.
            children_key: Property holding nested children for this call.
                Only the first level reads it; deeper levels read the
                mapping's ``children`` key.
            recursive: If True, nested children lists are inserted too.
            is_exhausted: If a bool, set on the parent after insertion.

        Returns:
            The parent's children after insertion.

        Raises:
            InvalidChildrenError: If children is missing, empty or not records.
            InvalidParentError: If node is not None and not in the graph.
            DuplicateNodeError: If a record is already in the graph or
                appears twice in the batch.
        """
        if isinstance(children, (list, tuple)):
            if not children:
                raise InvalidChildrenError(
                    "A child record or a non-empty list of child records is required"
                )
            batch = children
        elif is_record(children):
            batch = [children]
        else:
            raise InvalidChildrenError(
                "A child record or a non-empty list of child records is required"
            )

        if node is None:
            parent = self._root
        elif self.has_node(node):
            parent = node
        else:
            raise InvalidParentError("The parent node must be a node in the graph or None")

        key = resolve_key(children_key, self._keys.children)
        recursive = recursive is True
        self._check_batch(batch, key, recursive, set())
        self._insert(parent, batch, key, recursive)

        if isinstance(is_exhausted, bool):
            self._node_meta(parent).is_exhausted = is_exhausted

        logger.debug(
            "Added %d children under %r (recursive=%s, is_exhausted=%s)",
            len(batch), parent, recursive, is_exhausted,
        )
        return self._tree.children(parent)

    # ==================== Flags ====================

    def is_exhausted(self, node: Any) -> bool | None:
        """True if all children of node (or of the top level) are loaded.

        An unset flag reads as False. Returns None if node is not None and
        not in the graph.
        """
        target = self._target(node)
        if target is None:
            return None
        meta = self._meta.get(id(target))
        return meta is not None and meta.is_exhausted is True

    def set_exhausted(self, node: Any, value: bool) -> bool | None:
        """Set the exhausted flag of node (or of the top level, for None).

        Returns:
            The value set, or None if node is not in the graph.
        """
        target = self._target(node)
        if target is None:
            return None
        meta = self._node_meta(target)
        meta.is_exhausted = bool(value)
        return meta.is_exhausted

    def is_terminal(self, node: Any) -> bool | None:
        """True if node is not expected to ever have children.

        The top level (None) is never terminal. Returns None if node is not
        in the graph.
        """
        if node is None:
            return False
        if not self.has_node(node):
            return None
        meta = self._meta.get(id(node))
        return meta is not None and meta.is_terminal is True

    def set_terminal(self, node: Any, value: bool) -> bool | None:
        """Set the terminal flag of node.

        Returns:
            The value set, or None if node is not in the graph.

        Raises:
            RootTerminalError: If node is None.
        """
        if node is None:
            raise RootTerminalError("The root node can never be terminal, it must have children")
        if not self.has_node(node):
            return None
        meta = self._node_meta(node)
        meta.is_terminal = bool(value)
        return meta.is_terminal

    @staticmethod
    def path_to_route(path: list[Any], route_key: str) -> list[str | None]:
        """Map a path of records to their identifiers.

        Entries whose ``route_key`` property is not a non-empty string
        become None.
        """
        route = []
        for record in path:
            value = read_key(record, route_key)
            route.append(value if isinstance(value, str) and value else None)
        return route


def asset_graph(keys: KeyMapping | Mapping[str, str] | None = None) -> AssetGraph:
    """Create an empty AssetGraph."""
    return AssetGraph(keys)
