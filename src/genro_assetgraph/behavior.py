# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""AssetGraphBehavior - host-facing layer over an AssetGraph.

A host component (a navigation widget, an asset browser, ...) exposes its
records as a plain ``items`` list. The behavior builds the AssetGraph the
first time ``items`` becomes a list and tells subscribers about it; later
incremental loads go through add_children(), which notifies subscribers
with the updated parent's NodeInfo.

Only the first assignment of ``items`` is indexed. Reassigning ``items``
afterwards replaces the visible value but leaves the graph as it is; use
add_children() to grow the graph.

Example:
    >>> behavior = AssetGraphBehavior()
    >>> behavior.subscribe('nav', graph_created=lambda graph: print(len(graph)))
    >>> behavior.items = [{'id': 'home'}, {'id': 'alerts'}]
    2
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from .exceptions import AssetGraphError
from .graph import AssetGraph, NodeInfo
from .keys import KeyMapping

logger = logging.getLogger(__name__)

SubscriberCallback = Callable[..., Any]

DEFAULT_KEYS = {
    'id': 'id',
    'label': 'label',
    'children': 'children',
    'route': 'route',
    'icon': 'icon',
}


class AssetGraphBehavior:
    """Builds and feeds an AssetGraph for a host holding ``items``.

    Events:
        graph_created: called as ``callback(graph=graph)`` once, when the
            graph is built from the first ``items`` list.
        children_updated: called as ``callback(info=info)`` after each
            add_children(), with ``graph.get_info(node)``. ``info`` is None
            when children were added at the top level.

    Exceptions raised by callbacks propagate to the caller.
    """

    __slots__ = (
        '_items', '_keys', '_graph',
        '_created_subscribers', '_updated_subscribers',
    )

    def __init__(
        self,
        items: list[Any] | None = None,
        keys: KeyMapping | Mapping[str, str] | None = None,
    ) -> None:
        """Initialize an AssetGraphBehavior.

        Args:
            items: Optional initial records. Indexed immediately, before any
                subscriber can be registered.
            keys: Key mapping. Defaults to id/label/children/route/icon.
        """
        self._keys = KeyMapping.from_value(DEFAULT_KEYS if keys is None else keys)
        self._items: Any = None
        self._graph: AssetGraph | None = None
        self._created_subscribers: dict[str, SubscriberCallback] = {}
        self._updated_subscribers: dict[str, SubscriberCallback] = {}
        if items is not None:
            self.items = items

    def __repr__(self) -> str:
        return f"AssetGraphBehavior(graph={self._graph!r})"

    # ==================== Properties ====================

    @property
    def graph(self) -> AssetGraph | None:
        """The AssetGraph, or None before the first ``items`` list."""
        return self._graph

    @property
    def initialized(self) -> bool:
        return self._graph is not None

    @property
    def keys(self) -> KeyMapping:
        return self._keys

    @keys.setter
    def keys(self, value: KeyMapping | Mapping[str, str] | None) -> None:
        if self._graph is not None:
            raise AssetGraphError("keys cannot change once the graph is created")
        self._keys = KeyMapping.from_value(DEFAULT_KEYS if value is None else value)

    @property
    def items(self) -> Any:
        return self._items

    @items.setter
    def items(self, value: Any) -> None:
        self._items = value
        if self._graph is not None:
            logger.debug("items reassigned after graph creation, graph left unchanged")
            return
        if not isinstance(value, (list, tuple)):
            return

        graph = AssetGraph(self._keys)
        if value:
            graph.add_children(
                None, value, recursive=True, children_key=self._keys.children
            )
        self._graph = graph
        logger.debug("Created %r from %d top-level items", graph, len(value))
        self._notify(self._created_subscribers, graph=graph)

    # ==================== Operations ====================

    def add_children(self, node: Any, children: Any, **options: Any) -> list[Any]:
        """Add children through the graph and notify children_updated.

        Args:
            node: Parent node, or None for the top level.
            children: A record or a non-empty list of records.
            **options: Passed to AssetGraph.add_children (children_key,
                recursive, is_exhausted).

        Returns:
            The parent's children after insertion.

        Raises:
            AssetGraphError: If the graph has not been created yet.
        """
        if self._graph is None:
            raise AssetGraphError("No graph yet: assign a list to items first")
        result = self._graph.add_children(node, children, **options)
        info: NodeInfo | None = self._graph.get_info(node)
        self._notify(self._updated_subscribers, info=info)
        return result

    # ==================== Subscriptions ====================

    def subscribe(
        self,
        subscriber_id: str,
        graph_created: SubscriberCallback | None = None,
        children_updated: SubscriberCallback | None = None,
    ) -> None:
        """Register callbacks under subscriber_id.

        Registering again with the same id replaces the previous callback
        for that event.
        """
        if graph_created is not None:
            self._created_subscribers[subscriber_id] = graph_created
        if children_updated is not None:
            self._updated_subscribers[subscriber_id] = children_updated

    def unsubscribe(
        self,
        subscriber_id: str,
        graph_created: bool = False,
        children_updated: bool = False,
    ) -> None:
        """Remove callbacks of subscriber_id.

        With neither flag set, all callbacks of the subscriber are removed.
        """
        remove_all = not (graph_created or children_updated)
        if graph_created or remove_all:
            self._created_subscribers.pop(subscriber_id, None)
        if children_updated or remove_all:
            self._updated_subscribers.pop(subscriber_id, None)

    def _notify(self, subscribers: dict[str, SubscriberCallback], **kwargs: Any) -> None:
        for subscriber_id, callback in list(subscribers.items()):
            logger.debug("Notifying %s with %s", subscriber_id, ', '.join(kwargs))
            callback(**kwargs)
