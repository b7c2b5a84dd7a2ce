# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""IdentityTree - ordered multi-way tree keyed by object identity.

The tree never touches the objects it holds. Structure lives in a side
table mapping ``id(obj)`` to a link record with parent, first/last child
and previous/next sibling references. Objects therefore need not be
hashable (plain dicts work) and two equal objects are distinct nodes.

Link records hold strong references to their objects, so an ``id()`` stays
valid for as long as the object is attached.

Example:
    >>> root = object()
    >>> tree = IdentityTree(root)
    >>> a, b = {'id': 'a'}, {'id': 'b'}
    >>> tree.append_child(root, a)
    >>> tree.append_child(a, b)
    >>> [n['id'] for n in list(tree.ancestors(b))[:-1]]
    ['b', 'a']
"""

from __future__ import annotations

from typing import Any, Iterator

from .exceptions import DuplicateNodeError, NodeNotFoundError


class _Links:
    """Structural links of one attached object."""

    __slots__ = ('obj', 'parent', 'first', 'last', 'prev', 'next', 'count')

    def __init__(self, obj: Any, parent: _Links | None = None) -> None:
        self.obj = obj
        self.parent = parent
        self.first: _Links | None = None
        self.last: _Links | None = None
        self.prev: _Links | None = None
        self.next: _Links | None = None
        self.count = 0


def _obj(links: _Links | None) -> Any:
    return links.obj if links is not None else None


class IdentityTree:
    """Ordered tree of arbitrary objects indexed by identity.

    The root object is given at construction and is always attached.
    Children are kept in insertion order through sibling links, so child
    iteration is O(children) and ancestor walks are O(depth).
    """

    __slots__ = ('_links', '_root')

    def __init__(self, root: Any) -> None:
        """Initialize an IdentityTree.

        Args:
            root: Sentinel object owning all top-level objects.
        """
        self._root = _Links(root)
        self._links: dict[int, _Links] = {id(root): self._root}

    def __repr__(self) -> str:
        return f"IdentityTree({len(self)} objects)"

    def __len__(self) -> int:
        """Return the number of attached objects, root included."""
        return len(self._links)

    def __contains__(self, obj: Any) -> bool:
        links = self._links.get(id(obj))
        return links is not None and links.obj is obj

    @property
    def root(self) -> Any:
        """The sentinel root object."""
        return self._root.obj

    def _get(self, obj: Any) -> _Links:
        links = self._links.get(id(obj))
        if links is None or links.obj is not obj:
            raise NodeNotFoundError(f"{obj!r} is not in the tree")
        return links

    # ==================== Navigation ====================

    def parent(self, obj: Any) -> Any:
        """Return the parent of obj, or None for the root."""
        return _obj(self._get(obj).parent)

    def first_child(self, obj: Any) -> Any:
        return _obj(self._get(obj).first)

    def last_child(self, obj: Any) -> Any:
        return _obj(self._get(obj).last)

    def previous_sibling(self, obj: Any) -> Any:
        return _obj(self._get(obj).prev)

    def next_sibling(self, obj: Any) -> Any:
        return _obj(self._get(obj).next)

    def index(self, obj: Any) -> int:
        """Return the position of obj among its siblings.

        Returns 0 for the root and -1 if obj is not in the tree.
        """
        links = self._links.get(id(obj))
        if links is None or links.obj is not obj:
            return -1
        position = 0
        prev = links.prev
        while prev is not None:
            position += 1
            prev = prev.prev
        return position

    def child_count(self, obj: Any) -> int:
        return self._get(obj).count

    def iter_children(self, obj: Any) -> Iterator[Any]:
        """Yield the children of obj in order."""
        child = self._get(obj).first
        while child is not None:
            yield child.obj
            child = child.next

    def children(self, obj: Any) -> list[Any]:
        """Return a new list with the children of obj in order."""
        return list(self.iter_children(obj))

    def ancestors(self, obj: Any) -> Iterator[Any]:
        """Yield obj, its parent, and so on up to and including the root."""
        links: _Links | None = self._get(obj)
        while links is not None:
            yield links.obj
            links = links.parent

    def iter_descendants(self, obj: Any) -> Iterator[Any]:
        """Yield all descendants of obj depth first, in pre-order."""
        stack: list[_Links] = []
        links = self._get(obj).first
        while links is not None or stack:
            if links is None:
                links = stack.pop()
            yield links.obj
            if links.next is not None:
                stack.append(links.next)
            links = links.first

    # ==================== Mutation ====================

    def append_child(self, parent: Any, child: Any) -> None:
        """Attach child as the last child of parent.

        Raises:
            NodeNotFoundError: If parent is not in the tree.
            DuplicateNodeError: If child is already in the tree.
        """
        parent_links = self._get(parent)
        if child in self:
            raise DuplicateNodeError(f"{child!r} is already in the tree")
        links = _Links(child, parent_links)
        last = parent_links.last
        if last is None:
            parent_links.first = links
        else:
            last.next = links
            links.prev = last
        parent_links.last = links
        parent_links.count += 1
        self._links[id(child)] = links
