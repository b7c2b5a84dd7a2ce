# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""AssetGraph exceptions."""

from __future__ import annotations


class AssetGraphError(Exception):
    """Base exception for AssetGraph errors."""

    pass


class UsageError(AssetGraphError, ValueError):
    """Raised when an operation is called with arguments of the wrong shape."""

    pass


class InvalidChildrenError(UsageError):
    """Raised when children are missing, empty, or not records."""

    pass


class InvalidParentError(UsageError):
    """Raised when a parent is neither None nor a node in the graph."""

    pass


class InvalidRouteError(UsageError):
    """Raised when a route is not a non-empty list of segments."""

    pass


class RootTerminalError(UsageError):
    """Raised when trying to mark the virtual root as terminal."""

    pass


class KeyMappingError(UsageError):
    """Raised when a key mapping is partial or malformed."""

    pass


class DuplicateNodeError(UsageError):
    """Raised when a record is already attached or repeated in a batch."""

    pass


class NodeNotFoundError(AssetGraphError, KeyError):
    """Raised by the tree primitive when an object is not attached."""

    pass
