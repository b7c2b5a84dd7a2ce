# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-AssetGraph - Hierarchical index over plain application records.

A lightweight, zero-dependency library that tracks caller-owned records
(navigation items, asset records, ...) as nodes of a tree, without
changing the records themselves.
"""

__version__ = "0.1.0"

from .behavior import AssetGraphBehavior
from .exceptions import (
    AssetGraphError,
    DuplicateNodeError,
    InvalidChildrenError,
    InvalidParentError,
    InvalidRouteError,
    KeyMappingError,
    NodeNotFoundError,
    RootTerminalError,
    UsageError,
)
from .graph import AssetGraph, NodeInfo, asset_graph
from .keys import KeyMapping
from .tree import IdentityTree

__all__ = [
    # Core classes
    "AssetGraph",
    "NodeInfo",
    "asset_graph",
    "KeyMapping",
    "IdentityTree",
    # Host layer
    "AssetGraphBehavior",
    # Exceptions
    "AssetGraphError",
    "UsageError",
    "InvalidChildrenError",
    "InvalidParentError",
    "InvalidRouteError",
    "RootTerminalError",
    "KeyMappingError",
    "DuplicateNodeError",
    "NodeNotFoundError",
]
