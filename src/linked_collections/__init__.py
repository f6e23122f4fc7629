"""
linked_collections - Singly-linked containers with checked aliasing

This package provides a single-owner LIFO stack built from linked nodes,
with consuming, read-only and mutable iteration whose aliasing rules are
enforced at runtime.
"""

__version__ = "0.1.0"

# Tier 0: Configuration
from linked_collections._config import config

# Tier 1: Borrow tracking
from linked_collections._borrow import (
    Borrow,
    BorrowError,
    BorrowState,
    MovedError,
)

# Tier 2: Core structure
from linked_collections._node import StackNode

from linked_collections._cursors import (
    IntoIter,
    Iter,
    IterMut,
    MutRef,
)

# Tier 3: Public API
from linked_collections._stack import LinkedStack

__all__ = [
    # Version
    "__version__",
    # Tier 0: config
    "config",
    # Tier 1: borrow
    "Borrow",
    "BorrowError",
    "BorrowState",
    "MovedError",
    # Tier 2: node and cursors
    "StackNode",
    "IntoIter",
    "Iter",
    "IterMut",
    "MutRef",
    # Tier 3: Public API
    "LinkedStack",
]
