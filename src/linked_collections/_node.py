"""
node - Chain element shared by the stack and its cursors

A link is ``Optional[StackNode[T]]``: ``None`` marks the end of the chain,
a node means another element follows and is owned by whoever holds the link.
"""

from typing import Generic, Optional, TypeVar


T = TypeVar('T')


class StackNode(Generic[T]):
    """Node in a singly-linked stack."""

    __slots__ = ('value', 'next')

    def __init__(self, value: T, next: Optional['StackNode[T]'] = None):
        """Initialize node.

        Args:
            value: The value stored in this node
            next: Link to the successor node, taken over by this node
        """
        self.value = value
        self.next = next
