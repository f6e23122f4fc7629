"""
stack - Singly-linked LIFO stack

This module provides LinkedStack, a single-owner stack built from a chain
of StackNode objects. Push and pop only ever touch the head link, moving
the old head into the new node (push) or promoting its successor (pop).
Teardown walks the chain iteratively so arbitrarily long stacks can be
discarded without deep recursion.
"""

import logging
import reprlib
from typing import Generic, Iterable, Optional, TypeVar

from linked_collections._borrow import BorrowState
from linked_collections._config import config
from linked_collections._cursors import IntoIter, Iter, IterMut, MutRef
from linked_collections._node import StackNode


T = TypeVar('T')


_log = logging.getLogger(__name__)


class LinkedStack(Generic[T]):
    """Singly-linked LIFO stack.

    This implementation provides:
    - O(1) push, pop, peek and peek_mut
    - Consuming, read-only and mutable iteration, top to bottom
    - Runtime enforcement of the aliasing rules between them
    - Iterative teardown with constant call depth

    ``None`` is the "absent" result of pop/peek/peek_mut and therefore
    cannot be stored.

    Raises:
        ValueError: From push() when the item is None
        BorrowError: When an access would alias a live borrow
        MovedError: On any use after into_iter()

    Example:
        >>> stack = LinkedStack()
        >>> stack.push(1)
        >>> stack.push(2)
        >>> stack.peek()
        2
        >>> stack.pop()
        2
        >>> stack.pop()
        1
        >>> stack.pop() is None
        True
    """

    __slots__ = ('_head', '_borrows', '_log_threshold')

    def __init__(self, items: Optional[Iterable[T]] = None):
        """Initialize stack.

        Args:
            items: Optional items to push in order; the last one ends
                up on top.
        """
        self._head: Optional[StackNode[T]] = None
        self._borrows = BorrowState(enabled=config.check_borrows)
        self._log_threshold = config.teardown_log_threshold

        if items is not None:
            for item in items:
                self.push(item)

    def _take_head(self) -> Optional[StackNode[T]]:
        """Move the head link out, leaving the empty marker behind."""
        node, self._head = self._head, None
        return node

    def push(self, item: T) -> None:
        """Push an item onto the stack.

        Args:
            item: Item to push

        Raises:
            ValueError: If item is None
            BorrowError: If the stack is borrowed
        """
        if item is None:
            raise ValueError("Cannot push None")
        self._borrows.check_writable("push")

        self._head = StackNode(item, self._take_head())

    def pop(self) -> Optional[T]:
        """Pop the top item.

        Returns:
            The top item, or None if the stack is empty

        Raises:
            BorrowError: If the stack is borrowed
        """
        self._borrows.check_writable("pop")

        node = self._take_head()
        if node is None:
            return None
        self._head, node.next = node.next, None
        return node.value

    def peek(self) -> Optional[T]:
        """Return the top item without removing it, or None if empty."""
        self._borrows.check_readable("peek")

        top = self._head
        if top is None:
            return None
        return top.value

    def peek_mut(self) -> Optional[MutRef[T]]:
        """Return a writable handle on the top item, or None if empty.

        The handle holds the stack's exclusive borrow until it is released,
        either explicitly, by leaving a ``with`` block, or when it is
        garbage collected.

        Raises:
            BorrowError: If the stack is borrowed
        """
        self._borrows.check_writable("peek_mut")

        top = self._head
        if top is None:
            return None
        borrow = self._borrows.acquire_exclusive("peek_mut")
        return MutRef(top, borrow, owns_borrow=True)

    def into_iter(self) -> IntoIter[T]:
        """Move the whole chain into a consuming iterator.

        This stack is unusable afterwards; every later call raises
        MovedError.

        Raises:
            BorrowError: If the stack is borrowed
        """
        self._borrows.check_writable("into_iter")

        owned: LinkedStack[T] = LinkedStack()
        owned._head = self._take_head()
        self._borrows.mark_moved()
        _log.debug("moved stack chain into consuming iterator")
        return IntoIter(owned)

    def iter(self) -> Iter[T]:
        """Return a read-only iterator, top to bottom.

        Raises:
            BorrowError: If the stack is mutably borrowed
        """
        borrow = self._borrows.acquire_shared("iter")
        return Iter(self, self._head, borrow)

    def iter_mut(self) -> IterMut[T]:
        """Return an iterator of writable handles, top to bottom.

        Raises:
            BorrowError: If the stack is borrowed
        """
        borrow = self._borrows.acquire_exclusive("iter_mut")
        return IterMut(self, self._head, borrow)

    def __iter__(self) -> Iter[T]:
        """Iterate over items from top to bottom without consuming them."""
        return self.iter()

    def _release_chain(self) -> int:
        """Unlink and drop every node, one per loop iteration.

        Returns:
            Number of nodes released
        """
        released = 0
        node = self._take_head()
        while node is not None:
            successor = node.next
            node.next = None
            node = successor
            released += 1
        return released

    def _teardown(self) -> None:
        released = self._release_chain()
        if released >= self._log_threshold:
            _log.debug("released %d nodes on teardown", released)

    def clear(self) -> None:
        """Remove all items from the stack.

        Raises:
            BorrowError: If the stack is borrowed
        """
        self._borrows.check_writable("clear")
        self._teardown()

    def empty(self) -> bool:
        """Check if the stack is empty."""
        self._borrows.check_readable("empty")
        return self._head is None

    def __bool__(self) -> bool:
        """Return True if stack is non-empty."""
        return not self.empty()

    def __len__(self) -> int:
        """Count the items by walking the chain. O(n)."""
        self._borrows.check_readable("len")
        count = 0
        node = self._head
        while node is not None:
            count += 1
            node = node.next
        return count

    def __enter__(self) -> 'LinkedStack[T]':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Live borrows still point into the chain; __del__ picks it up later.
        if self._borrows.moved or self._borrows.borrowed:
            return
        self._teardown()

    def __del__(self) -> None:
        self._release_chain()

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        """String representation, top first."""
        if self._borrows.moved:
            return "LinkedStack(<moved>)"
        if self._borrows.exclusive:
            return "LinkedStack(<mutably borrowed>)"
        items = []
        node = self._head
        while node is not None:
            items.append(node.value)
            node = node.next
        return f"LinkedStack({items!r})"
