"""
cursors - Traversal helpers for LinkedStack

Three distinct cursor types walk a stack top to bottom:

- IntoIter owns the chain and pops it (yields values)
- Iter holds a shared borrow (yields values, read-only)
- IterMut holds the exclusive borrow (yields writable MutRef handles)

None of them can be restarted; once exhausted they stay exhausted.
"""

from typing import TYPE_CHECKING, Generic, Optional, TypeVar

from linked_collections._borrow import Borrow, BorrowError
from linked_collections._node import StackNode

if TYPE_CHECKING:
    from linked_collections._stack import LinkedStack


T = TypeVar('T')


__all__ = ['MutRef', 'IntoIter', 'Iter', 'IterMut']


class MutRef(Generic[T]):
    """Writable handle on one element of a stack.

    A handle is only usable while the exclusive borrow it rides on is live.
    Handles returned by ``peek_mut()`` own that borrow and give it back on
    release(); handles yielded by IterMut share the iterator's borrow.

    Example:
        >>> stack = LinkedStack([1, 2, 3])
        >>> with stack.peek_mut() as top:
        ...     top.value = 30
        >>> stack.pop()
        30
    """

    __slots__ = ('_node', '_borrow', '_owns_borrow')

    def __init__(self, node: StackNode[T], borrow: Borrow, *, owns_borrow: bool = False):
        self._node: Optional[StackNode[T]] = node
        self._borrow = borrow
        self._owns_borrow = owns_borrow

    def _target(self) -> StackNode[T]:
        node = self._node
        if node is None or not self._borrow.active:
            raise BorrowError("Element reference used after its borrow ended")
        return node

    @property
    def value(self) -> T:
        """The referenced element."""
        return self._target().value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value is None:
            raise ValueError("Cannot store None")
        self._target().value = new_value

    def get(self) -> T:
        """Return the referenced element."""
        return self.value

    def set(self, new_value: T) -> None:
        """Overwrite the referenced element in place."""
        self.value = new_value

    @property
    def released(self) -> bool:
        """True once the handle can no longer be used."""
        return self._node is None or not self._borrow.active

    def release(self) -> None:
        """Drop the handle, returning its borrow if it owns one."""
        self._node = None
        if self._owns_borrow:
            self._borrow.release()

    def __enter__(self) -> 'MutRef[T]':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __del__(self) -> None:
        if self._owns_borrow:
            self._borrow.release()

    def __repr__(self) -> str:
        if self.released:
            return "MutRef(<released>)"
        return f"MutRef({self._node.value!r})"


class IntoIter(Generic[T]):
    """Consuming iterator: owns a stack and pops it to exhaustion."""

    __slots__ = ('_stack',)

    def __init__(self, stack: 'LinkedStack[T]'):
        self._stack = stack

    def __iter__(self) -> 'IntoIter[T]':
        return self

    def __next__(self) -> T:
        item = self._stack.pop()
        if item is None:
            raise StopIteration
        return item

    def close(self) -> None:
        """Discard every element not yet yielded."""
        self._stack.clear()

    def __enter__(self) -> 'IntoIter[T]':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"IntoIter({self._stack!r})"


class Iter(Generic[T]):
    """Read-only iterator over a borrowed stack.

    Holds a shared borrow until it is exhausted or closed, so the stack
    cannot be mutated underneath it.
    """

    __slots__ = ('_owner', '_next', '_borrow')

    def __init__(self, owner: 'LinkedStack[T]', head: Optional[StackNode[T]], borrow: Borrow):
        # The owner reference keeps the chain from being torn down mid-walk.
        self._owner: Optional['LinkedStack[T]'] = owner
        self._next = head
        self._borrow = borrow

    def __iter__(self) -> 'Iter[T]':
        return self

    def __next__(self) -> T:
        node = self._next
        if node is None:
            self.close()
            raise StopIteration
        self._next = node.next
        return node.value

    def close(self) -> None:
        """Stop iterating and give back the shared borrow."""
        self._next = None
        self._owner = None
        self._borrow.release()

    def __enter__(self) -> 'Iter[T]':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        self._borrow.release()


class IterMut(Generic[T]):
    """Mutable iterator over an exclusively borrowed stack.

    Each step takes the stored node reference out of the cursor before
    deriving both the yielded handle and the successor from it.
    """

    __slots__ = ('_owner', '_next', '_borrow')

    def __init__(self, owner: 'LinkedStack[T]', head: Optional[StackNode[T]], borrow: Borrow):
        self._owner: Optional['LinkedStack[T]'] = owner
        self._next = head
        self._borrow = borrow

    def __iter__(self) -> 'IterMut[T]':
        return self

    def __next__(self) -> MutRef[T]:
        node, self._next = self._next, None
        if node is None:
            self.close()
            raise StopIteration
        self._next = node.next
        return MutRef(node, self._borrow)

    def close(self) -> None:
        """Stop iterating and end the exclusive borrow.

        Handles already yielded become unusable.
        """
        self._next = None
        self._owner = None
        self._borrow.release()

    def __enter__(self) -> 'IterMut[T]':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        self._borrow.release()
