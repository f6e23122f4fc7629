"""
borrow - Runtime aliasing discipline for linked containers

Python has no static borrow checker, so every stack carries a small
BorrowState that records how it is currently being accessed:

- any number of shared borrows (read-only cursors), or
- exactly one exclusive borrow (a mutable cursor or a peek_mut handle),
- and never either of them once the stack has been moved into a
  consuming cursor.

Operations check the state before touching the chain and raise
BorrowError instead of proceeding.
"""

import logging
from typing import Optional


_log = logging.getLogger(__name__)


class BorrowError(RuntimeError):
    """Raised when an access would violate the stack's aliasing rules."""
    pass


class MovedError(BorrowError):
    """Raised when a stack is used after its chain was moved out."""
    pass


class Borrow:
    """A registered access right on a stack.

    Released at most once; later release() calls are no-ops.
    """

    __slots__ = ('_state', '_exclusive', '_active')

    def __init__(self, state: Optional['BorrowState'], exclusive: bool):
        self._state = state
        self._exclusive = exclusive
        self._active = True

    @property
    def exclusive(self) -> bool:
        """True for an exclusive (mutable) borrow."""
        return self._exclusive

    @property
    def active(self) -> bool:
        """True until the borrow is released."""
        return self._active

    def release(self) -> None:
        """Give the access right back to the stack."""
        if not self._active:
            return
        self._active = False
        state, self._state = self._state, None
        if state is not None:
            state._release(self._exclusive)

    def __repr__(self) -> str:
        kind = "exclusive" if self._exclusive else "shared"
        status = "active" if self._active else "released"
        return f"Borrow({kind}, {status})"


class BorrowState:
    """Borrow bookkeeping for a single stack.

    Args:
        enabled: When False, shared/exclusive counts are not tracked and
            only the moved check remains.
    """

    __slots__ = ('_shared', '_exclusive', '_moved', '_enabled')

    def __init__(self, enabled: bool = True):
        self._shared = 0
        self._exclusive = False
        self._moved = False
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        """Whether shared/exclusive borrows are tracked."""
        return self._enabled

    @property
    def shared_count(self) -> int:
        """Number of live shared borrows."""
        return self._shared

    @property
    def exclusive(self) -> bool:
        """True while an exclusive borrow is live."""
        return self._exclusive

    @property
    def borrowed(self) -> bool:
        """True while any borrow is live."""
        return self._exclusive or self._shared > 0

    @property
    def moved(self) -> bool:
        """True once the chain has been moved out."""
        return self._moved

    def check_owned(self, op: str) -> None:
        """Raise MovedError if the chain was moved out."""
        if self._moved:
            _log.debug("%s refused: stack was moved", op)
            raise MovedError(f"Cannot {op}: stack was moved into a consuming iterator")

    def check_readable(self, op: str) -> None:
        """Allow reads alongside shared borrows only.

        Raises:
            MovedError: If the chain was moved out
            BorrowError: If an exclusive borrow is live
        """
        self.check_owned(op)
        if self._exclusive:
            _log.debug("%s refused: stack is mutably borrowed", op)
            raise BorrowError(f"Cannot {op}: stack is mutably borrowed")

    def check_writable(self, op: str) -> None:
        """Allow writes only when no borrow of any kind is live.

        Raises:
            MovedError: If the chain was moved out
            BorrowError: If any borrow is live
        """
        self.check_readable(op)
        if self._shared:
            _log.debug("%s refused: %d shared borrow(s) live", op, self._shared)
            raise BorrowError(
                f"Cannot {op}: stack is borrowed by {self._shared} iterator(s)"
            )

    def acquire_shared(self, op: str = "borrow") -> Borrow:
        """Register a shared borrow.

        Raises:
            BorrowError: If an exclusive borrow is live
        """
        self.check_readable(op)
        if not self._enabled:
            return Borrow(None, exclusive=False)
        self._shared += 1
        return Borrow(self, exclusive=False)

    def acquire_exclusive(self, op: str = "borrow mutably") -> Borrow:
        """Register the exclusive borrow.

        Raises:
            BorrowError: If any borrow is live
        """
        self.check_writable(op)
        if not self._enabled:
            return Borrow(None, exclusive=True)
        self._exclusive = True
        return Borrow(self, exclusive=True)

    def mark_moved(self) -> None:
        """Record that the chain now belongs to someone else."""
        self._moved = True

    def _release(self, exclusive: bool) -> None:
        if exclusive:
            self._exclusive = False
        elif self._shared > 0:
            self._shared -= 1

    def __repr__(self) -> str:
        return (
            f"BorrowState(shared={self._shared}, exclusive={self._exclusive}, "
            f"moved={self._moved})"
        )
