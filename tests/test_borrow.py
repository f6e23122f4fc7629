"""Tests for runtime borrow tracking."""

import pytest

from linked_collections import (
    Borrow,
    BorrowError,
    BorrowState,
    LinkedStack,
    MovedError,
    config,
)


class TestBorrowState:
    """Tests for the BorrowState bookkeeping."""

    def test_initial_state(self):
        """A fresh state has no borrows."""
        state = BorrowState()
        assert state.shared_count == 0
        assert not state.exclusive
        assert not state.borrowed
        assert not state.moved

    def test_shared_borrows_count(self):
        """Shared borrows stack up and release one by one."""
        state = BorrowState()
        first = state.acquire_shared()
        second = state.acquire_shared()
        assert state.shared_count == 2
        first.release()
        assert state.shared_count == 1
        second.release()
        assert not state.borrowed

    def test_release_is_idempotent(self):
        """Releasing twice only counts once."""
        state = BorrowState()
        keep = state.acquire_shared()
        borrow = state.acquire_shared()
        borrow.release()
        borrow.release()
        assert state.shared_count == 1
        assert keep.active
        assert not borrow.active

    def test_exclusive_excludes_shared(self):
        """No shared borrow while an exclusive one is live."""
        state = BorrowState()
        borrow = state.acquire_exclusive()
        assert isinstance(borrow, Borrow)
        assert borrow.exclusive
        with pytest.raises(BorrowError):
            state.acquire_shared()
        borrow.release()
        state.acquire_shared().release()

    def test_shared_excludes_exclusive(self):
        """No exclusive borrow while shared ones are live."""
        state = BorrowState()
        borrow = state.acquire_shared()
        with pytest.raises(BorrowError):
            state.acquire_exclusive()
        borrow.release()
        state.acquire_exclusive().release()

    def test_single_exclusive(self):
        """Only one exclusive borrow at a time."""
        state = BorrowState()
        borrow = state.acquire_exclusive()
        with pytest.raises(BorrowError):
            state.acquire_exclusive()
        borrow.release()

    def test_moved(self):
        """A moved state refuses everything."""
        state = BorrowState()
        state.mark_moved()
        with pytest.raises(MovedError):
            state.check_readable("peek")
        with pytest.raises(MovedError):
            state.acquire_shared()

    def test_disabled_tracking(self):
        """Disabled tracking hands out borrows without counting them."""
        state = BorrowState(enabled=False)
        first = state.acquire_exclusive()
        second = state.acquire_exclusive()
        assert not state.borrowed
        first.release()
        second.release()

    def test_moved_error_is_borrow_error(self):
        """MovedError is a kind of BorrowError."""
        assert issubclass(MovedError, BorrowError)
        assert issubclass(BorrowError, RuntimeError)


class TestStackAliasing:
    """Tests for the aliasing rules between stack operations."""

    def test_read_iter_blocks_mutation(self):
        """push/pop/peek_mut/clear fail while a reader is live."""
        stack = LinkedStack([1, 2])
        it = stack.iter()
        with pytest.raises(BorrowError):
            stack.push(3)
        with pytest.raises(BorrowError):
            stack.pop()
        with pytest.raises(BorrowError):
            stack.peek_mut()
        with pytest.raises(BorrowError):
            stack.clear()
        with pytest.raises(BorrowError):
            stack.into_iter()
        it.close()
        stack.push(3)
        assert stack.pop() == 3

    def test_failed_push_leaves_stack_unchanged(self):
        """A refused push does not modify the chain."""
        stack = LinkedStack([1, 2])
        with stack.iter() as it:
            with pytest.raises(BorrowError):
                stack.push(3)
            assert list(it) == [2, 1]
        assert len(stack) == 2

    def test_read_iter_allows_reads(self):
        """peek, len and more readers are fine alongside a reader."""
        stack = LinkedStack([1, 2])
        it = stack.iter()
        assert stack.peek() == 2
        assert len(stack) == 2
        assert list(stack.iter()) == [2, 1]
        it.close()

    def test_read_iter_blocks_iter_mut(self):
        """A reader excludes the mutable iterator."""
        stack = LinkedStack([1])
        it = stack.iter()
        with pytest.raises(BorrowError):
            stack.iter_mut()
        it.close()
        stack.iter_mut().close()

    def test_iter_mut_excludes_everything(self):
        """A live mutable iterator blocks every other access."""
        stack = LinkedStack([1, 2])
        it = stack.iter_mut()
        with pytest.raises(BorrowError):
            stack.peek()
        with pytest.raises(BorrowError):
            stack.iter()
        with pytest.raises(BorrowError):
            stack.iter_mut()
        with pytest.raises(BorrowError):
            stack.peek_mut()
        with pytest.raises(BorrowError):
            stack.push(3)
        with pytest.raises(BorrowError):
            len(stack)
        it.close()
        assert stack.peek() == 2

    def test_exhaustion_releases_borrow(self):
        """Running an iterator to the end ends its borrow."""
        stack = LinkedStack([1, 2])
        it = stack.iter_mut()
        for _ in it:
            pass
        stack.push(3)
        assert stack.peek() == 3

    def test_peek_mut_excludes_everything(self):
        """A live peek_mut handle blocks every other access."""
        stack = LinkedStack([1, 2])
        ref = stack.peek_mut()
        with pytest.raises(BorrowError):
            stack.peek()
        with pytest.raises(BorrowError):
            stack.peek_mut()
        with pytest.raises(BorrowError):
            stack.iter()
        with pytest.raises(BorrowError):
            stack.pop()
        ref.release()
        assert ref.released
        assert stack.pop() == 2

    def test_handle_unusable_after_release(self):
        """A released peek_mut handle refuses access."""
        stack = LinkedStack([1])
        ref = stack.peek_mut()
        ref.release()
        with pytest.raises(BorrowError):
            ref.get()

    def test_dropped_reader_releases_borrow(self):
        """Garbage collecting an iterator ends its borrow."""
        stack = LinkedStack([1, 2])
        it = stack.iter()
        next(it)
        del it
        stack.push(3)
        assert stack.pop() == 3

    def test_dropped_handle_releases_borrow(self):
        """Garbage collecting a peek_mut handle ends its borrow."""
        stack = LinkedStack([1])
        ref = stack.peek_mut()
        ref.set(5)
        del ref
        assert stack.pop() == 5

    def test_disabled_checks(self):
        """With checks disabled, only the move check remains."""
        original = config.check_borrows
        try:
            config.check_borrows = False
            stack = LinkedStack([1, 2])
        finally:
            config.check_borrows = original

        it = stack.iter()
        stack.push(3)
        assert stack.pop() == 3
        it.close()
        stack.into_iter()
        with pytest.raises(MovedError):
            stack.push(4)

    def test_disabled_checks_reader_ends_early(self):
        """Without checks, popping under a reader cuts its walk short."""
        original = config.check_borrows
        try:
            config.check_borrows = False
            stack = LinkedStack([1, 2, 3])
        finally:
            config.check_borrows = original

        it = stack.iter()
        assert next(it) == 3
        assert stack.pop() == 3
        assert stack.pop() == 2
        assert list(it) == [2]
