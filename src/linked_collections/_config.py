"""
config - Runtime configuration for linked_collections

This module provides the package-wide settings object. Values are read from
``LINKED_COLLECTIONS_*`` environment variables at import time and can be
changed later through validated properties. Stacks capture the settings when
they are created, so changes only affect stacks created afterwards.
"""

import os
import threading
from typing import Optional


DEFAULT_TEARDOWN_LOG_THRESHOLD = 10_000


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable with prefix."""
    full_name = f"LINKED_COLLECTIONS_{name}"
    return os.environ.get(full_name, default)


def _get_env_bool(name: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    value = _get_env(name)
    if value is None:
        return default
    return value.lower() in ('1', 'true', 'yes', 'on')


def _get_env_int(name: str, default: int, minimum: int = 1) -> int:
    """Get integer environment variable, falling back on bad values."""
    value = _get_env(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    if parsed < minimum:
        return default
    return parsed


class Config:
    """Global configuration for linked_collections.

    Settings:
        check_borrows: Track shared/exclusive borrows and refuse accesses
            that would alias a live mutable borrow. When False, nothing
            stops a push/pop/clear while an iterator is live; a pop
            unlinks the popped node, so a reader positioned on it ends
            early without an error.
        teardown_log_threshold: Explicit teardown of at least this many
            nodes emits a debug log record.
    """

    __slots__ = (
        '_lock',
        '_check_borrows',
        '_teardown_log_threshold',
    )

    def __init__(self) -> None:
        """Initialize configuration from the environment."""
        self._lock = threading.Lock()
        self.reload()

    def reload(self) -> None:
        """Re-read every setting from the environment."""
        with self._lock:
            self._check_borrows = _get_env_bool('CHECK_BORROWS', True)
            self._teardown_log_threshold = _get_env_int(
                'TEARDOWN_LOG_THRESHOLD', DEFAULT_TEARDOWN_LOG_THRESHOLD
            )

    @property
    def check_borrows(self) -> bool:
        """Whether runtime borrow tracking is enabled."""
        return self._check_borrows

    @check_borrows.setter
    def check_borrows(self, value: bool) -> None:
        """Enable or disable borrow tracking for new stacks."""
        with self._lock:
            self._check_borrows = bool(value)

    @property
    def teardown_log_threshold(self) -> int:
        """Minimum released node count that gets logged on teardown."""
        return self._teardown_log_threshold

    @teardown_log_threshold.setter
    def teardown_log_threshold(self, value: int) -> None:
        """Set teardown log threshold.

        Args:
            value: Positive integer threshold

        Raises:
            ValueError: If value is not a positive integer
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Invalid teardown_log_threshold: {value!r}")
        if value < 1:
            raise ValueError("teardown_log_threshold must be >= 1")
        with self._lock:
            self._teardown_log_threshold = value

    def __repr__(self) -> str:
        """String representation of configuration."""
        return (
            f"Config("
            f"check_borrows={self.check_borrows}, "
            f"teardown_log_threshold={self.teardown_log_threshold})"
        )


# Global configuration instance (initialized at module import)
config = Config()
