"""Pool of reusable arenas with scoped, exclusive checkout.

Each encode or decode call checks out one arena for its whole duration and
hands it back when the ``with`` block exits, whether it exits normally or
through an exception. A checked-out arena is never visible to another call.

Example:
    >>> pool = ArenaPool(max_arenas=2)
    >>> with pool.checkout(1 << 16) as arena:
    ...     ref = arena.alloc_tensor((32, 32, 4), np.uint8)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from thumbhash.core.arena import Arena

logger = logging.getLogger(__name__)


class ArenaPool:
    """Thread-safe free list of arenas.

    Attributes:
        max_arenas: Maximum number of idle arenas kept for reuse
        initial_bytes: Minimum size of a newly created arena
        max_retained_bytes: Arenas grown past this size are dropped on
            release instead of pooled
        enabled: When False every checkout gets a fresh arena that is
            dropped on release
    """

    def __init__(
        self,
        max_arenas: int = 4,
        initial_bytes: int = 1 << 20,
        enabled: bool = True,
        max_retained_bytes: int = 1 << 24,
    ) -> None:
        if max_arenas < 0:
            raise ValueError(f"max_arenas must be non-negative, got {max_arenas}")
        if initial_bytes <= 0:
            raise ValueError(f"initial_bytes must be positive, got {initial_bytes}")
        if max_retained_bytes < initial_bytes:
            raise ValueError(
                f"max_retained_bytes must be at least initial_bytes, "
                f"got {max_retained_bytes} < {initial_bytes}"
            )

        self.max_arenas = max_arenas
        self.initial_bytes = initial_bytes
        self.enabled = enabled
        self.max_retained_bytes = max_retained_bytes
        self._free: list[Arena] = []
        self._lock = threading.Lock()

    @property
    def idle(self) -> int:
        """Number of arenas currently waiting for reuse."""
        with self._lock:
            return len(self._free)

    @contextmanager
    def checkout(self, min_bytes: int) -> Iterator[Arena]:
        """Borrow an empty arena of at least ``min_bytes`` bytes.

        The arena is reset and returned to the pool on every exit path.
        """
        arena = self._acquire(min_bytes)
        try:
            yield arena
        finally:
            self._release(arena)

    def clear(self) -> None:
        """Drop every idle arena."""
        with self._lock:
            self._free.clear()

    def _acquire(self, min_bytes: int) -> Arena:
        size = max(min_bytes, self.initial_bytes)
        arena = None
        if self.enabled:
            with self._lock:
                if self._free:
                    arena = self._free.pop()
        if arena is None:
            logger.debug("allocating new arena of %d bytes", size)
            return Arena(size_bytes=size)
        arena.reserve(size)
        return arena

    def _release(self, arena: Arena) -> None:
        arena.reset()
        if not self.enabled:
            return
        if arena.size > self.max_retained_bytes:
            logger.debug("dropping arena of %d bytes", arena.size)
            return
        with self._lock:
            if len(self._free) < self.max_arenas:
                self._free.append(arena)

    def __repr__(self) -> str:
        return (
            f"ArenaPool(max_arenas={self.max_arenas}, idle={self.idle}, "
            f"enabled={self.enabled})"
        )
