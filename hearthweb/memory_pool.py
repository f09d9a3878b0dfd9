"""Object pools: a single-type slot pool and a size-classed buffer pool."""

from __future__ import annotations

import threading
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

DEFAULT_BLOCK_SIZE = 4096
DEFAULT_MIN_BLOCK_SIZE = 8
DEFAULT_LEVEL_COUNT = 8


class MemoryPool(Generic[T]):
    """Hands out objects made by ``factory``, creating them a block at a time.

    Released objects are handed out again before new ones are made, most
    recently released first.
    """

    def __init__(self, factory: Callable[[], T], block_size: int = DEFAULT_BLOCK_SIZE) -> None:
        if block_size < 1:
            raise ValueError("block_size must be at least 1")
        self._factory = factory
        self._block_size = block_size
        self._free: list[T] = []
        self._block_count = 0
        self._lock = threading.Lock()
        self._grow()

    def _grow(self) -> None:
        block = [self._factory() for _ in range(self._block_size)]
        self._free.extend(reversed(block))
        self._block_count += 1

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def block_count(self) -> int:
        with self._lock:
            return self._block_count

    @property
    def free_count(self) -> int:
        with self._lock:
            return len(self._free)

    def allocate(self) -> T:
        """Take an object from the pool, adding a block if none is free."""
        with self._lock:
            if not self._free:
                self._grow()
            return self._free.pop()

    def deallocate(self, slot: Optional[T]) -> None:
        """Return an object to the pool; None is ignored."""
        if slot is None:
            return
        with self._lock:
            self._free.append(slot)


class MultiLevelMemoryPool:
    """Buffer pool with power-of-two size classes.

    Level ``n`` holds buffers of ``min_block_size * 2**n`` bytes. Requests larger
    than the largest level get a fresh buffer of exactly the requested size that
    is not kept by the pool.
    """

    def __init__(
        self,
        min_block_size: int = DEFAULT_MIN_BLOCK_SIZE,
        level_count: int = DEFAULT_LEVEL_COUNT,
    ) -> None:
        if min_block_size < 1:
            raise ValueError("min_block_size must be at least 1")
        if level_count < 1:
            raise ValueError("level_count must be at least 1")
        self._min_block_size = min_block_size
        self._level_count = level_count
        self._free: list[list[bytearray]] = [[] for _ in range(level_count)]
        self._blocks: list[list[bytearray]] = [[] for _ in range(level_count)]
        # Pooled buffers are never released, so their ids stay unique.
        self._level_of: dict[int, int] = {}
        self._lock = threading.Lock()

    @property
    def level_count(self) -> int:
        return self._level_count

    def level_block_size(self, level: int) -> int:
        """Size of the buffers at ``level``."""
        return self._min_block_size << level

    def find_pool_level(self, size: int) -> Optional[int]:
        """Smallest level whose buffers hold ``size`` bytes, or None if none does."""
        if size < 0:
            raise ValueError("size must not be negative")
        for level in range(self._level_count):
            if self.level_block_size(level) >= size:
                return level
        return None

    def allocate(self, size: int) -> bytearray:
        """Return a buffer of at least ``size`` bytes."""
        level = self.find_pool_level(size)
        if level is None:
            return bytearray(size)
        with self._lock:
            free = self._free[level]
            if free:
                return free.pop()
            block = bytearray(self.level_block_size(level))
            self._blocks[level].append(block)
            self._level_of[id(block)] = level
            return block

    def deallocate(self, block: Optional[bytearray]) -> None:
        """Give a buffer back; oversized buffers are simply dropped. None is ignored."""
        if block is None:
            return
        with self._lock:
            level = self._level_of.get(id(block))
            if level is not None:
                self._free[level].append(block)

    def free_count(self, level: int) -> int:
        """Number of idle buffers at ``level``."""
        with self._lock:
            return len(self._free[level])

    def block_count(self, level: int) -> int:
        """Number of buffers ever created at ``level``."""
        with self._lock:
            return len(self._blocks[level])