"""Bump-allocated scratch memory for one encode or decode call.

Every plane a call touches (the RGBA input, the four LPQA planes, the
placeholder buffer) is carved out of a single bytearray. Components hold a
TensorRef into that buffer rather than an array, and the arena's generation
counter makes any ref outlive its call loudly instead of silently reading
reused memory.

Example:
    >>> arena = Arena(size_bytes=1 << 12)
    >>> ref = arena.alloc_tensor((8, 8), np.float64)
    >>> arena.view(ref)[:] = 0.5
    >>> arena.reset()
    >>> arena.view(ref)
    Traceback (most recent call last):
    ValueError: Stale TensorRef ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


def _align(offset: int, alignment: int) -> int:
    return -(-offset // alignment) * alignment


def _contiguous_strides(shape: tuple[int, ...], itemsize: int) -> tuple[int, ...]:
    strides = []
    step = itemsize
    for dim in reversed(shape):
        strides.append(step)
        step *= dim
    return tuple(reversed(strides))


@dataclass(frozen=True)
class TensorRef:
    """Handle to an array stored in an Arena.

    Attributes:
        offset: Byte offset of the first element
        shape: Array dimensions
        dtype: Element type
        strides: Byte step per dimension
        generation: Arena generation the ref was issued in
    """

    offset: int
    shape: tuple[int, ...]
    dtype: np.dtype[Any]
    strides: tuple[int, ...]
    generation: int

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")
        if len(self.shape) != len(self.strides):
            raise ValueError(
                f"shape and strides must have same length: "
                f"shape={self.shape}, strides={self.strides}"
            )
        if self.generation < 0:
            raise ValueError(f"generation must be non-negative, got {self.generation}")

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def size(self) -> int:
        """Element count."""
        return int(np.prod(self.shape))

    @property
    def nbytes(self) -> int:
        """Bytes between the first and one past the last element."""
        if self.size == 0:
            return 0
        span = sum((dim - 1) * step for dim, step in zip(self.shape, self.strides))
        return span + self.dtype.itemsize


class Arena:
    """Fixed-size buffer handing out aligned, C-contiguous arrays.

    Allocation only moves a bump pointer forward; memory is reclaimed all at
    once by reset(), which also bumps the generation so earlier refs fail
    on view().

    Attributes:
        size: Buffer size in bytes
        offset: Bump pointer
        generation: Incremented by reset() and by a growing reserve()
    """

    def __init__(self, size_bytes: int):
        if size_bytes <= 0:
            raise ValueError(f"size_bytes must be positive, got {size_bytes}")

        self._buffer = bytearray(size_bytes)
        self._size = size_bytes
        self._offset = 0
        self._generation = 0

    @property
    def size(self) -> int:
        return self._size

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def available(self) -> int:
        """Bytes left after the bump pointer."""
        return self._size - self._offset

    def reset(self) -> None:
        """Release every allocation and invalidate outstanding refs."""
        self._offset = 0
        self._generation += 1

    def reserve(self, size_bytes: int) -> None:
        """Grow the buffer to at least ``size_bytes``.

        Only an empty arena can grow, since live views point into the old
        buffer. A no-op when the arena is already large enough.

        Raises:
            ValueError: If the arena still holds allocations
        """
        if size_bytes <= self._size:
            return
        if self._offset != 0:
            raise ValueError(
                f"Cannot grow arena with live allocations (offset={self._offset})"
            )
        self._buffer = bytearray(size_bytes)
        self._size = size_bytes
        self._generation += 1

    def alloc_tensor(
        self,
        shape: tuple[int, ...],
        dtype: np.dtype[Any] | type | str,
    ) -> TensorRef:
        """Reserve room for an uninitialized array.

        Raises:
            ValueError: If the arena has too little room left
        """
        dt = np.dtype(dtype)
        shape = tuple(int(dim) for dim in shape)
        nbytes = int(np.prod(shape)) * dt.itemsize

        start = _align(self._offset, dt.alignment)
        if start + nbytes > self._size:
            raise ValueError(
                f"Arena out of memory: need {nbytes} bytes at offset {start}, "
                f"but arena size is {self._size} (available: {self.available})"
            )

        self._offset = start + nbytes
        return TensorRef(
            offset=start,
            shape=shape,
            dtype=dt,
            strides=_contiguous_strides(shape, dt.itemsize),
            generation=self._generation,
        )

    def view(self, ref: TensorRef) -> np.ndarray:
        """Zero-copy array over the bytes a ref points to.

        Raises:
            ValueError: If the ref was issued before the last reset, or does
                not fit the buffer
        """
        if ref.generation != self._generation:
            raise ValueError(
                f"Stale TensorRef: arena was reset (current generation {self._generation}, "
                f"ref is from generation {ref.generation})"
            )
        if ref.offset + ref.nbytes > self._size:
            raise ValueError(
                f"TensorRef out of bounds: offset={ref.offset}, nbytes={ref.nbytes}, "
                f"arena size={self._size}"
            )

        return np.ndarray(
            shape=ref.shape,
            dtype=ref.dtype,
            buffer=self._buffer,
            offset=ref.offset,
            strides=ref.strides,
        )

    def copy_tensor(self, arr: np.ndarray) -> TensorRef:
        """Allocate a slot shaped like ``arr`` and copy it in."""
        ref = self.alloc_tensor(arr.shape, arr.dtype)
        self.view(ref)[...] = arr
        return ref

    def __repr__(self) -> str:
        return (
            f"Arena(size={self._size}, offset={self._offset}, "
            f"generation={self._generation}, available={self.available})"
        )
