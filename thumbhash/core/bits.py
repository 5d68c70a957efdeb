"""Little-endian bit writer and reader.

Fields are packed low-bit-first: the first field written occupies the least
significant bits of the first byte, and a field may straddle a byte
boundary. This is the only layout the hash format uses.
"""

from __future__ import annotations


class BitWriter:
    """Accumulates unsigned fields into a byte string.

    Example:
        >>> w = BitWriter()
        >>> w.write(5, 3)
        >>> w.write(1, 1)
        >>> w.getvalue()
        b'\\r'
    """

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._bits = 0

    @property
    def bit_length(self) -> int:
        """Number of bits written so far."""
        return self._bits

    def write(self, value: int, nbits: int) -> None:
        """Append the low ``nbits`` of ``value``.

        Raises:
            ValueError: If value does not fit in nbits
        """
        if nbits <= 0:
            raise ValueError(f"nbits must be positive, got {nbits}")
        if value < 0 or value >> nbits:
            raise ValueError(f"value {value} does not fit in {nbits} bits")

        for i in range(nbits):
            byte_idx, bit_idx = divmod(self._bits, 8)
            if byte_idx == len(self._buffer):
                self._buffer.append(0)
            if (value >> i) & 1:
                self._buffer[byte_idx] |= 1 << bit_idx
            self._bits += 1

    def getvalue(self) -> bytes:
        """Written bits, zero padded to a whole byte."""
        return bytes(self._buffer)


class BitReader:
    """Reads unsigned fields back in the order they were written."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._bits = 0

    @property
    def position(self) -> int:
        """Index of the next bit to read."""
        return self._bits

    @property
    def remaining(self) -> int:
        """Number of unread bits, padding included."""
        return len(self._data) * 8 - self._bits

    def read(self, nbits: int) -> int:
        """Consume ``nbits`` bits and return them as an integer.

        Raises:
            EOFError: If fewer than nbits bits remain
        """
        if nbits <= 0:
            raise ValueError(f"nbits must be positive, got {nbits}")
        if nbits > self.remaining:
            raise EOFError(
                f"need {nbits} bits at bit {self._bits}, "
                f"only {self.remaining} left"
            )

        value = 0
        for i in range(nbits):
            byte_idx, bit_idx = divmod(self._bits, 8)
            value |= ((self._data[byte_idx] >> bit_idx) & 1) << i
            self._bits += 1
        return value
