"""Hash serialization and deserialization.

Implements the byte layout of a hash. All fields are unsigned integers
packed low-bit-first.

Hash format:
  [Header: 3 bytes]
    - L DC:         6 bits
    - P DC:         6 bits
    - Q DC:         6 bits
    - L scale:      5 bits
    - HasAlpha:     1 bit
  [Header: 2 bytes]
    - L count:      3 bits
    - P scale:      6 bits
    - Q scale:      6 bits
    - IsLandscape:  1 bit
  [Alpha header: 1 byte, only if HasAlpha]
    - A DC:         4 bits
    - A scale:      4 bits
  [AC coefficients: 4 bits each, two per byte, low nibble first]
    - L, P, Q, then A if HasAlpha
"""

from __future__ import annotations

from thumbhash.components.hash import HashFields, HashHeader
from thumbhash.core.bits import BitReader, BitWriter

HEADER_SIZE = 5
ALPHA_HEADER_SIZE = 1
NIBBLE_BITS = 4

# (field name, bit width), in wire order
HEADER_LAYOUT: tuple[tuple[str, int], ...] = (
    ("l_dc", 6),
    ("p_dc", 6),
    ("q_dc", 6),
    ("l_scale", 5),
    ("has_alpha", 1),
    ("l_count", 3),
    ("p_scale", 6),
    ("q_scale", 6),
    ("is_landscape", 1),
)

ALPHA_LAYOUT: tuple[tuple[str, int], ...] = (
    ("a_dc", 4),
    ("a_scale", 4),
)


class InvalidHash(ValueError):
    """Raised when bytes are not a well-formed hash."""


def get_serialized_size(fields: HashHeader) -> int:
    """Size in bytes of the packed form of a hash."""
    size = HEADER_SIZE
    if fields.has_alpha:
        size += ALPHA_HEADER_SIZE
    return size + (fields.nibble_count + 1) // 2


def serialize_hash(fields: HashFields) -> bytes:
    """Pack hash fields into bytes.

    Args:
        fields: Quantized header fields and AC nibbles

    Returns:
        Serialized hash
    """
    writer = BitWriter()

    layout = HEADER_LAYOUT + (ALPHA_LAYOUT if fields.has_alpha else ())
    for name, nbits in layout:
        writer.write(int(getattr(fields, name)), nbits)

    for nibble in fields.ac:
        writer.write(nibble, NIBBLE_BITS)

    return writer.getvalue()


def _read_header(reader: BitReader, size: int) -> dict[str, int]:
    if size < HEADER_SIZE:
        raise InvalidHash(f"Hash too short: need {HEADER_SIZE} bytes, got {size}")

    values = {name: reader.read(nbits) for name, nbits in HEADER_LAYOUT}

    if values["has_alpha"]:
        if size < HEADER_SIZE + ALPHA_HEADER_SIZE:
            raise InvalidHash(
                f"Hash too short for alpha header: need "
                f"{HEADER_SIZE + ALPHA_HEADER_SIZE} bytes, got {size}"
            )
        values.update({name: reader.read(nbits) for name, nbits in ALPHA_LAYOUT})

    return values


def deserialize_header(data: bytes) -> HashHeader:
    """Read only the header fields of a hash.

    Raises:
        InvalidHash: If data is too short to hold the header
    """
    return HashHeader(**_read_header(BitReader(data), len(data)))


def deserialize_hash(data: bytes) -> HashFields:
    """Unpack bytes into hash fields.

    Trailing bytes after the last AC nibble are ignored.

    Raises:
        InvalidHash: If data is too short for the header or the AC nibbles
    """
    reader = BitReader(data)
    values = _read_header(reader, len(data))
    header = HashHeader(**values)

    ac = []
    try:
        for _ in range(header.nibble_count):
            ac.append(reader.read(NIBBLE_BITS))
    except EOFError as e:
        raise InvalidHash(
            f"Hash too short: {len(data)} bytes hold {len(ac)} of "
            f"{header.nibble_count} AC coefficients"
        ) from e

    return HashFields(**values, ac=ac)
