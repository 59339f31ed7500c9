"""
Variable-length and fixed-width integers.

All readers here are total: bytes past the end of the buffer read as zero,
so truncated attacker input can never raise out of the parser.
"""

from typing import Tuple

# Three 7-bit groups
MAX_VAR_LEN_BYTES = 3
MAX_VAR_LEN_VALUE = (1 << (7 * MAX_VAR_LEN_BYTES)) - 1

MAX_U64 = (1 << 64) - 1


def _byte_at(data: bytes, index: int) -> int:
    if 0 <= index < len(data):
        return data[index]
    return 0


def decode_var_len(data: bytes, offset: int) -> Tuple[int, int]:
    """
    Decode a compact length prefix.

    Little-endian base-128: each byte contributes 7 bits, the high bit means
    another byte follows. At most three bytes are read and the third one is
    final even if its continuation bit is set.

    Args:
        data: Buffer to read from
        offset: Position of the first byte

    Returns:
        (value, bytes consumed)
    """
    value = 0
    consumed = 0
    for i in range(MAX_VAR_LEN_BYTES):
        byte = _byte_at(data, offset + i)
        value |= (byte & 0x7F) << (7 * i)
        consumed += 1
        if not byte & 0x80:
            break
    return value, consumed


def encode_var_len(value: int) -> bytes:
    """Encode a length prefix, the inverse of decode_var_len."""
    if value < 0 or value > MAX_VAR_LEN_VALUE:
        raise ValueError(f"Length out of range: {value}")

    out = bytearray()
    while True:
        group = value & 0x7F
        value >>= 7
        if value:
            out.append(group | 0x80)
        else:
            out.append(group)
            return bytes(out)


def read_u64_le(data: bytes, offset: int) -> int:
    """Read an unsigned 64-bit little-endian integer (token amounts)."""
    result = 0
    for i in range(8):
        result |= _byte_at(data, offset + i) << (8 * i)
    return result
