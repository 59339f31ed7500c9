"""Primitive encodings used by the Solana wire format."""

from .varint import (
    decode_var_len,
    encode_var_len,
    read_u64_le,
    MAX_VAR_LEN_VALUE,
    MAX_U64,
)
from .base58 import encode_base58, decode_base58, InvalidCharacterError, BASE58_ALPHABET

__all__ = [
    "decode_var_len",
    "encode_var_len",
    "read_u64_le",
    "MAX_VAR_LEN_VALUE",
    "MAX_U64",
    "encode_base58",
    "decode_base58",
    "InvalidCharacterError",
    "BASE58_ALPHABET",
]
