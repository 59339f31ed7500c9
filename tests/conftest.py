"""
Shared fixtures: deterministic keys and a wire-format transaction builder.
"""

from typing import List, Optional

import pytest

from drainguard.codec import decode_base58, encode_base58, encode_var_len
from drainguard.decoder import TOKEN_PROGRAM_ID

TOKEN_PROGRAM_KEY = decode_base58(TOKEN_PROGRAM_ID)
UNKNOWN_PROGRAM_KEY = bytes([0xAB]) * 32


def make_key(seed: int) -> bytes:
    """32-byte key; seed must be 1..255 (seed 0 would be the System Program)."""
    return bytes([seed]) * 32


def address(seed: int) -> str:
    return encode_base58(make_key(seed))


USER_KEY = make_key(1)
USER = address(1)


def transfer_data(amount: int) -> bytes:
    return bytes([3]) + amount.to_bytes(8, "little")


def transfer_checked_data(amount: int, decimals: int = 6) -> bytes:
    return bytes([12]) + amount.to_bytes(8, "little") + bytes([decimals])


def approve_data(amount: int) -> bytes:
    return bytes([4]) + amount.to_bytes(8, "little")


def approve_checked_data(amount: int, decimals: int = 6) -> bytes:
    return bytes([13]) + amount.to_bytes(8, "little") + bytes([decimals])


def set_authority_data(kind: int, new_authority: Optional[bytes] = None) -> bytes:
    if new_authority is None:
        return bytes([6, kind, 0])
    return bytes([6, kind, 1]) + new_authority


def close_account_data() -> bytes:
    return bytes([9])


class TransactionBuilder:
    """Builds legacy wire-format transactions by hand."""

    def __init__(self, num_signatures: int = 1):
        self.num_signatures = num_signatures
        self.keys: List[bytes] = []
        self.instructions = []

    def index_of(self, key: bytes) -> int:
        if key not in self.keys:
            self.keys.append(key)
        return self.keys.index(key)

    def add(self, program: bytes, accounts: List[bytes], data: bytes) -> "TransactionBuilder":
        program_index = self.index_of(program)
        indices = [self.index_of(key) for key in accounts]
        self.instructions.append((program_index, indices, data))
        return self

    def token(self, accounts: List[bytes], data: bytes) -> "TransactionBuilder":
        return self.add(TOKEN_PROGRAM_KEY, accounts, data)

    def message(self) -> bytes:
        out = bytearray([max(self.num_signatures, 1), 0, 0])
        out += encode_var_len(len(self.keys))
        for key in self.keys:
            out += key
        out += bytes([0x07]) * 32  # recent blockhash
        out += encode_var_len(len(self.instructions))
        for program_index, indices, data in self.instructions:
            out.append(program_index)
            out += encode_var_len(len(indices))
            out += bytes(indices)
            out += encode_var_len(len(data))
            out += data
        return bytes(out)

    def build(self) -> bytes:
        signatures = bytes(64 * self.num_signatures)
        return encode_var_len(self.num_signatures) + signatures + self.message()


@pytest.fixture
def builder():
    return TransactionBuilder()


@pytest.fixture
def user():
    return USER
