"""
Wire-format parser for Solana transactions.

Layout:
    [sig count (varint)] [64-byte signatures ...]      optional
    [version prefix 0x80|v]                           versioned messages only
    [header: 3 bytes]
    [account count (varint)] [32-byte keys ...]
    [recent blockhash: 32 bytes]
    [instruction count (varint)]
        [program index: 1] [account count (varint)] [account indices: 1 each]
        [data length (varint)] [data ...]

The input is attacker-controlled. Parsing never raises: short buffers yield a
partial account table, unresolvable indices become placeholder addresses and
an overrun stops the instruction scan while keeping what was already read.
A message whose first byte is >= 0x80 is read as versioned, not as a header.
"""

import logging
from typing import List, Optional, Set

from ..codec import decode_var_len, encode_base58
from .models import MessageHeader, StructuredInstruction, ParsedTransaction, placeholder_address

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 64
PUBKEY_LENGTH = 32
BLOCKHASH_LENGTH = 32
HEADER_LENGTH = 3
MAX_SIGNATURE_COUNT = 127
VERSION_PREFIX_MASK = 0x80


class WireFormatParser:
    """
    Single-use cursor over one serialized transaction.

    Use parse_transaction() rather than instantiating this directly.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.offset = 0
        self.truncated = False

    @property
    def remaining(self) -> int:
        return max(0, len(self.data) - self.offset)

    def parse(self) -> ParsedTransaction:
        signature_count = self._skip_signatures()
        version = self._read_version_prefix()
        header = self._read_header()
        account_keys = self._read_account_keys()
        self._skip(BLOCKHASH_LENGTH)
        instructions, touched = self._read_instructions(account_keys)

        if self.truncated:
            logger.debug(
                "Truncated transaction: recovered %d accounts, %d instructions",
                len(account_keys), len(instructions),
            )

        return ParsedTransaction(
            account_keys=tuple(account_keys),
            instructions=tuple(instructions),
            touched_addresses=frozenset(touched),
            header=header,
            signature_count=signature_count,
            version=version,
            truncated=self.truncated,
        )

    def _skip_signatures(self) -> int:
        """
        Skip a signature block if the buffer looks like a full transaction.

        Heuristic: the first byte is taken as a signature count when it is
        <= 127 and that many signatures fit in the buffer. A bare message
        whose header byte satisfies the same test is misread as signed.
        """
        if not self.data:
            return 0
        count = self.data[0]
        span = 1 + count * SIGNATURE_LENGTH
        if count <= MAX_SIGNATURE_COUNT and span <= len(self.data):
            self.offset = span
            return count
        return 0

    def _read_version_prefix(self) -> Optional[int]:
        if self.remaining and self.data[self.offset] & VERSION_PREFIX_MASK:
            version = self.data[self.offset] & ~VERSION_PREFIX_MASK
            self.offset += 1
            return version
        return None

    def _read_header(self) -> MessageHeader:
        raw = self.data[self.offset:self.offset + HEADER_LENGTH]
        if len(raw) < HEADER_LENGTH:
            self.truncated = True
            raw = raw + b"\x00" * (HEADER_LENGTH - len(raw))
        self.offset += HEADER_LENGTH
        return MessageHeader(raw[0], raw[1], raw[2])

    def _read_var_len(self) -> int:
        value, consumed = decode_var_len(self.data, self.offset)
        if self.offset + consumed > len(self.data):
            self.truncated = True
        self.offset += consumed
        return value

    def _skip(self, length: int) -> None:
        if length > self.remaining:
            self.truncated = True
        self.offset += length

    def _read_account_keys(self) -> List[str]:
        declared = self._read_var_len()
        available = self.remaining // PUBKEY_LENGTH
        if declared > available:
            self.truncated = True

        keys = []
        for _ in range(min(declared, available)):
            keys.append(encode_base58(self.data[self.offset:self.offset + PUBKEY_LENGTH]))
            self.offset += PUBKEY_LENGTH
        return keys

    def _read_instructions(self, account_keys: List[str]):
        instructions: List[StructuredInstruction] = []
        touched: Set[str] = set()

        declared = self._read_var_len()
        if self.truncated:
            return instructions, touched

        def resolve(index: int) -> str:
            if index < len(account_keys):
                return account_keys[index]
            return placeholder_address(index)

        for _ in range(declared):
            if not self.remaining:
                self.truncated = True
                break

            program_index = self.data[self.offset]
            self.offset += 1

            num_accounts = self._read_var_len()
            indices = self.data[self.offset:self.offset + num_accounts]
            self.offset += len(indices)
            if len(indices) < num_accounts:
                self.truncated = True

            data = b""
            if not self.truncated:
                data_length = self._read_var_len()
                data = self.data[self.offset:self.offset + data_length]
                self.offset += len(data)
                if len(data) < data_length:
                    self.truncated = True

            accounts = tuple(resolve(i) for i in indices)
            touched.update(accounts)
            instructions.append(StructuredInstruction(
                program_id=resolve(program_index),
                account_addresses=accounts,
                data=bytes(data),
            ))

            if self.truncated:
                break

        return instructions, touched


def parse_transaction(data: bytes) -> ParsedTransaction:
    """
    Parse a serialized transaction or bare message.

    Args:
        data: Raw bytes, optionally prefixed with a signature block

    Returns:
        ParsedTransaction; empty or partial on malformed input, never an exception
    """
    return WireFormatParser(data).parse()
