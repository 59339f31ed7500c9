"""
Data models for parsed transaction messages.

Everything here is built fresh per parse and never mutated afterwards.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple


PLACEHOLDER_PREFIX = "unknown_"


def placeholder_address(index: int) -> str:
    """Synthetic address for an index that does not resolve against the account table."""
    return f"{PLACEHOLDER_PREFIX}{index}"


@dataclass(frozen=True)
class MessageHeader:
    """The three signer/readonly counts at the start of a message."""
    num_required_signatures: int = 0
    num_readonly_signed: int = 0
    num_readonly_unsigned: int = 0


@dataclass(frozen=True)
class StructuredInstruction:
    """An instruction with its index references resolved to addresses."""
    program_id: str
    account_addresses: Tuple[str, ...] = ()
    data: bytes = b""


@dataclass(frozen=True)
class ParsedTransaction:
    """
    Result of parsing a serialized transaction or message.

    `truncated` is set when the buffer ran out before everything the message
    declared could be read; whatever was recovered up to that point is kept.
    """
    account_keys: Tuple[str, ...] = ()
    instructions: Tuple[StructuredInstruction, ...] = ()
    touched_addresses: FrozenSet[str] = field(default_factory=frozenset)
    header: MessageHeader = field(default_factory=MessageHeader)
    signature_count: int = 0
    version: Optional[int] = None  # None for legacy messages
    truncated: bool = False

    @property
    def program_ids(self) -> Tuple[str, ...]:
        """Program ids in instruction order (may repeat)."""
        return tuple(ix.program_id for ix in self.instructions)
