"""Solana wire-format transaction parsing."""

from .models import MessageHeader, StructuredInstruction, ParsedTransaction, placeholder_address
from .wire_format import WireFormatParser, parse_transaction

__all__ = [
    "MessageHeader",
    "StructuredInstruction",
    "ParsedTransaction",
    "placeholder_address",
    "WireFormatParser",
    "parse_transaction",
]
