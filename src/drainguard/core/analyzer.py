"""
Transaction Analyzer: raw bytes + user address in, risk verdict out.

Pure and synchronous. Every call builds its own account table and analysis,
so concurrent callers need no coordination.
"""

import base64
import binascii
import logging
from typing import List

from ..codec import decode_base58
from ..decoder import decode_instruction
from ..parser import parse_transaction
from ..rules import RiskVerdict, assess_risk
from .models import TransactionAnalysis

logger = logging.getLogger(__name__)

ENCODINGS = ("base64", "base58", "hex")


def analyze_transaction(data: bytes) -> TransactionAnalysis:
    """
    Parse and decode a serialized transaction.

    Args:
        data: Serialized transaction or bare message bytes

    Returns:
        TransactionAnalysis; empty when nothing could be recovered
    """
    parsed = parse_transaction(data)

    program_ids: List[str] = []
    for program_id in parsed.program_ids:
        if program_id not in program_ids:
            program_ids.append(program_id)

    return TransactionAnalysis(
        operations=tuple(decode_instruction(ix) for ix in parsed.instructions),
        touched_addresses=parsed.touched_addresses,
        program_ids=tuple(program_ids),
        truncated=parsed.truncated,
    )


def assess_transaction(data: bytes, user_address: str) -> RiskVerdict:
    """
    Analyze a transaction and assess it on behalf of `user_address`.

    Never raises for any byte sequence.
    """
    analysis = analyze_transaction(data)
    verdict = assess_risk(analysis, user_address)

    logger.debug(
        "Assessed transaction: %d operations, %d touched accounts, %d findings",
        len(analysis), len(analysis.touched_addresses), len(verdict.findings),
    )
    return verdict


def decode_transaction_text(text: str, encoding: str = "base64") -> bytes:
    """
    Turn a textual transaction (as wallets and RPCs hand them out) into bytes.

    Raises:
        ValueError: on an unknown encoding or malformed text
    """
    text = text.strip()
    if encoding == "base64":
        try:
            return base64.b64decode(text, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 transaction: {e}") from e
    if encoding == "base58":
        return decode_base58(text)
    if encoding == "hex":
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise ValueError(f"Invalid hex transaction: {e}") from e
    raise ValueError(f"Unknown encoding: {encoding} (expected one of {', '.join(ENCODINGS)})")
