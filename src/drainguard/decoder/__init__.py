"""SPL Token instruction decoding."""

from .models import (
    Transfer,
    Approve,
    SetAuthority,
    CloseAccount,
    Unrecognized,
    DecodedOperation,
    TokenOperation,
    is_token_operation,
    source_account,
)
from .programs import (
    TOKEN_PROGRAM_ID,
    KNOWN_PROGRAMS,
    SAFE_PROGRAM_IDS,
    ProgramInfo,
    get_program_name,
    is_known_safe_program,
)
from .spl_token import TokenInstructionDecoder, TokenInstruction, AUTHORITY_KINDS, decode_instruction

__all__ = [
    "Transfer",
    "Approve",
    "SetAuthority",
    "CloseAccount",
    "Unrecognized",
    "DecodedOperation",
    "TokenOperation",
    "is_token_operation",
    "source_account",
    "TOKEN_PROGRAM_ID",
    "KNOWN_PROGRAMS",
    "SAFE_PROGRAM_IDS",
    "ProgramInfo",
    "get_program_name",
    "is_known_safe_program",
    "TokenInstructionDecoder",
    "TokenInstruction",
    "AUTHORITY_KINDS",
    "decode_instruction",
]
