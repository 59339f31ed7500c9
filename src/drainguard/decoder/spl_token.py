"""
SPL Token instruction decoder.

Recognizes Transfer, Approve, SetAuthority and CloseAccount (plus the
Checked forms) from raw instruction data. The data comes from an unsigned
transaction and must be treated as hostile: nothing here raises, and a
short instruction keeps its variant with empty fields instead of vanishing.
"""

from enum import IntEnum
from typing import Callable, Dict

from ..codec import encode_base58, read_u64_le
from ..parser.models import StructuredInstruction
from .models import (
    Approve,
    CloseAccount,
    DecodedOperation,
    SetAuthority,
    Transfer,
    Unrecognized,
)
from .programs import TOKEN_PROGRAM_ID


class TokenInstruction(IntEnum):
    """First data byte of an SPL Token instruction."""
    TRANSFER = 3
    APPROVE = 4
    SET_AUTHORITY = 6
    CLOSE_ACCOUNT = 9
    TRANSFER_CHECKED = 12
    APPROVE_CHECKED = 13


AUTHORITY_KINDS: Dict[int, str] = {
    0: "MintTokens",
    1: "FreezeAccount",
    2: "AccountOwner",
    3: "CloseAccount",
}

# discriminator(1) + amount(8), plus decimals(1) for the checked forms
AMOUNT_DATA_LENGTH = 9
CHECKED_DATA_LENGTH = 10
# discriminator(1) + authority kind(1) + option flag(1), then a 32-byte key
SET_AUTHORITY_DATA_LENGTH = 3
NEW_AUTHORITY_END = SET_AUTHORITY_DATA_LENGTH + 32


def authority_kind_name(code: int) -> str:
    return AUTHORITY_KINDS.get(code, f"Unknown({code})")


class TokenInstructionDecoder:
    """
    Decodes StructuredInstructions into DecodedOperation variants.

    Stateless; one instance can be shared freely.
    """

    def __init__(self, token_program_id: str = TOKEN_PROGRAM_ID):
        self.token_program_id = token_program_id
        self._handlers: Dict[int, Callable[[StructuredInstruction], DecodedOperation]] = {
            TokenInstruction.TRANSFER: self._decode_transfer,
            TokenInstruction.TRANSFER_CHECKED: self._decode_transfer_checked,
            TokenInstruction.APPROVE: self._decode_approve,
            TokenInstruction.APPROVE_CHECKED: self._decode_approve_checked,
            TokenInstruction.SET_AUTHORITY: self._decode_set_authority,
            TokenInstruction.CLOSE_ACCOUNT: self._decode_close_account,
        }

    def decode(self, ix: StructuredInstruction) -> DecodedOperation:
        if ix.program_id != self.token_program_id:
            return Unrecognized(
                program="unknown",
                program_id=ix.program_id,
                account_addresses=tuple(ix.account_addresses),
                data=bytes(ix.data),
            )

        handler = self._handlers.get(ix.data[0]) if ix.data else None
        if handler is None:
            return Unrecognized(
                program="spl-token",
                program_id=ix.program_id,
                account_addresses=tuple(ix.account_addresses),
                data=bytes(ix.data),
            )
        return handler(ix)

    # Accounts: source, destination, owner
    def _decode_transfer(self, ix: StructuredInstruction) -> Transfer:
        if len(ix.data) < AMOUNT_DATA_LENGTH or len(ix.account_addresses) < 3:
            return Transfer()
        source, destination, authority = ix.account_addresses[:3]
        return Transfer(
            source=source,
            destination=destination,
            authority=authority,
            amount=read_u64_le(ix.data, 1),
        )

    # Accounts: source, mint, destination, owner
    def _decode_transfer_checked(self, ix: StructuredInstruction) -> Transfer:
        if len(ix.data) < CHECKED_DATA_LENGTH or len(ix.account_addresses) < 4:
            return Transfer()
        source, mint, destination, authority = ix.account_addresses[:4]
        return Transfer(
            source=source,
            destination=destination,
            authority=authority,
            amount=read_u64_le(ix.data, 1),
            mint=mint,
            decimals=ix.data[9],
        )

    # Accounts: source, delegate, owner
    def _decode_approve(self, ix: StructuredInstruction) -> Approve:
        if len(ix.data) < AMOUNT_DATA_LENGTH or len(ix.account_addresses) < 3:
            return Approve()
        source, delegate, authority = ix.account_addresses[:3]
        return Approve(
            source=source,
            delegate=delegate,
            authority=authority,
            amount=read_u64_le(ix.data, 1),
        )

    # Accounts: source, mint, delegate, owner
    def _decode_approve_checked(self, ix: StructuredInstruction) -> Approve:
        if len(ix.data) < CHECKED_DATA_LENGTH or len(ix.account_addresses) < 4:
            return Approve()
        source, mint, delegate, authority = ix.account_addresses[:4]
        return Approve(
            source=source,
            delegate=delegate,
            authority=authority,
            amount=read_u64_le(ix.data, 1),
            mint=mint,
            decimals=ix.data[9],
        )

    # Accounts: account, current authority
    def _decode_set_authority(self, ix: StructuredInstruction) -> SetAuthority:
        if len(ix.data) < SET_AUTHORITY_DATA_LENGTH or len(ix.account_addresses) < 2:
            return SetAuthority()

        new_authority = None
        has_new_authority = ix.data[2] == 1
        if has_new_authority and len(ix.data) >= NEW_AUTHORITY_END:
            new_authority = encode_base58(ix.data[SET_AUTHORITY_DATA_LENGTH:NEW_AUTHORITY_END])

        account, current_authority = ix.account_addresses[:2]
        return SetAuthority(
            account=account,
            current_authority=current_authority,
            authority_kind=authority_kind_name(ix.data[1]),
            new_authority=new_authority,
        )

    # Accounts: account, rent destination, owner. No payload beyond the discriminator.
    def _decode_close_account(self, ix: StructuredInstruction) -> CloseAccount:
        if len(ix.account_addresses) < 3:
            return CloseAccount()
        account, rent_destination, authority = ix.account_addresses[:3]
        return CloseAccount(
            account=account,
            rent_destination=rent_destination,
            authority=authority,
        )


_default_decoder = TokenInstructionDecoder()


def decode_instruction(ix: StructuredInstruction) -> DecodedOperation:
    """Decode one instruction with the mainnet SPL Token program id."""
    return _default_decoder.decode(ix)
