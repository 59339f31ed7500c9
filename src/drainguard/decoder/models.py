"""
Decoded token operations.

Each variant is its own class, so a value has exactly one shape. Fields are
Optional because an instruction that is recognizable but too short to decode
still produces its variant, with the fields it could not supply left as None.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Transfer:
    """Transfer / TransferChecked."""
    source: Optional[str] = None
    destination: Optional[str] = None
    authority: Optional[str] = None
    amount: Optional[int] = None
    mint: Optional[str] = None  # checked form only
    decimals: Optional[int] = None  # checked form only

    kind = "transfer"


@dataclass(frozen=True)
class Approve:
    """Approve / ApproveChecked: grants `delegate` spending rights over `source`."""
    source: Optional[str] = None
    delegate: Optional[str] = None
    authority: Optional[str] = None
    amount: Optional[int] = None
    mint: Optional[str] = None
    decimals: Optional[int] = None

    kind = "approve"


@dataclass(frozen=True)
class SetAuthority:
    """Reassigns an authority; `new_authority` of None means the authority is revoked."""
    account: Optional[str] = None
    current_authority: Optional[str] = None
    authority_kind: Optional[str] = None
    new_authority: Optional[str] = None

    kind = "set_authority"


@dataclass(frozen=True)
class CloseAccount:
    account: Optional[str] = None
    rent_destination: Optional[str] = None
    authority: Optional[str] = None

    kind = "close_account"


@dataclass(frozen=True)
class Unrecognized:
    """
    Anything the decoder does not understand.

    `program` is "spl-token" for an unknown token-program discriminator and
    "unknown" for any other program. Raw fields are kept so rules can still
    reason about foreign programs.
    """
    program: str = "unknown"
    program_id: Optional[str] = None
    account_addresses: Tuple[str, ...] = ()
    data: bytes = b""

    kind = "unrecognized"


TokenOperation = Union[Transfer, Approve, SetAuthority, CloseAccount]
DecodedOperation = Union[Transfer, Approve, SetAuthority, CloseAccount, Unrecognized]

TOKEN_OPERATION_TYPES = (Transfer, Approve, SetAuthority, CloseAccount)


def is_token_operation(op: DecodedOperation) -> bool:
    """True for decoded SPL Token operations (including unknown token discriminators)."""
    if isinstance(op, Unrecognized):
        return op.program == "spl-token"
    return isinstance(op, TOKEN_OPERATION_TYPES)


def source_account(op: DecodedOperation) -> Optional[str]:
    """The token account an operation acts on, if any."""
    if isinstance(op, (Transfer, Approve)):
        return op.source
    if isinstance(op, (SetAuthority, CloseAccount)):
        return op.account
    return None
