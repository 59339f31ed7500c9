"""Tests for the SPL Token instruction decoder."""

import pytest

from drainguard.decoder import (
    TOKEN_PROGRAM_ID,
    Approve,
    CloseAccount,
    SetAuthority,
    TokenInstructionDecoder,
    Transfer,
    Unrecognized,
    decode_instruction,
    is_token_operation,
    source_account,
)
from drainguard.parser import StructuredInstruction

from conftest import (
    address,
    approve_checked_data,
    approve_data,
    close_account_data,
    make_key,
    set_authority_data,
    transfer_checked_data,
    transfer_data,
)

A, B, C, D = (address(seed) for seed in (2, 3, 4, 5))


def token_ix(accounts, data) -> StructuredInstruction:
    return StructuredInstruction(TOKEN_PROGRAM_ID, tuple(accounts), data)


class TestDispatch:

    def test_transfer(self):
        op = decode_instruction(token_ix([A, B, C], transfer_data(1234)))
        assert op == Transfer(source=A, destination=B, authority=C, amount=1234)

    def test_transfer_checked_skips_mint(self):
        op = decode_instruction(token_ix([A, D, B, C], transfer_checked_data(99, decimals=9)))
        assert op == Transfer(source=A, destination=B, authority=C, amount=99, mint=D, decimals=9)

    def test_approve(self):
        op = decode_instruction(token_ix([A, B, C], approve_data(5)))
        assert op == Approve(source=A, delegate=B, authority=C, amount=5)

    def test_approve_checked_skips_mint(self):
        op = decode_instruction(token_ix([A, D, B, C], approve_checked_data(2 ** 64 - 1)))
        assert op == Approve(source=A, delegate=B, authority=C, amount=2 ** 64 - 1, mint=D, decimals=6)

    def test_set_authority_with_new_authority(self):
        op = decode_instruction(token_ix([A, B], set_authority_data(2, make_key(9))))
        assert op == SetAuthority(
            account=A,
            current_authority=B,
            authority_kind="AccountOwner",
            new_authority=address(9),
        )

    def test_set_authority_revocation(self):
        op = decode_instruction(token_ix([A, B], set_authority_data(3)))
        assert op == SetAuthority(account=A, current_authority=B, authority_kind="CloseAccount")
        assert op.new_authority is None

    @pytest.mark.parametrize("code,name", [
        (0, "MintTokens"),
        (1, "FreezeAccount"),
        (2, "AccountOwner"),
        (3, "CloseAccount"),
        (7, "Unknown(7)"),
    ])
    def test_authority_kinds(self, code, name):
        op = decode_instruction(token_ix([A, B], set_authority_data(code)))
        assert op.authority_kind == name

    def test_set_authority_flag_without_key_bytes_is_revocation(self):
        data = set_authority_data(2, make_key(9))[:20]
        op = decode_instruction(token_ix([A, B], data))
        assert isinstance(op, SetAuthority)
        assert op.current_authority == B
        assert op.new_authority is None

    def test_close_account(self):
        op = decode_instruction(token_ix([A, B, C], close_account_data()))
        assert op == CloseAccount(account=A, rent_destination=B, authority=C)

    def test_extra_accounts_are_ignored(self):
        op = decode_instruction(token_ix([A, B, C, D], transfer_data(1)))
        assert op.authority == C


class TestMalformed:

    @pytest.mark.parametrize("accounts,data,expected", [
        ([A, B, C], transfer_data(1)[:8], Transfer()),
        ([A, B], transfer_data(1), Transfer()),
        ([A, D, B], transfer_checked_data(1), Transfer()),
        ([A, D, B, C], transfer_checked_data(1)[:9], Transfer()),
        ([A, B, C], approve_data(1)[:5], Approve()),
        ([A, D, B], approve_checked_data(1), Approve()),
        ([A], set_authority_data(2, make_key(9)), SetAuthority()),
        ([A, B], bytes([6, 2]), SetAuthority()),
        ([A, B], close_account_data(), CloseAccount()),
    ])
    def test_short_shapes_keep_their_tag(self, accounts, data, expected):
        assert decode_instruction(token_ix(accounts, data)) == expected

    def test_unknown_discriminator(self):
        op = decode_instruction(token_ix([A, B], bytes([99, 1, 2])))
        assert isinstance(op, Unrecognized)
        assert op.program == "spl-token"
        assert op.data == bytes([99, 1, 2])

    def test_empty_data(self):
        op = decode_instruction(token_ix([A], b""))
        assert isinstance(op, Unrecognized)
        assert op.program == "spl-token"


class TestForeignPrograms:

    def test_other_program_is_unrecognized_with_raw_fields(self):
        program = address(0xAB)
        op = decode_instruction(StructuredInstruction(program, (A, B), transfer_data(1)))
        assert op == Unrecognized(
            program="unknown",
            program_id=program,
            account_addresses=(A, B),
            data=transfer_data(1),
        )

    def test_custom_token_program_id(self):
        program = address(0xCD)
        decoder = TokenInstructionDecoder(token_program_id=program)
        op = decoder.decode(StructuredInstruction(program, (A, B, C), transfer_data(3)))
        assert op == Transfer(source=A, destination=B, authority=C, amount=3)
        assert isinstance(decoder.decode(token_ix([A, B, C], transfer_data(3))), Unrecognized)


def test_helpers():
    transfer = Transfer(source=A)
    close = CloseAccount(account=B)
    foreign = Unrecognized(program="unknown", program_id=C)
    token_unknown = Unrecognized(program="spl-token", program_id=TOKEN_PROGRAM_ID)

    assert source_account(transfer) == A
    assert source_account(close) == B
    assert source_account(foreign) is None
    assert is_token_operation(transfer)
    assert is_token_operation(token_unknown)
    assert not is_token_operation(foreign)
