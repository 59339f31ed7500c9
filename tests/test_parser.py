"""Tests for the wire-format parser."""

import random

from solders.instruction import AccountMeta, Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from drainguard.codec import encode_var_len
from drainguard.decoder import TOKEN_PROGRAM_ID
from drainguard.parser import MessageHeader, parse_transaction, placeholder_address

from conftest import (
    TOKEN_PROGRAM_KEY,
    USER,
    USER_KEY,
    TransactionBuilder,
    address,
    make_key,
    transfer_data,
)


def test_parses_signed_transaction(builder):
    raw = builder.token([make_key(2), make_key(3), USER_KEY], transfer_data(100)).build()

    parsed = parse_transaction(raw)

    assert parsed.signature_count == 1
    assert parsed.header == MessageHeader(1, 0, 0)
    assert parsed.version is None
    assert not parsed.truncated
    assert parsed.account_keys == (TOKEN_PROGRAM_ID, address(2), address(3), USER)
    assert len(parsed.instructions) == 1

    ix = parsed.instructions[0]
    assert ix.program_id == TOKEN_PROGRAM_ID
    assert ix.account_addresses == (address(2), address(3), USER)
    assert ix.data == transfer_data(100)
    assert parsed.touched_addresses == {address(2), address(3), USER}


def test_zero_signature_prefix():
    builder = TransactionBuilder(num_signatures=0)
    raw = builder.token([make_key(2), make_key(3), USER_KEY], transfer_data(1)).build()

    parsed = parse_transaction(raw)

    assert parsed.signature_count == 0
    assert parsed.instructions[0].program_id == TOKEN_PROGRAM_ID


def test_multiple_instructions_keep_order(builder):
    for seed in (2, 3, 4):
        builder.token([make_key(seed), make_key(9), USER_KEY], transfer_data(seed))
    parsed = parse_transaction(builder.build())

    assert [ix.account_addresses[0] for ix in parsed.instructions] == [address(2), address(3), address(4)]
    assert parsed.program_ids == (TOKEN_PROGRAM_ID,) * 3


def test_out_of_range_indices_become_placeholders(builder):
    builder.token([make_key(2)], b"\x03")
    raw = bytearray(builder.build())
    # Last instruction bytes: program index, account count, account index, data length, data
    raw[-3] = 9
    raw[-5] = 42

    parsed = parse_transaction(bytes(raw))

    ix = parsed.instructions[0]
    assert ix.program_id == placeholder_address(42) == "unknown_42"
    assert ix.account_addresses == ("unknown_9",)
    assert "unknown_9" in parsed.touched_addresses


def test_empty_input():
    parsed = parse_transaction(b"")
    assert parsed.instructions == ()
    assert parsed.account_keys == ()
    assert parsed.truncated


def test_truncated_data_keeps_earlier_instructions(builder):
    builder.token([make_key(2), make_key(3), USER_KEY], transfer_data(1))
    builder.token([make_key(4), make_key(3), USER_KEY], transfer_data(2))
    raw = builder.build()[:-3]

    parsed = parse_transaction(raw)

    assert parsed.truncated
    assert len(parsed.instructions) == 2
    assert parsed.instructions[0].data == transfer_data(1)
    assert parsed.instructions[1].data == transfer_data(2)[:-3]


def test_instruction_count_larger_than_buffer(builder):
    builder.token([make_key(2), make_key(3), USER_KEY], transfer_data(1))
    raw = bytearray(builder.build())
    instruction_length = 1 + 1 + 3 + 1 + 9
    raw[-instruction_length - 1] = 100

    parsed = parse_transaction(bytes(raw))

    assert parsed.truncated
    assert len(parsed.instructions) == 1


def test_partial_account_table():
    raw = b"\x00" + b"\x01\x00\x00" + encode_var_len(5) + make_key(2) + make_key(3) + b"\x01\x02"

    parsed = parse_transaction(raw)

    assert parsed.account_keys == (address(2), address(3))
    assert parsed.instructions == ()
    assert parsed.truncated


def test_huge_declared_account_count_is_bounded():
    raw = b"\x00" + b"\x01\x00\x00" + b"\xff\xff\x7f" + make_key(5)

    parsed = parse_transaction(raw)

    assert parsed.account_keys == (address(5),)
    assert parsed.truncated


def test_versioned_message_prefix(builder):
    builder.token([make_key(2), make_key(3), USER_KEY], transfer_data(7))
    legacy = builder.build()
    versioned = legacy[:65] + b"\x80" + legacy[65:] + b"\x00"  # empty lookup-table section

    parsed = parse_transaction(versioned)

    assert parsed.version == 0
    assert parsed.instructions == parse_transaction(legacy).instructions


def test_bare_message_is_sniffed_as_signed(builder):
    # A bare message whose header byte is 1 passes the signature-count test
    # whenever it is at least 65 bytes long, and is misread.
    builder.token([make_key(2), make_key(3), USER_KEY], transfer_data(7))
    message = builder.message()
    assert message[0] == 1 and len(message) >= 65

    parsed = parse_transaction(message)

    assert parsed.signature_count == 1
    assert parsed.account_keys != parse_transaction(builder.build()).account_keys


def test_short_bare_message_is_not_sniffed():
    message = b"\x05\x00\x00\x00"
    parsed = parse_transaction(message)
    assert parsed.signature_count == 0
    assert parsed.header == MessageHeader(5, 0, 0)


def test_random_input_never_raises():
    rng = random.Random(2024)
    for _ in range(500):
        length = rng.randrange(0, 400)
        raw = bytes(rng.randrange(256) for _ in range(length))
        parsed = parse_transaction(raw)
        assert len(parsed.instructions) <= len(raw)


def test_adversarial_short_buffers_never_raise():
    for first in range(256):
        for tail in (b"", b"\x00", b"\xff\xff\xff", b"\x80" * 70, b"\x01" * 200):
            parse_transaction(bytes([first]) + tail)


def test_matches_solders_serialization():
    owner = Pubkey(USER_KEY)
    source = Pubkey(make_key(2))
    destination = Pubkey(make_key(3))
    ix = Instruction(
        Pubkey.from_string(TOKEN_PROGRAM_ID),
        transfer_data(500),
        [
            AccountMeta(source, False, True),
            AccountMeta(destination, False, True),
            AccountMeta(owner, True, False),
        ],
    )
    tx = Transaction.new_unsigned(Message([ix], owner))

    parsed = parse_transaction(bytes(tx))

    assert parsed.signature_count == 1
    assert set(parsed.account_keys) == {str(owner), str(source), str(destination), TOKEN_PROGRAM_ID}
    assert parsed.instructions[0].program_id == TOKEN_PROGRAM_ID
    assert parsed.instructions[0].account_addresses == (str(source), str(destination), str(owner))
    assert parsed.instructions[0].data == transfer_data(500)
    assert not parsed.truncated
