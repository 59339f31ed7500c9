"""Base58 (Bitcoin alphabet) as used for Solana addresses."""

import base58

BASE58_ALPHABET = base58.BITCOIN_ALPHABET.decode()


class InvalidCharacterError(ValueError):
    """Raised when a string contains a character outside the base58 alphabet."""

    def __init__(self, char: str, position: int):
        self.char = char
        self.position = position
        super().__init__(f"Invalid base58 character {char!r} at position {position}")


def encode_base58(data: bytes) -> str:
    """Encode bytes as base58. Each leading zero byte becomes a leading '1'."""
    return base58.b58encode(bytes(data)).decode()


def decode_base58(text: str) -> bytes:
    """
    Decode a base58 string.

    Raises:
        InvalidCharacterError: if any character is outside the alphabet
    """
    for position, char in enumerate(text):
        if char not in BASE58_ALPHABET:
            raise InvalidCharacterError(char, position)
    return base58.b58decode(text)
