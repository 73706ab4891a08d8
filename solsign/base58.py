"""
Base58 codec over the Bitcoin alphabet.

No checksum (this is not base58check). Leading zero bytes map one-for-one
to leading '1' characters.
"""

from __future__ import annotations

from solsign.errors import InvalidCharacterError

ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_INDEX = {char: i for i, char in enumerate(ALPHABET)}


def b58encode(data: bytes) -> str:
    """Encode bytes to a base58 string."""
    data = bytes(data)
    num = int.from_bytes(data, "big")
    encoded = ""
    while num > 0:
        num, rem = divmod(num, 58)
        encoded = ALPHABET[rem] + encoded

    zeros = len(data) - len(data.lstrip(b"\x00"))
    return ALPHABET[0] * zeros + encoded


def b58decode(s: str) -> bytes:
    """
    Decode a base58 string to bytes.

    Raises:
        InvalidCharacterError: If any character is outside the alphabet.
    """
    num = 0
    for char in s:
        try:
            num = num * 58 + _INDEX[char]
        except KeyError:
            raise InvalidCharacterError(char) from None

    body = num.to_bytes((num.bit_length() + 7) // 8, "big")
    ones = len(s) - len(s.lstrip(ALPHABET[0]))
    return b"\x00" * ones + body


def to_hex(data: bytes) -> str:
    """Lowercase hex, two digits per byte, no separators."""
    return bytes(data).hex()
