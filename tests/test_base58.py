"""Tests for the base58 codec."""

import os

import base58
import pytest

from solsign.base58 import ALPHABET, b58decode, b58encode, to_hex
from solsign.errors import InvalidCharacterError, SolSignError


class TestEncode:
    def test_known_vector(self):
        assert b58encode("test".encode("utf-8")) == "3yZe7d"

    def test_empty(self):
        assert b58encode(b"") == ""

    def test_all_zero_bytes(self):
        assert b58encode(bytes([0, 0, 0])) == "111"

    def test_leading_zeros_preserved(self):
        assert b58encode(b"\x00\x00\x01") == "112"

    def test_single_byte_boundaries(self):
        assert b58encode(b"\x39") == "z"  # 57
        assert b58encode(b"\x3a") == "21"  # 58

    def test_matches_reference_library(self):
        for size in (1, 31, 32, 33, 64, 128):
            data = os.urandom(size)
            assert b58encode(data) == base58.b58encode(data).decode("ascii")

    def test_accepts_bytearray(self):
        assert b58encode(bytearray(b"test")) == "3yZe7d"


class TestDecode:
    def test_known_vector(self):
        assert b58decode("3yZe7d") == b"test"

    def test_empty(self):
        assert b58decode("") == b""

    def test_leading_ones(self):
        assert b58decode("111") == b"\x00\x00\x00"
        assert b58decode("112") == b"\x00\x00\x01"

    @pytest.mark.parametrize("char", ["0", "O", "I", "l", "+", " "])
    def test_invalid_character(self, char):
        with pytest.raises(InvalidCharacterError) as exc_info:
            b58decode("3yZ" + char + "e7d")
        assert exc_info.value.char == char
        assert exc_info.value.code == "INVALID_CHARACTER"
        assert isinstance(exc_info.value, SolSignError)

    def test_matches_reference_library(self):
        address = "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T"
        assert b58decode(address) == base58.b58decode(address)
        assert len(b58decode(address)) == 32


class TestRoundTrip:
    def test_bytes_roundtrip(self):
        samples = [b"", b"\x00", b"\x00\x00\xff", bytes(range(256)), os.urandom(64), bytes(64)]
        for data in samples:
            assert b58decode(b58encode(data)) == data

    def test_string_roundtrip(self):
        for s in ["1", "11", "2", "z", "1z", ALPHABET[1:], "3yZe7d"]:
            assert b58encode(b58decode(s)) == s


class TestHex:
    def test_hex_conversion(self):
        assert to_hex(bytes([0, 1, 2, 254, 255])) == "000102feff"

    def test_empty(self):
        assert to_hex(b"") == ""
