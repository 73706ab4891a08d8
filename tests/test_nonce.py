"""Tests for nonce generation."""

import logging
import random
from unittest.mock import patch

import pytest

from solsign.nonce import NONCE_ALPHABET, generate_nonce


class TestGenerateNonce:
    def test_default_length(self):
        assert len(generate_nonce()) == 24

    def test_alphabet(self):
        assert len(NONCE_ALPHABET) == 62
        for _ in range(20):
            nonce = generate_nonce(24)
            assert set(nonce.value) <= set(NONCE_ALPHABET)

    def test_consecutive_calls_differ(self):
        assert generate_nonce(24).value != generate_nonce(24).value

    def test_secure_by_default(self):
        nonce = generate_nonce(24)
        assert nonce.secure is True
        assert str(nonce) == nonce.value

    def test_custom_length(self):
        assert len(generate_nonce(8)) == 8

    @pytest.mark.parametrize("length", [0, -1])
    def test_rejects_non_positive_length(self, length):
        with pytest.raises(ValueError):
            generate_nonce(length)

    def test_modulo_mapping(self):
        raw = bytes([0, 61, 62, 255])
        with patch("solsign.nonce.secrets.token_bytes", return_value=raw):
            nonce = generate_nonce(4)
        # 255 % 62 == 7
        assert nonce.value == "A9AH"

    def test_fallback_when_no_entropy(self, caplog):
        with patch("solsign.nonce.secrets.token_bytes", side_effect=NotImplementedError("no urandom")):
            with caplog.at_level(logging.WARNING, logger="solsign.nonce"):
                nonce = generate_nonce(24)
        assert nonce.secure is False
        assert len(nonce) == 24
        assert set(nonce.value) <= set(NONCE_ALPHABET)
        assert "non-cryptographic" in caplog.text

    def test_explicit_rng_is_marked_insecure(self):
        a = generate_nonce(24, rng=random.Random(7))
        b = generate_nonce(24, rng=random.Random(7))
        assert a.secure is False
        assert a.value == b.value
