"""Tests for the local Ed25519 signer."""

import json

import pytest
from nacl.signing import VerifyKey

from solsign.base58 import b58decode
from solsign.signer import Ed25519Signer


class TestEd25519Signer:
    def test_generate_creates_valid_keypair(self):
        signer = Ed25519Signer.generate()
        assert len(signer.public_key_bytes) == 32
        assert len(signer.seed_hex) == 64  # 32 bytes as hex
        assert b58decode(signer.address) == signer.public_key_bytes

    def test_from_seed_roundtrip(self):
        original = Ed25519Signer.generate()
        restored = Ed25519Signer.from_seed(original.seed_hex)
        assert restored.address == original.address

    def test_from_bytes(self):
        signer = Ed25519Signer.from_bytes(b"\xaa" * 32)
        assert signer.seed_hex == "aa" * 32

    def test_signature_is_verifiable(self):
        signer = Ed25519Signer.generate()
        message = b"Sign-In With Solana"
        signature = signer.sign_message(message)

        assert len(signature) == 64
        # Should not raise
        VerifyKey(signer.public_key_bytes).verify(message, signature)

    def test_different_messages_produce_different_signatures(self):
        signer = Ed25519Signer.generate()
        assert signer.sign_message(b"a") != signer.sign_message(b"b")

    def test_keypair_file_roundtrip(self, tmp_path):
        signer = Ed25519Signer.generate()
        path = tmp_path / "id.json"
        path.write_text(signer.keypair_json())

        assert len(json.loads(path.read_text())) == 64
        assert Ed25519Signer.from_keypair_file(str(path)).address == signer.address

    def test_keypair_file_wrong_shape(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([1, 2, 3]))
        with pytest.raises(ValueError, match="64 bytes"):
            Ed25519Signer.from_keypair_file(str(path))
