"""
Local Ed25519 message signing with a Solana keypair.

Stands in for a browser wallet's signMessage: any object with a
`sign_message(bytes)` method returning the 64-byte detached signature
(or an awaitable of it) can be used as a signer.
"""

from __future__ import annotations

import json
from typing import Awaitable, Protocol, Union

from nacl.signing import SigningKey

from solsign.base58 import b58encode


class MessageSigner(Protocol):
    """External signMessage capability."""

    def sign_message(self, message: bytes) -> Union[bytes, Awaitable[bytes]]:
        ...


class Ed25519Signer:
    """Signs messages with an in-process Ed25519 key."""

    def __init__(self, signing_key: SigningKey):
        self._key = signing_key

    @classmethod
    def from_seed(cls, seed_hex: str) -> "Ed25519Signer":
        """Load a wallet from its Ed25519 private seed, hex encoded (64 chars)."""
        return cls(SigningKey(bytes.fromhex(seed_hex)))

    @classmethod
    def from_bytes(cls, key_bytes: bytes) -> "Ed25519Signer":
        """Load a wallet from the raw seed half of a Solana keypair."""
        return cls(SigningKey(bytes(key_bytes)))

    @classmethod
    def from_keypair_file(cls, path: str) -> "Ed25519Signer":
        """
        Load a Solana CLI keypair file.

        The file is a JSON array of 64 ints: 32-byte seed then 32-byte public key.
        """
        with open(path, "r") as f:
            keypair_data = json.load(f)

        if not isinstance(keypair_data, list) or len(keypair_data) != 64:
            raise ValueError(f"Keypair file {path} must hold a JSON array of 64 bytes")
        return cls.from_bytes(bytes(keypair_data[:32]))

    @classmethod
    def generate(cls) -> "Ed25519Signer":
        """Create a throwaway wallet with a fresh random key."""
        return cls(SigningKey.generate())

    @property
    def public_key_bytes(self) -> bytes:
        return bytes(self._key.verify_key)

    @property
    def address(self) -> str:
        """Public key as base58 (the wallet address)."""
        return b58encode(self.public_key_bytes)

    @property
    def seed_hex(self) -> str:
        """Wallet seed as hex; keypair_json() gives the Solana CLI file form."""
        return bytes(self._key).hex()

    def keypair_json(self) -> str:
        """Serialize in the Solana CLI keypair file format."""
        return json.dumps(list(bytes(self._key) + self.public_key_bytes))

    def sign_message(self, message: bytes) -> bytes:
        """Return the 64-byte detached signature over `message`."""
        return self._key.sign(bytes(message)).signature
