"""
Local Ed25519 signature verification.

Raw 32-byte wallet keys are wrapped in a SubjectPublicKeyInfo (SPKI)
DER structure and handed to the `cryptography` Ed25519 backend. Failed
checks come back as VerificationResult.FAILED; only malformed inputs
the caller controls (address encoding, key length) raise.
"""

from __future__ import annotations

import functools
import logging
from typing import Optional, Union

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import load_der_public_key

from solsign.base58 import b58decode
from solsign.challenge import parse_challenge
from solsign.errors import InvalidKeyLengthError, MalformedChallengeError
from solsign.types import TITLE, VerificationResult

logger = logging.getLogger(__name__)

ED25519_KEY_LENGTH = 32

# SEQUENCE { SEQUENCE { OID 1.3.101.112 }, BIT STRING (32 bytes) }
ED25519_SPKI_PREFIX = bytes(
    [0x30, 0x2A, 0x30, 0x05, 0x06, 0x03, 0x2B, 0x65, 0x70, 0x03, 0x21, 0x00]
)


def raw_key_to_spki(pubkey: bytes) -> bytes:
    """
    Wrap a raw Ed25519 public key in the 44-byte SPKI DER structure.

    Raises:
        InvalidKeyLengthError: If pubkey is not exactly 32 bytes.
    """
    pubkey = bytes(pubkey)
    if len(pubkey) != ED25519_KEY_LENGTH:
        raise InvalidKeyLengthError(len(pubkey))
    return ED25519_SPKI_PREFIX + pubkey


@functools.lru_cache(maxsize=None)
def ed25519_supported() -> bool:
    """Whether the installed cryptography backend provides Ed25519."""
    try:
        Ed25519PrivateKey.generate()
    except UnsupportedAlgorithm:
        logger.warning("Ed25519 is not supported by the cryptography backend")
        return False
    return True


class SignatureVerifier:
    """
    Verifies Ed25519 signatures over SPKI-wrapped keys.

    Args:
        supported: Force the capability probe result. None probes the backend.
    """

    def __init__(self, supported: Optional[bool] = None):
        self._supported = supported

    @property
    def supported(self) -> bool:
        if self._supported is None:
            return ed25519_supported()
        return self._supported

    def verify(self, spki: bytes, message: bytes, signature: bytes) -> VerificationResult:
        """Check `signature` over `message` with the SPKI-encoded key."""
        if not self.supported:
            return VerificationResult.UNSUPPORTED

        try:
            key = load_der_public_key(bytes(spki))
            if not isinstance(key, Ed25519PublicKey):
                logger.debug("SPKI blob is not an Ed25519 key: %s", type(key).__name__)
                return VerificationResult.FAILED
            key.verify(bytes(signature), bytes(message))
        except InvalidSignature:
            return VerificationResult.FAILED
        except Exception as e:
            logger.debug("Signature verification error: %s", e)
            return VerificationResult.FAILED

        return VerificationResult.VERIFIED


def _signs_placeholder(message: bytes) -> bool:
    try:
        text = message.decode("utf-8")
    except UnicodeDecodeError:
        return False
    if not text.startswith(TITLE + "\n"):
        return False
    try:
        return parse_challenge(text).address_is_placeholder
    except MalformedChallengeError:
        return False


def verify_signature(
    address: str,
    message: Union[str, bytes],
    signature: bytes,
    verifier: Optional[SignatureVerifier] = None,
) -> VerificationResult:
    """
    Verify a wallet signature.

    Args:
        address: Signer's public key (base58).
        message: Signed text (UTF-8 encoded when given as str).
        signature: Raw 64-byte signature.
        verifier: Verifier to use. Defaults to a probing SignatureVerifier.

    Raises:
        InvalidCharacterError: If the address is not valid base58.
        InvalidKeyLengthError: If the address does not decode to 32 bytes.
    """
    spki = raw_key_to_spki(b58decode(address))
    if isinstance(message, str):
        message = message.encode("utf-8")
    verifier = verifier or SignatureVerifier()

    if not verifier.supported:
        return VerificationResult.UNSUPPORTED
    if _signs_placeholder(message):
        logger.info("Refusing signature over a challenge without a wallet address")
        return VerificationResult.FAILED

    return verifier.verify(spki, message, signature)
