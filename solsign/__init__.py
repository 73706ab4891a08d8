"""
SolSign - off-chain Solana wallet sign-in messages.

Usage:
    from solsign import SignInSession, Ed25519Signer

    session = SignInSession(domain="example.com", signer=Ed25519Signer.generate())
    session.build()
    session.sign()
    session.verify()   # VerificationResult.VERIFIED

    print(session.export().to_json())
"""

from solsign.base58 import b58decode, b58encode, to_hex
from solsign.challenge import build_challenge, parse_challenge
from solsign.errors import (
    InvalidCharacterError,
    InvalidKeyLengthError,
    MalformedArtifactError,
    MalformedChallengeError,
    SigningDeclinedError,
    SigningUnavailableError,
    SolSignError,
)
from solsign.export import export_artifact
from solsign.nonce import generate_nonce
from solsign.session import AsyncSignInSession, SignInSession
from solsign.signer import Ed25519Signer, MessageSigner
from solsign.types import (
    Challenge,
    Nonce,
    SelfTestResult,
    SignedArtifact,
    VerificationResult,
)
from solsign.verify import SignatureVerifier, raw_key_to_spki, verify_signature

__version__ = "0.1.0"

__all__ = [
    "b58encode",
    "b58decode",
    "to_hex",
    "generate_nonce",
    "build_challenge",
    "parse_challenge",
    "raw_key_to_spki",
    "verify_signature",
    "export_artifact",
    "SignatureVerifier",
    "SignInSession",
    "AsyncSignInSession",
    "Ed25519Signer",
    "MessageSigner",
    "Challenge",
    "Nonce",
    "SelfTestResult",
    "SignedArtifact",
    "VerificationResult",
    "SolSignError",
    "InvalidCharacterError",
    "InvalidKeyLengthError",
    "MalformedArtifactError",
    "MalformedChallengeError",
    "SigningDeclinedError",
    "SigningUnavailableError",
]
