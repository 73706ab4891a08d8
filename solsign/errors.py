"""
SolSign error types.

Codec and key-shape errors are raised to the caller. Signing errors are
raised by signers and caught at the session boundary. A failed signature
check is a VerificationResult, never an exception.
"""

from __future__ import annotations

from typing import Optional


class SolSignError(Exception):
    """Base exception for all SolSign errors."""

    code = "SOLSIGN_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)


class InvalidCharacterError(SolSignError, ValueError):
    """A base58 string contains a character outside the Bitcoin alphabet."""

    code = "INVALID_CHARACTER"

    def __init__(self, char: str):
        self.char = char
        super().__init__(f"Invalid base58 character: {char!r}")


class InvalidKeyLengthError(SolSignError, ValueError):
    """An Ed25519 public key is not exactly 32 bytes."""

    code = "INVALID_KEY_LENGTH"

    def __init__(self, length: int):
        self.length = length
        super().__init__(f"Invalid Ed25519 public key length: {length} (expected 32)")


class MalformedChallengeError(SolSignError, ValueError):
    """Text does not follow the Sign-In challenge layout."""

    code = "MALFORMED_CHALLENGE"


class SigningDeclinedError(SolSignError):
    """The signer refused the request or the user cancelled it."""

    code = "SIGNING_DECLINED"

    def __init__(self, message: str = "Signature cancelled or failed."):
        super().__init__(message)


class SigningUnavailableError(SolSignError):
    """No signing capability is available."""

    code = "SIGNING_UNAVAILABLE"

    def __init__(self, message: str = "The connected wallet does not support signMessage."):
        super().__init__(message)


class MalformedArtifactError(SolSignError, ValueError):
    """A signed artifact record is missing fields or is not a JSON object."""

    code = "MALFORMED_ARTIFACT"
