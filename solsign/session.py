"""
SolSign sign-in workflow.

Sequences build -> sign -> verify -> export explicitly instead of through
UI callbacks.

Usage:
    from solsign import SignInSession, Ed25519Signer

    session = SignInSession(domain="example.com", signer=Ed25519Signer.generate())
    session.build()
    session.sign()
    result = session.verify()
    artifact = session.export()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
from datetime import datetime
from typing import Awaitable, Optional

from solsign.challenge import Clock, build_challenge, parse_challenge, utc_now
from solsign.errors import (
    MalformedChallengeError,
    SigningDeclinedError,
    SigningUnavailableError,
    SolSignError,
)
from solsign.export import export_artifact
from solsign.signer import MessageSigner
from solsign.types import TITLE, Challenge, SignedArtifact, VerificationResult
from solsign.verify import SignatureVerifier, verify_signature

logger = logging.getLogger(__name__)

_DEFAULT_DOMAIN = "localhost"


class SignInSession:
    """
    One user's sign-in workflow.

    Args:
        domain: Hostname placed in challenges. Defaults to SOLSIGN_DOMAIN env var, else localhost.
        signer: External signMessage capability. None means no wallet can sign.
        address: Connected wallet address (base58). Defaults to the signer's address.
        clock: Returns the current time.
        verifier: Signature verifier. Defaults to one probing the backend.
    """

    def __init__(
        self,
        domain: Optional[str] = None,
        signer: Optional[MessageSigner] = None,
        address: Optional[str] = None,
        clock: Optional[Clock] = None,
        verifier: Optional[SignatureVerifier] = None,
    ):
        self._domain = domain or os.environ.get("SOLSIGN_DOMAIN", _DEFAULT_DOMAIN)
        self._signer = signer
        self._address = address or getattr(signer, "address", None)
        self._clock = clock or utc_now
        self._verifier = verifier or SignatureVerifier()

        self._message = ""
        self._challenge: Optional[Challenge] = None
        self._signature: Optional[bytes] = None
        self._verification: Optional[VerificationResult] = None
        self.last_error: Optional[SolSignError] = None

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def address(self) -> Optional[str]:
        return self._address

    @property
    def challenge(self) -> Optional[Challenge]:
        """The challenge behind the current message, if it was built and not edited."""
        return self._challenge

    @property
    def signature(self) -> Optional[bytes]:
        return self._signature

    @property
    def verification(self) -> Optional[VerificationResult]:
        return self._verification

    @property
    def verify_supported(self) -> bool:
        return self._verifier.supported

    @property
    def message(self) -> str:
        return self._message

    @message.setter
    def message(self, text: str) -> None:
        """Replace the message (user edit). Clears signature and verification."""
        self._message = text
        self._challenge = None
        self._reset()

    def connect(self, address: Optional[str], signer: Optional[MessageSigner] = None) -> None:
        """Switch wallets. Clears signature and verification."""
        self._address = address
        self._signer = signer
        self._reset()

    def _reset(self) -> None:
        self._signature = None
        self._verification = None
        self.last_error = None

    # ========================
    # Build
    # ========================

    def build(self) -> Challenge:
        """Render a fresh challenge into the message."""
        challenge = build_challenge(self._domain, self._address, self._clock)
        self._message = challenge.render()
        self._challenge = challenge
        self._reset()
        logger.debug("Built challenge for %s (nonce %s)", self._domain, challenge.nonce)
        return challenge

    # ========================
    # Sign
    # ========================

    def _encoded_message(self) -> bytes:
        if self._signer is None or not hasattr(self._signer, "sign_message"):
            raise SigningUnavailableError()
        if not self._message:
            raise SigningUnavailableError("There is no message to sign.")
        return self._message.encode("utf-8")

    def _accept_signature(self, signature: object) -> bytes:
        if not isinstance(signature, (bytes, bytearray, memoryview)):
            raise SigningDeclinedError(
                f"Signer returned {type(signature).__name__}, expected bytes"
            )
        self._signature = bytes(signature)
        logger.info("Message signed by %s", self._address or "unknown wallet")
        return self._signature

    def _signing_failed(self, error: SolSignError) -> None:
        logger.warning("Signing failed: %s", error.message)
        self.last_error = error

    def sign(self) -> Optional[bytes]:
        """
        Ask the signer to sign the current message.

        Returns the raw signature, or None when signing was unavailable or
        declined; the reason is then in last_error.
        """
        self._reset()
        try:
            encoded = self._encoded_message()
            try:
                signature = self._signer.sign_message(encoded)
            except SolSignError:
                raise
            except Exception as e:
                raise SigningDeclinedError(str(e) or SigningDeclinedError().message) from e
            if inspect.isawaitable(signature):
                if inspect.iscoroutine(signature):
                    signature.close()
                raise SigningUnavailableError(
                    "Signer is asynchronous; use AsyncSignInSession."
                )
            return self._accept_signature(signature)
        except (SigningDeclinedError, SigningUnavailableError) as e:
            self._signing_failed(e)
            return None

    # ========================
    # Verify
    # ========================

    def verify(self) -> Optional[VerificationResult]:
        """
        Verify the current signature locally.

        Returns None when there is nothing to verify (no signature or no
        address).
        """
        if self._signature is None or not self._address:
            return None

        result = self._check_challenge_address()
        if result is None:
            result = verify_signature(
                self._address, self._message, self._signature, self._verifier
            )

        self._verification = result
        if result is VerificationResult.UNSUPPORTED:
            logger.warning("Local verification unavailable; signature left unverified")
        else:
            logger.info("Signature verification: %s", result.value)
        return result

    def _check_challenge_address(self) -> Optional[VerificationResult]:
        if not self._message.startswith(TITLE + "\n") or not self._verifier.supported:
            return None
        try:
            challenge = parse_challenge(self._message)
        except MalformedChallengeError:
            return None

        if challenge.is_expired(self._clock()):
            logger.warning("Challenge expired at %s", challenge.expiration_time)
        if not challenge.address_is_placeholder and challenge.address != self._address:
            logger.info("Challenge address %s does not match %s", challenge.address, self._address)
            return VerificationResult.FAILED
        return None

    # ========================
    # Export
    # ========================

    def export(self) -> SignedArtifact:
        """Package the signed message. Raises SigningUnavailableError if unsigned."""
        if self._signature is None:
            raise SigningUnavailableError("Sign the message before exporting it.")

        issued_at: datetime = self._challenge.issued_at if self._challenge else self._clock()
        return export_artifact(
            self._domain, self._message, self._address, self._signature, issued_at
        )


class AsyncSignInSession(SignInSession):
    """SignInSession whose signer may suspend (e.g. waiting on user approval)."""

    @staticmethod
    async def _await_signer(pending: Awaitable[bytes]) -> bytes:
        """
        Await the signer in its own task.

        Cancelling the caller propagates and cancels the signer; a signer
        that cancels itself is reported as a declined request.
        """
        task = asyncio.ensure_future(pending)
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        if task.cancelled():
            raise SigningDeclinedError("Signature request was cancelled.")
        return task.result()

    async def sign(self) -> Optional[bytes]:  # type: ignore[override]
        self._reset()
        try:
            encoded = self._encoded_message()
            try:
                signature = self._signer.sign_message(encoded)
                if inspect.isawaitable(signature):
                    signature = await self._await_signer(signature)
            except SolSignError:
                raise
            except Exception as e:
                raise SigningDeclinedError(str(e) or SigningDeclinedError().message) from e
            return self._accept_signature(signature)
        except (SigningDeclinedError, SigningUnavailableError) as e:
            self._signing_failed(e)
            return None
