"""
Type definitions for SolSign values.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from solsign.errors import MalformedArtifactError

TITLE = "Sign-In With Solana"
ADDRESS_PLACEHOLDER = "<WALLET_NOT_CONNECTED>"
DEFAULT_STATEMENT = (
    "Sign this message to prove you own this wallet. "
    "No blockchain transaction will occur."
)
VERSION = "1"


def isoformat(ts: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with milliseconds, e.g. 2024-01-01T00:00:00.000Z."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def parse_isoformat(value: str) -> datetime:
    """Inverse of isoformat(). Raises ValueError on bad input."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


class VerificationResult(Enum):
    """Outcome of a local signature check."""

    VERIFIED = "verified"
    FAILED = "failed"
    UNSUPPORTED = "unsupported"  # no Ed25519 backend; not a security failure

    @property
    def ok(self) -> bool:
        return self is VerificationResult.VERIFIED


@dataclass(frozen=True)
class Nonce:
    """A single-use random token. secure is False for the degraded fallback source."""

    value: str
    secure: bool = True

    def __str__(self) -> str:
        return self.value

    def __len__(self) -> int:
        return len(self.value)


@dataclass(frozen=True)
class Challenge:
    """A Sign-In challenge. render() is the exact payload the wallet signs."""

    domain: str
    address: str
    nonce: str
    issued_at: datetime
    expiration_time: datetime
    statement: str = DEFAULT_STATEMENT
    version: str = VERSION
    nonce_secure: bool = True

    @property
    def uri(self) -> str:
        return f"https://{self.domain}"

    @property
    def address_is_placeholder(self) -> bool:
        return self.address == ADDRESS_PLACEHOLDER

    def is_expired(self, now: datetime) -> bool:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now >= self.expiration_time

    def render(self) -> str:
        lines = [
            TITLE,
            f"Domain: {self.domain}",
            f"Address: {self.address}",
            f"Statement: {self.statement}",
            f"URI: {self.uri}",
            f"Version: {self.version}",
            f"Nonce: {self.nonce}",
            f"Issued At: {isoformat(self.issued_at)}",
            f"Expiration Time: {isoformat(self.expiration_time)}",
        ]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class SignedArtifact:
    """Exportable record of a signed message."""

    domain: str
    message: str
    public_key: Optional[str]
    signature_base58: Optional[str]
    signature_hex: Optional[str]
    issued_at: str

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "message": self.message,
            "publicKey": self.public_key,
            "signature_base58": self.signature_base58,
            "signature_hex": self.signature_hex,
            "issuedAt": self.issued_at,
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict) -> "SignedArtifact":
        """
        Rebuild an artifact from its JSON object.

        Raises:
            MalformedArtifactError: If data is not an object or lacks a required key.
        """
        if not isinstance(data, dict):
            raise MalformedArtifactError(
                f"Artifact must be a JSON object, got {type(data).__name__}"
            )
        missing = [key for key in ("domain", "message", "issuedAt") if key not in data]
        if missing:
            raise MalformedArtifactError(f"Artifact is missing {', '.join(missing)}")

        return cls(
            domain=data["domain"],
            message=data["message"],
            public_key=data.get("publicKey"),
            signature_base58=data.get("signature_base58"),
            signature_hex=data.get("signature_hex"),
            issued_at=data["issuedAt"],
        )


@dataclass
class SelfTestResult:
    """One row of the built-in self-test suite."""

    label: str
    ok: bool
    details: str = ""
