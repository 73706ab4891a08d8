"""
Packaging of signed messages into exportable JSON artifacts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from solsign.base58 import b58encode, to_hex
from solsign.types import SignedArtifact, isoformat


def export_artifact(
    domain: str,
    message: str,
    address: Optional[str],
    signature: Optional[bytes],
    issued_at: Union[datetime, str],
) -> SignedArtifact:
    """
    Build the artifact for `message`.

    Both signature encodings are None when `signature` is None.
    """
    if isinstance(issued_at, datetime):
        issued_at = isoformat(issued_at)

    return SignedArtifact(
        domain=domain,
        message=message,
        public_key=address or None,
        signature_base58=b58encode(signature) if signature is not None else None,
        signature_hex=to_hex(signature) if signature is not None else None,
        issued_at=issued_at,
    )


def artifact_filename(now: datetime) -> str:
    """Download filename, e.g. solanasign-1700000000000.json."""
    return f"solanasign-{int(now.timestamp() * 1000)}.json"
