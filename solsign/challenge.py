"""
Sign-In With Solana challenge construction and parsing.

The rendered text is the signed payload: field order, labels and
whitespace are fixed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from solsign.base58 import b58decode
from solsign.errors import InvalidKeyLengthError, MalformedChallengeError
from solsign.nonce import DEFAULT_NONCE_LENGTH, generate_nonce
from solsign.types import (
    ADDRESS_PLACEHOLDER,
    DEFAULT_STATEMENT,
    TITLE,
    Challenge,
    parse_isoformat,
)

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=5)
WALLET_KEY_LENGTH = 32

Clock = Callable[[], datetime]

_FIELDS = (
    "Domain",
    "Address",
    "Statement",
    "URI",
    "Version",
    "Nonce",
    "Issued At",
    "Expiration Time",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _check_single_line(field: str, value: str) -> None:
    if "\n" in value or "\r" in value:
        raise MalformedChallengeError(f"{field} must be a single line: {value!r}")


def build_challenge(
    domain: str,
    address: Optional[str] = None,
    clock: Optional[Clock] = None,
    *,
    nonce_length: int = DEFAULT_NONCE_LENGTH,
    ttl: timedelta = DEFAULT_TTL,
    statement: str = DEFAULT_STATEMENT,
) -> Challenge:
    """
    Build a fresh challenge for `domain`.

    Args:
        domain: Hostname the user is signing in to.
        address: Base58 public key, or None if no wallet is connected.
            A missing address is rendered as <WALLET_NOT_CONNECTED>.
            A given address must decode to a 32-byte public key.
        clock: Returns the current time. Defaults to UTC now.
        nonce_length: Number of nonce characters.
        ttl: Validity window; expiration is issued_at + ttl.
        statement: Human-readable statement line.

    Raises:
        MalformedChallengeError: If domain or address contains a line break.
        InvalidCharacterError: If address is not valid base58.
        InvalidKeyLengthError: If address does not decode to 32 bytes.
    """
    if not domain:
        raise ValueError("Domain cannot be empty")
    _check_single_line("Domain", domain)
    _check_single_line("Statement", statement)
    if address:
        _check_single_line("Address", address)
        key = b58decode(address)
        if len(key) != WALLET_KEY_LENGTH:
            raise InvalidKeyLengthError(len(key))

    issued_at = (clock or utc_now)()
    if issued_at.tzinfo is None:
        issued_at = issued_at.replace(tzinfo=timezone.utc)
    # Rendered timestamps carry milliseconds only.
    issued_at = issued_at.astimezone(timezone.utc).replace(
        microsecond=issued_at.microsecond // 1000 * 1000
    )

    nonce = generate_nonce(nonce_length)
    if not nonce.secure:
        logger.warning("Challenge for %s uses a non-cryptographic nonce", domain)

    return Challenge(
        domain=domain,
        address=address or ADDRESS_PLACEHOLDER,
        nonce=nonce.value,
        issued_at=issued_at,
        expiration_time=issued_at + ttl,
        statement=statement,
        nonce_secure=nonce.secure,
    )


def parse_challenge(text: str) -> Challenge:
    """
    Parse rendered challenge text back into a Challenge.

    Raises:
        MalformedChallengeError: If the title, field order or timestamps are wrong.
    """
    lines = text.split("\n")
    if len(lines) != len(_FIELDS) + 1:
        raise MalformedChallengeError(
            f"Expected {len(_FIELDS) + 1} lines, got {len(lines)}"
        )
    if lines[0] != TITLE:
        raise MalformedChallengeError(f"Unexpected title line: {lines[0]!r}")

    values: dict[str, str] = {}
    for field, line in zip(_FIELDS, lines[1:]):
        prefix = f"{field}: "
        if not line.startswith(prefix):
            raise MalformedChallengeError(f"Expected {field!r} field, got {line!r}")
        values[field] = line[len(prefix):]

    try:
        issued_at = parse_isoformat(values["Issued At"])
        expiration_time = parse_isoformat(values["Expiration Time"])
    except ValueError as e:
        raise MalformedChallengeError(f"Invalid timestamp: {e}") from e

    challenge = Challenge(
        domain=values["Domain"],
        address=values["Address"],
        nonce=values["Nonce"],
        issued_at=issued_at,
        expiration_time=expiration_time,
        statement=values["Statement"],
        version=values["Version"],
    )
    if values["URI"] != challenge.uri:
        raise MalformedChallengeError(
            f"URI {values['URI']!r} does not match domain {challenge.domain!r}"
        )
    return challenge
