"""
Random nonce generation for Sign-In challenges.
"""

from __future__ import annotations

import logging
import random
import secrets
from typing import Optional

from solsign.types import Nonce

logger = logging.getLogger(__name__)

NONCE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
DEFAULT_NONCE_LENGTH = 24


def generate_nonce(length: int = DEFAULT_NONCE_LENGTH, rng: Optional[random.Random] = None) -> Nonce:
    """
    Generate a nonce of `length` alphanumeric characters.

    Bytes come from the OS CSPRNG and are mapped with byte % 62, which
    keeps the small modulo bias of the reference mapping. If the OS has
    no entropy source, or an explicit `rng` is given, a non-cryptographic
    generator is used and the nonce is returned with secure=False.
    """
    if length < 1:
        raise ValueError(f"Nonce length must be positive, got {length}")

    if rng is None:
        try:
            raw = secrets.token_bytes(length)
        except (NotImplementedError, OSError) as e:
            logger.warning(
                "Secure random source unavailable (%s); falling back to a "
                "non-cryptographic nonce. Replay protection is weakened.", e
            )
            rng = random.Random()
        else:
            return Nonce("".join(NONCE_ALPHABET[b % len(NONCE_ALPHABET)] for b in raw))

    value = "".join(rng.choice(NONCE_ALPHABET) for _ in range(length))
    return Nonce(value, secure=False)
