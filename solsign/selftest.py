"""
Built-in self-test suite: named pass/fail checks over the core helpers.
"""

from __future__ import annotations

from typing import Optional

from solsign.base58 import b58decode, b58encode, to_hex
from solsign.nonce import generate_nonce
from solsign.signer import Ed25519Signer
from solsign.types import SelfTestResult, VerificationResult
from solsign.verify import SignatureVerifier, ed25519_supported, raw_key_to_spki, verify_signature


def run_self_tests(verifier: Optional[SignatureVerifier] = None) -> list[SelfTestResult]:
    verifier = verifier or SignatureVerifier()
    rows: list[SelfTestResult] = []

    a, b = generate_nonce(24), generate_nonce(24)
    rows.append(SelfTestResult("nonce length 24", len(a) == 24, str(a)))
    rows.append(SelfTestResult("nonce diversity", a.value != b.value, f"{a} vs {b}"))
    rows.append(SelfTestResult("nonce source is cryptographic", a.secure and b.secure,
                               "secrets" if a.secure else "fallback PRNG"))

    hx = to_hex(bytes([0, 1, 2, 254, 255]))
    rows.append(SelfTestResult("hex conversion", hx == "000102feff", hx))

    msg = "test".encode("utf-8")
    enc = b58encode(msg)
    rows.append(SelfTestResult("base58 roundtrip", b58decode(enc) == msg, enc))
    rows.append(SelfTestResult("base58('test') == 3yZe7d", enc == "3yZe7d", enc))

    spki = raw_key_to_spki(bytes(32))
    rows.append(SelfTestResult("SPKI length == 44", len(spki) == 44, str(len(spki))))

    backend = ed25519_supported()
    rows.append(SelfTestResult("Ed25519 backend present", backend, "yes" if backend else "no"))

    signer = Ed25519Signer.generate()
    message = b"solsign self-test"
    signature = signer.sign_message(message)
    result = verify_signature(signer.address, message, signature, verifier)
    tampered = verify_signature(signer.address, message + b"!", signature, verifier)
    if result is VerificationResult.UNSUPPORTED:
        rows.append(SelfTestResult("sign/verify roundtrip", False,
                                   "unsupported: verification unavailable, not a signature failure"))
    else:
        rows.append(SelfTestResult(
            "sign/verify roundtrip",
            result is VerificationResult.VERIFIED and tampered is VerificationResult.FAILED,
            f"{result.value}, tampered: {tampered.value}",
        ))

    return rows
