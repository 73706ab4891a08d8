"""
Command-line interface.

    solsign challenge --domain example.com --address <base58>
    solsign sign --keypair ~/.config/solana/id.json --domain example.com
    solsign verify --artifact solanasign-1700000000000.json
    solsign selftest
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional, Sequence

from solsign.base58 import b58decode
from solsign.challenge import build_challenge
from solsign.errors import SolSignError
from solsign.export import artifact_filename
from solsign.selftest import run_self_tests
from solsign.session import SignInSession
from solsign.signer import Ed25519Signer
from solsign.types import SignedArtifact, VerificationResult
from solsign.verify import verify_signature

logger = logging.getLogger(__name__)

_EXIT_CODES = {
    VerificationResult.VERIFIED: 0,
    VerificationResult.FAILED: 1,
    VerificationResult.UNSUPPORTED: 2,
}


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_challenge(args: argparse.Namespace) -> int:
    print(build_challenge(args.domain, args.address).render())
    return 0


def cmd_sign(args: argparse.Namespace) -> int:
    keypair = args.keypair or os.environ.get("SOLSIGN_KEYPAIR")
    if not keypair:
        print("error: --keypair or SOLSIGN_KEYPAIR is required", file=sys.stderr)
        return 2

    session = SignInSession(domain=args.domain, signer=Ed25519Signer.from_keypair_file(keypair))
    if args.message_file:
        session.message = _read_text(args.message_file)
    else:
        session.build()

    if session.sign() is None:
        print(f"error: {session.last_error.message}", file=sys.stderr)
        return 1

    artifact = session.export()
    out = args.out or artifact_filename(datetime.now(timezone.utc))
    with open(out, "w", encoding="utf-8") as f:
        f.write(artifact.to_json())
    print(out)
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    if args.artifact:
        artifact = SignedArtifact.from_dict(json.loads(_read_text(args.artifact)))
        address = args.address or artifact.public_key
        signature_b58 = args.signature or artifact.signature_base58
        message = artifact.message
    else:
        address, signature_b58 = args.address, args.signature
        message = _read_text(args.message_file) if args.message_file else None

    if not (address and signature_b58 and message is not None):
        print("error: address, signature and message are required", file=sys.stderr)
        return 2

    result = verify_signature(address, message, b58decode(signature_b58))
    print(result.value)
    return _EXIT_CODES[result]


def cmd_selftest(args: argparse.Namespace) -> int:
    rows = run_self_tests()
    for row in rows:
        print(f"{'OK  ' if row.ok else 'FAIL'} {row.label}: {row.details}")
    return 0 if all(row.ok for row in rows) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="solsign", description="Off-chain Solana message signing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("challenge", help="Print a fresh Sign-In challenge")
    p.add_argument("--domain", default=os.environ.get("SOLSIGN_DOMAIN", "localhost"))
    p.add_argument("--address", help="Wallet address (base58)")
    p.set_defaults(func=cmd_challenge)

    p = sub.add_parser("sign", help="Sign a challenge with a local keypair and write the JSON artifact")
    p.add_argument("--keypair", help="Solana CLI keypair file (default: SOLSIGN_KEYPAIR)")
    p.add_argument("--domain", help="Domain (default: SOLSIGN_DOMAIN or localhost)")
    p.add_argument("--message-file", help="Sign this text instead of a fresh challenge")
    p.add_argument("--out", help="Output path (default: solanasign-<millis>.json)")
    p.set_defaults(func=cmd_sign)

    p = sub.add_parser("verify", help="Verify a signature locally")
    p.add_argument("--address", help="Wallet address (base58)")
    p.add_argument("--signature", help="Signature (base58)")
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--message-file", help="File holding the signed text")
    source.add_argument("--artifact", help="JSON artifact written by 'solsign sign'")
    p.set_defaults(func=cmd_verify)

    p = sub.add_parser("selftest", help="Run the built-in checks")
    p.set_defaults(func=cmd_selftest)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (SolSignError, OSError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2
