"""Tests for the built-in self-test suite."""

from unittest.mock import patch

from solsign.selftest import run_self_tests
from solsign.verify import SignatureVerifier


class TestSelfTests:
    def test_all_pass(self):
        rows = run_self_tests()
        assert rows
        assert all(row.ok for row in rows), [r for r in rows if not r.ok]

    def test_labels(self):
        labels = [row.label for row in run_self_tests()]
        assert "nonce length 24" in labels
        assert "base58('test') == 3yZe7d" in labels
        assert "SPKI length == 44" in labels

    def test_unsupported_reported_distinctly(self):
        rows = {row.label: row for row in run_self_tests(SignatureVerifier(supported=False))}
        roundtrip = rows["sign/verify roundtrip"]
        assert not roundtrip.ok
        assert roundtrip.details.startswith("unsupported")

    def test_insecure_nonce_flagged(self):
        with patch("solsign.nonce.secrets.token_bytes", side_effect=NotImplementedError):
            rows = {row.label: row for row in run_self_tests()}
        assert rows["nonce length 24"].ok
        assert not rows["nonce source is cryptographic"].ok
