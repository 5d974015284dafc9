"""Tests for fingerprint computation."""

from link_tracker.services.fingerprint import EMPTY_FINGERPRINT, compute_fingerprint


class TestComputeFingerprint:
    """Tests for compute_fingerprint."""

    def test_deterministic_regardless_of_key_order(self):
        """Same fields in any order should hash equally."""
        assert compute_fingerprint({"a": 1, "b": "x"}) == compute_fingerprint({"b": "x", "a": 1})

    def test_different_items_differ(self):
        """Different identities should never collide."""
        assert compute_fingerprint({"id": "1"}) != compute_fingerprint({"id": "2"})
        assert compute_fingerprint({"id": 1}) != compute_fingerprint({"id": "1"})

    def test_empty(self):
        """No item should give the empty fingerprint, which is not None."""
        assert compute_fingerprint(None) == EMPTY_FINGERPRINT
        assert compute_fingerprint({}) == EMPTY_FINGERPRINT
        assert EMPTY_FINGERPRINT is not None
        assert len(EMPTY_FINGERPRINT) == 64

    def test_hex_digest(self):
        """Fingerprints should be SHA256 hex digests."""
        fingerprint = compute_fingerprint({"id": "1"})

        assert len(fingerprint) == 64
        int(fingerprint, 16)
