"""Tests for certify.hasher — certificate hash issuance and verification."""

import hashlib
import hmac
from datetime import datetime, timezone

import pytest

from ophelia_market.certify.hasher import (
    BASE32_ALPHABET,
    DIGEST_LEN,
    HASH_PREFIX,
    HmacHashIssuer,
    _decode_version,
    _encode_version,
    canonical_timestamp,
    extract_version,
    generate_certificate_hash,
    verify_certificate_hash,
)


HMAC_KEY = "test-hmac-key-for-unit-tests"
ISSUED_AT = datetime(2026, 3, 14, 9, 26, 53, 589793, tzinfo=timezone.utc)


class TestVersionEncoding:
    def test_roundtrip_all_versions(self):
        for v in range(32):
            assert _decode_version(_encode_version(v)) == v

    def test_unknown_char_decodes_to_zero(self):
        assert _decode_version("!") == 0

    def test_extract_version(self):
        token = generate_certificate_hash("p1", "u1", ISSUED_AT, HMAC_KEY, version=3)
        assert extract_version(token) == 3

    def test_extract_version_malformed(self):
        assert extract_version("garbage") == 0


class TestCanonicalTimestamp:
    def test_naive_treated_as_utc(self):
        naive = ISSUED_AT.replace(tzinfo=None)
        assert canonical_timestamp(naive) == canonical_timestamp(ISSUED_AT)

    def test_offset_normalised_to_utc(self):
        from datetime import timedelta
        shifted = ISSUED_AT.astimezone(timezone(timedelta(hours=5)))
        assert canonical_timestamp(shifted) == "2026-03-14T09:26:53.589793+00:00"


class TestGenerateCertificateHash:
    def test_format(self):
        token = generate_certificate_hash("p1", "u1", ISSUED_AT, HMAC_KEY)
        prefix, version, digest = token.split("-")
        assert prefix == HASH_PREFIX
        assert version in BASE32_ALPHABET
        assert len(digest) == DIGEST_LEN
        int(digest, 16)

    def test_matches_manual_hmac(self):
        message = f"p1|u1|{ISSUED_AT.isoformat()}".encode()
        expected = hmac.new(HMAC_KEY.encode(), message, hashlib.sha256).hexdigest()
        assert generate_certificate_hash("p1", "u1", ISSUED_AT, HMAC_KEY) == f"OPH-A-{expected}"

    def test_deterministic(self):
        a = generate_certificate_hash("p1", "u1", ISSUED_AT, HMAC_KEY)
        b = generate_certificate_hash("p1", "u1", ISSUED_AT, HMAC_KEY)
        assert a == b

    def test_binds_every_input(self):
        base = generate_certificate_hash("p1", "u1", ISSUED_AT, HMAC_KEY)
        assert generate_certificate_hash("p2", "u1", ISSUED_AT, HMAC_KEY) != base
        assert generate_certificate_hash("p1", "u2", ISSUED_AT, HMAC_KEY) != base
        later = ISSUED_AT.replace(microsecond=0)
        assert generate_certificate_hash("p1", "u1", later, HMAC_KEY) != base
        assert generate_certificate_hash("p1", "u1", ISSUED_AT, "other-key") != base


class TestVerifyCertificateHash:
    def test_valid(self):
        token = generate_certificate_hash("p1", "u1", ISSUED_AT, HMAC_KEY)
        assert verify_certificate_hash(token, "p1", "u1", ISSUED_AT, {0: HMAC_KEY})

    def test_wrong_product(self):
        token = generate_certificate_hash("p1", "u1", ISSUED_AT, HMAC_KEY)
        assert not verify_certificate_hash(token, "p2", "u1", ISSUED_AT, {0: HMAC_KEY})

    def test_wrong_key(self):
        token = generate_certificate_hash("p1", "u1", ISSUED_AT, HMAC_KEY)
        assert not verify_certificate_hash(token, "p1", "u1", ISSUED_AT, {0: "nope"})

    def test_tampered_digest(self):
        token = generate_certificate_hash("p1", "u1", ISSUED_AT, HMAC_KEY)
        flipped = token[:-1] + ("0" if token[-1] != "0" else "1")
        assert not verify_certificate_hash(flipped, "p1", "u1", ISSUED_AT, {0: HMAC_KEY})

    @pytest.mark.parametrize("token", ["", "OPH", "XYZ-A-" + "0" * 64, "OPH-A-abc"])
    def test_malformed(self, token):
        assert not verify_certificate_hash(token, "p1", "u1", ISSUED_AT, {0: HMAC_KEY})

    def test_rotated_keyring_accepts_old_tokens(self):
        old = generate_certificate_hash("p1", "u1", ISSUED_AT, "old-key", version=0)
        ring = {0: "old-key", 1: "new-key"}
        assert verify_certificate_hash(old, "p1", "u1", ISSUED_AT, ring)


class TestHmacHashIssuer:
    def test_empty_keyring_rejected(self):
        with pytest.raises(ValueError):
            HmacHashIssuer({})

    async def test_issue_uses_newest_key(self):
        issuer = HmacHashIssuer({0: "old-key", 1: "new-key"})
        token = await issuer.issue("p1", "u1", ISSUED_AT)
        assert extract_version(token) == 1
        assert token == generate_certificate_hash("p1", "u1", ISSUED_AT, "new-key", version=1)

    async def test_issue_then_verify(self):
        issuer = HmacHashIssuer({0: HMAC_KEY})
        token = await issuer.issue("p1", "u1", ISSUED_AT)
        assert issuer.verify(token, "p1", "u1", ISSUED_AT)
        assert issuer.verify(token, "p1", "u1", ISSUED_AT.replace(tzinfo=None))
