"""
Certificate hash issuance using HMAC-SHA256 signing.

Format: OPH-{V}-{HEX}
- 'OPH' fixed prefix
- V: signing key version (0-31) as one base32 character
- HEX: 64 hex chars of HMAC-SHA256 over "{product_id}|{issuer_id}|{timestamp}"

The token binds a certificate to its product, issuer and issue time. Anyone
holding the keyring can recompute it offline; nobody else can forge one.
"""

import hashlib
import hmac
from datetime import datetime, timezone
from typing import Protocol

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
HASH_PREFIX = "OPH"
DIGEST_LEN = 64


def _encode_version(version: int) -> str:
    """Encode a version number (0-31) as a single base32 character."""
    return BASE32_ALPHABET[version % 32]


def _decode_version(char: str) -> int:
    idx = BASE32_ALPHABET.find(char)
    if idx == -1:
        return 0
    return idx


def canonical_timestamp(timestamp: datetime) -> str:
    """ISO-8601 UTC rendering used as HMAC input.

    SQLite hands back naive datetimes; those are taken to be UTC.
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).isoformat()


def _compute_digest(product_id: str, issuer_id: str, timestamp: datetime, hmac_key: str) -> str:
    message = f"{product_id}|{issuer_id}|{canonical_timestamp(timestamp)}".encode()
    return hmac.new(hmac_key.encode(), message, hashlib.sha256).hexdigest()


def extract_version(certificate_hash: str) -> int:
    parts = certificate_hash.split("-")
    if len(parts) != 3 or len(parts[1]) != 1:
        return 0
    return _decode_version(parts[1])


def generate_certificate_hash(
    product_id: str,
    issuer_id: str,
    timestamp: datetime,
    hmac_key: str,
    version: int = 0,
) -> str:
    """
    Generate the certificate hash for a product.

    Args:
        product_id: id of the certified product
        issuer_id: id of the user issuing the certificate
        timestamp: issue time
        hmac_key: signing key
        version: signing key version (0-31), embedded in the token

    Returns:
        Formatted certificate hash string
    """
    digest = _compute_digest(product_id, issuer_id, timestamp, hmac_key)
    return f"{HASH_PREFIX}-{_encode_version(version)}-{digest}"


def verify_certificate_hash(
    certificate_hash: str,
    product_id: str,
    issuer_id: str,
    timestamp: datetime,
    hmac_keys: dict[int, str],
) -> bool:
    """
    Recompute a certificate hash against a keyring.

    Tries the key matching the embedded version first, then every other
    key in the ring.
    """
    parts = certificate_hash.split("-")
    if len(parts) != 3 or parts[0] != HASH_PREFIX or len(parts[2]) != DIGEST_LEN:
        return False
    provided = parts[2]
    version = extract_version(certificate_hash)

    ordered = []
    if version in hmac_keys:
        ordered.append(hmac_keys[version])
    ordered.extend(k for v, k in hmac_keys.items() if v != version)

    for key in ordered:
        expected = _compute_digest(product_id, issuer_id, timestamp, key)
        if hmac.compare_digest(provided, expected):
            return True
    return False


class HashIssuer(Protocol):
    """Produces an opaque, unique token for (subject, issuer, time)."""

    async def issue(self, product_id: str, issuer_id: str, timestamp: datetime) -> str:
        ...


class HmacHashIssuer:
    """Default issuer signing with the configured keyring."""

    def __init__(self, hmac_keys: dict[int, str]):
        if not hmac_keys:
            raise ValueError("HMAC keyring is empty")
        self.hmac_keys = hmac_keys

    @property
    def current_version(self) -> int:
        return max(self.hmac_keys)

    async def issue(self, product_id: str, issuer_id: str, timestamp: datetime) -> str:
        version = self.current_version
        return generate_certificate_hash(
            product_id, issuer_id, timestamp, self.hmac_keys[version], version=version,
        )

    def verify(
        self, certificate_hash: str, product_id: str, issuer_id: str, timestamp: datetime,
    ) -> bool:
        return verify_certificate_hash(
            certificate_hash, product_id, issuer_id, timestamp, self.hmac_keys,
        )
