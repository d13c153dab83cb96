"""Ophelia Market: handcrafted-goods marketplace with certificates of authenticity."""

from ophelia_market.certify.hasher import (
    HmacHashIssuer,
    generate_certificate_hash,
    verify_certificate_hash,
)
from ophelia_market.certify.similarity import TrigramSimilarityChecker, similarity

__all__ = [
    "HmacHashIssuer",
    "TrigramSimilarityChecker",
    "generate_certificate_hash",
    "verify_certificate_hash",
    "similarity",
]
__version__ = "0.1.0"
