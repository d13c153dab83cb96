"""
Originality checks based on trigram similarity.

Trigrams follow the pg_trgm convention: text is lowercased and split into
alphanumeric words, each word is padded with two spaces in front and one
behind, and similarity is the Jaccard index of the two trigram sets.
"""

import logging
import re
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ophelia_market.catalog.models import ProductModel
from ophelia_market.common.exceptions import OriginalityCheckError

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"[0-9a-z]+")


def trigrams(text: str) -> set[str]:
    result: set[str] = set()
    for word in _WORD_RE.findall(text.lower()):
        padded = f"  {word} "
        for i in range(len(padded) - 2):
            result.add(padded[i:i + 3])
    return result


def similarity(a: str, b: str) -> float:
    """Trigram similarity in [0, 1]; two empty texts score 0."""
    ta, tb = trigrams(a), trigrams(b)
    if not ta or not tb:
        return 0.0
    return len(ta & tb) / len(ta | tb)


class SimilarityChecker(Protocol):
    """Decides whether a submission is an original listing."""

    async def check_originality(
        self, session: AsyncSession, artisan_id: str, title: str, description: str,
    ) -> bool:
        ...


class TrigramSimilarityChecker:
    """Flags submissions too close to another artisan's listing."""

    def __init__(self, threshold: float = 0.8, scan_limit: int = 500):
        if not 0.0 < threshold <= 1.0:
            raise ValueError("similarity threshold must be in (0, 1]")
        self.threshold = threshold
        self.scan_limit = scan_limit

    async def check_originality(
        self, session: AsyncSession, artisan_id: str, title: str, description: str,
    ) -> bool:
        try:
            result = await session.execute(
                select(ProductModel.id, ProductModel.title, ProductModel.description)
                .where(ProductModel.artisan_id != artisan_id)
                .order_by(ProductModel.created_at.desc())
                .limit(self.scan_limit)
            )
            rows = result.all()
        except SQLAlchemyError as exc:
            raise OriginalityCheckError("Could not load products for comparison") from exc

        for product_id, other_title, other_description in rows:
            title_score = similarity(title, other_title)
            description_score = similarity(description, other_description or "")
            if title_score >= self.threshold or description_score >= self.threshold:
                logger.info(
                    "Submission resembles an existing product",
                    extra={"context": {
                        "artisan_id": artisan_id,
                        "product_id": product_id,
                        "title_score": round(title_score, 3),
                        "description_score": round(description_score, 3),
                    }},
                )
                return False
        return True
