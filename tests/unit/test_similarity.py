"""Tests for certify.similarity — trigram scoring and the originality checker."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from ophelia_market.catalog.schemas import ProductDraft
from ophelia_market.common.exceptions import OriginalityCheckError
from ophelia_market.certify.similarity import TrigramSimilarityChecker, similarity, trigrams


class TestTrigrams:
    def test_single_word_padding(self):
        assert trigrams("cat") == {"  c", " ca", "cat", "at "}

    def test_case_and_punctuation_ignored(self):
        assert trigrams("Cat!") == trigrams("cat")

    def test_empty(self):
        assert trigrams("") == set()
        assert trigrams("  ,. ") == set()


class TestSimilarity:
    def test_identical(self):
        assert similarity("Woven Basket", "woven basket") == 1.0

    def test_disjoint(self):
        assert similarity("ceramic vase", "wool blanket") == 0.0

    def test_partial_overlap_between_bounds(self):
        score = similarity("hand woven basket", "hand woven baskets")
        assert 0.0 < score < 1.0

    def test_empty_scores_zero(self):
        assert similarity("", "") == 0.0
        assert similarity("basket", "") == 0.0

    def test_symmetric(self):
        assert similarity("clay pot", "clay pots") == similarity("clay pots", "clay pot")


async def _add_product(services, artisan_id, title, description):
    draft = ProductDraft(title=title, description=description, price=10, category="Pottery")
    async with services.db.get_session() as session:
        return await services.catalog.create_product(session, artisan_id, draft)


class TestTrigramSimilarityChecker:
    def test_threshold_bounds(self):
        with pytest.raises(ValueError):
            TrigramSimilarityChecker(threshold=0)
        with pytest.raises(ValueError):
            TrigramSimilarityChecker(threshold=1.5)

    async def test_original_when_catalog_empty(self, services, make_artisan):
        me = await make_artisan()
        checker = TrigramSimilarityChecker()
        async with services.db.get_session() as session:
            assert await checker.check_originality(
                session, me["artisan_id"], "Blue Vase", "A tall blue vase",
            ) is True

    async def test_copy_of_other_artisan_title_flagged(self, services, make_artisan):
        other = await make_artisan()
        me = await make_artisan()
        await _add_product(services, other["artisan_id"], "Hand Painted Blue Vase", "Glazed stoneware")
        checker = TrigramSimilarityChecker()
        async with services.db.get_session() as session:
            assert await checker.check_originality(
                session, me["artisan_id"], "hand painted blue vase", "Something else entirely",
            ) is False

    async def test_copy_of_other_artisan_description_flagged(self, services, make_artisan):
        other = await make_artisan()
        me = await make_artisan()
        description = "Wheel thrown stoneware bowl with a speckled oatmeal glaze"
        await _add_product(services, other["artisan_id"], "Oatmeal Bowl", description)
        checker = TrigramSimilarityChecker()
        async with services.db.get_session() as session:
            assert await checker.check_originality(
                session, me["artisan_id"], "Breakfast Dish", description,
            ) is False

    async def test_own_products_ignored(self, services, make_artisan):
        me = await make_artisan()
        await _add_product(services, me["artisan_id"], "Blue Vase", "A tall blue vase")
        checker = TrigramSimilarityChecker()
        async with services.db.get_session() as session:
            assert await checker.check_originality(
                session, me["artisan_id"], "Blue Vase", "A tall blue vase",
            ) is True

    async def test_below_threshold_is_original(self, services, make_artisan):
        other = await make_artisan()
        me = await make_artisan()
        await _add_product(services, other["artisan_id"], "Copper Kettle", "Hammered copper kettle")
        checker = TrigramSimilarityChecker()
        async with services.db.get_session() as session:
            assert await checker.check_originality(
                session, me["artisan_id"], "Silk Scarf", "Hand dyed silk scarf",
            ) is True

    async def test_scan_limit_only_checks_newest(self, services, make_artisan):
        other = await make_artisan()
        me = await make_artisan()
        await _add_product(services, other["artisan_id"], "Blue Vase", "A tall blue vase")
        await _add_product(services, other["artisan_id"], "Copper Kettle", "Hammered copper kettle")
        checker = TrigramSimilarityChecker(scan_limit=1)
        async with services.db.get_session() as session:
            assert await checker.check_originality(
                session, me["artisan_id"], "Blue Vase", "A tall blue vase",
            ) is True

    async def test_store_error_raises_originality_check_error(self):
        session = MagicMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("locked")))
        with pytest.raises(OriginalityCheckError):
            await TrigramSimilarityChecker().check_originality(session, "artisan", "Vase", "Blue")
