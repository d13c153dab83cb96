"""Tests for catalog service and draft validation."""

from datetime import datetime, timezone

import pytest

from ophelia_market.common.exceptions import (
    NotProductOwnerError,
    ProductNotFoundError,
    ValidationFailedError,
)
from ophelia_market.catalog.schemas import ProductDraft, parse_draft


def draft(**overrides) -> ProductDraft:
    data = {
        "title": "Beaded Necklace",
        "description": "Glass seed beads strung on waxed cotton.",
        "price": 30,
        "stock_quantity": 5,
        "category": "Jewelry",
    }
    data.update(overrides)
    return ProductDraft(**data)


async def add_product(services, artisan_id, **overrides):
    async with services.db.get_session() as session:
        return await services.catalog.create_product(session, artisan_id, draft(**overrides))


async def add_certificate(services, product_id, certificate_hash, issuer_id="issuer", active=True):
    async with services.db.get_session() as session:
        cert = await services.certificates.create_certificate(
            session, product_id, certificate_hash, issuer_id,
            datetime.now(timezone.utc), {"originality_check": True},
        )
        cert.is_active = active
        return cert


# ── Draft validation ──


class TestParseDraft:
    def test_trims_text_fields(self):
        d = parse_draft({
            "title": "  Clay Pot  ", "description": " Fired clay ",
            "price": 10, "category": " Pottery ",
        })
        assert d.title == "Clay Pot"
        assert d.description == "Fired clay"
        assert d.category == "Pottery"

    def test_materials_csv_split(self):
        d = draft(materials="wool,  silk , ,cotton")
        assert d.materials == ["wool", "silk", "cotton"]

    def test_materials_list_kept(self):
        assert draft(materials=["wool", " "]).materials == ["wool"]

    def test_title_at_limit_accepted(self):
        assert len(draft(title="t" * 200).title) == 200

    def test_title_over_limit(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            parse_draft({"title": "t" * 201, "description": "d", "price": 1, "category": "c"})
        assert "too long" in exc_info.value.message

    def test_negative_price(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            parse_draft({"title": "t", "description": "d", "price": -5, "category": "c"})
        assert exc_info.value.message.startswith("price")

    def test_missing_field(self):
        with pytest.raises(ValidationFailedError):
            parse_draft({"title": "t", "price": 1, "category": "c"})

    def test_validation_code(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            parse_draft({})
        assert exc_info.value.code == "VALIDATION_FAILED"


# ── Writes ──


class TestCreateProduct:
    async def test_defaults(self, services, make_artisan):
        me = await make_artisan()
        product = await add_product(services, me["artisan_id"])
        assert product.id
        assert product.currency == "USD"
        assert product.views == 0
        assert product.favorites == 0
        assert product.is_featured is False
        assert product.images == ["/placeholder.svg"]

    async def test_images_kept(self, services, make_artisan):
        me = await make_artisan()
        product = await add_product(services, me["artisan_id"], images=["a.jpg", "b.jpg"])
        assert product.images == ["a.jpg", "b.jpg"]


class TestUpdateProduct:
    async def test_owner_can_update(self, services, make_artisan):
        me = await make_artisan()
        product = await add_product(services, me["artisan_id"])
        async with services.db.get_session() as session:
            updated = await services.catalog.update_product(
                session, product.id, me["artisan_id"], is_available=False, stock_quantity=0,
            )
        assert updated.is_available is False
        assert updated.stock_quantity == 0

    async def test_none_values_ignored(self, services, make_artisan):
        me = await make_artisan()
        product = await add_product(services, me["artisan_id"], price=30)
        async with services.db.get_session() as session:
            updated = await services.catalog.update_product(
                session, product.id, me["artisan_id"], price=None, story="Made in winter",
            )
        assert updated.price == 30
        assert updated.story == "Made in winter"

    async def test_other_artisan_rejected(self, services, make_artisan):
        me = await make_artisan()
        other = await make_artisan()
        product = await add_product(services, me["artisan_id"])
        with pytest.raises(NotProductOwnerError):
            async with services.db.get_session() as session:
                await services.catalog.update_product(
                    session, product.id, other["artisan_id"], is_available=False,
                )

    async def test_missing_product(self, services, make_artisan):
        me = await make_artisan()
        with pytest.raises(ProductNotFoundError):
            async with services.db.get_session() as session:
                await services.catalog.update_product(session, "nope", me["artisan_id"])


class TestCounters:
    async def test_increment_views(self, services, make_artisan):
        me = await make_artisan()
        product = await add_product(services, me["artisan_id"])
        for _ in range(3):
            async with services.db.get_session() as session:
                await services.catalog.increment_views(session, product.id)
        async with services.db.get_session() as session:
            reloaded = await services.catalog.get_product(session, product.id)
            assert reloaded.views == 3

    async def test_add_favorite(self, services, make_artisan):
        me = await make_artisan()
        product = await add_product(services, me["artisan_id"])
        async with services.db.get_session() as session:
            assert await services.catalog.add_favorite(session, product.id) == 1
        async with services.db.get_session() as session:
            assert await services.catalog.add_favorite(session, product.id) == 2


# ── Reads ──


class TestMarketplace:
    async def test_newest_first_and_available_only(self, services, make_artisan):
        me = await make_artisan()
        first = await add_product(services, me["artisan_id"], title="First")
        await add_product(services, me["artisan_id"], title="Hidden")
        last = await add_product(services, me["artisan_id"], title="Last")
        async with services.db.get_session() as session:
            hidden = await services.catalog.list_artisan_products(session, me["artisan_id"])
            hidden = next(p for p in hidden if p.title == "Hidden")
            hidden.is_available = False

        async with services.db.get_session() as session:
            items = await services.catalog.list_marketplace(session)
        assert [i["id"] for i in items] == [last.id, first.id]

    async def test_category_filter(self, services, make_artisan):
        me = await make_artisan()
        await add_product(services, me["artisan_id"], category="Jewelry")
        await add_product(services, me["artisan_id"], category="Textiles")
        async with services.db.get_session() as session:
            items = await services.catalog.list_marketplace(session, category="Textiles")
        assert [i["category"] for i in items] == ["Textiles"]

    async def test_search_matches_title_description_or_category(self, services, make_artisan):
        me = await make_artisan()
        await add_product(services, me["artisan_id"], title="Copper Kettle", description="Hammered")
        await add_product(services, me["artisan_id"], title="Mug", description="Wheel-thrown COPPER glaze")
        await add_product(services, me["artisan_id"], title="Ring", category="Copperwork")
        await add_product(services, me["artisan_id"], title="Scarf", description="Wool", category="Textiles")

        async with services.db.get_session() as session:
            items = await services.catalog.list_marketplace(session, q="copper")
        assert sorted(i["title"] for i in items) == ["Copper Kettle", "Mug", "Ring"]

    async def test_search_treats_wildcards_literally(self, services, make_artisan):
        me = await make_artisan()
        await add_product(services, me["artisan_id"], title="100% Linen Towel")
        await add_product(services, me["artisan_id"], title="Linen Apron")
        async with services.db.get_session() as session:
            items = await services.catalog.list_marketplace(session, q="0%")
        assert [i["title"] for i in items] == ["100% Linen Towel"]

    async def test_default_page_size(self, services, make_artisan):
        me = await make_artisan()
        for n in range(14):
            await add_product(services, me["artisan_id"], title=f"Item {n}")
        async with services.db.get_session() as session:
            items = await services.catalog.list_marketplace(session)
        assert len(items) == 12

    async def test_limit_capped(self, services, make_artisan):
        services.catalog.settings.max_page_size = 2
        me = await make_artisan()
        for n in range(3):
            await add_product(services, me["artisan_id"], title=f"Item {n}")
        async with services.db.get_session() as session:
            items = await services.catalog.list_marketplace(session, limit=50)
        assert len(items) == 2

    async def test_decorated_with_artisan_and_certificate(self, services, make_artisan):
        me = await make_artisan(craft_type="Beadwork", full_name="Nia Mensah", country="Ghana")
        product = await add_product(services, me["artisan_id"])
        await add_certificate(services, product.id, "OPH-A-" + "a" * 64)

        async with services.db.get_session() as session:
            items = await services.catalog.list_marketplace(session)
        item = items[0]
        assert item["artisan"] == {
            "id": me["artisan_id"],
            "full_name": "Nia Mensah",
            "country": "Ghana",
            "craft_type": "Beadwork",
        }
        assert item["certificate"]["certificate_hash"] == "OPH-A-" + "a" * 64

    async def test_inactive_certificate_not_shown(self, services, make_artisan):
        me = await make_artisan()
        product = await add_product(services, me["artisan_id"])
        await add_certificate(services, product.id, "OPH-A-" + "b" * 64, active=False)
        async with services.db.get_session() as session:
            item = await services.catalog.get_product_detail(session, product.id)
        assert item["certificate"] is None

    async def test_detail_does_not_count_view(self, services, make_artisan):
        me = await make_artisan()
        product = await add_product(services, me["artisan_id"])
        async with services.db.get_session() as session:
            await services.catalog.get_product_detail(session, product.id)
        async with services.db.get_session() as session:
            assert (await services.catalog.get_product(session, product.id)).views == 0

    async def test_detail_missing(self, services):
        with pytest.raises(ProductNotFoundError):
            async with services.db.get_session() as session:
                await services.catalog.get_product_detail(session, "missing")
