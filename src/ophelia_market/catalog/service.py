"""Catalog service — product listings, counters, availability."""

from typing import Any

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ophelia_market.common.config import OpheliaSettings
from ophelia_market.common.exceptions import NotProductOwnerError, ProductNotFoundError
from ophelia_market.catalog.models import PLACEHOLDER_IMAGE, ProductModel
from ophelia_market.catalog.schemas import ProductDraft
from ophelia_market.certificates.models import CertificateModel
from ophelia_market.profiles.models import ArtisanProfileModel, ProfileModel

_PRODUCT_FIELDS = (
    "id", "artisan_id", "title", "description", "story", "price", "currency",
    "category", "materials", "dimensions", "weight", "images", "tags",
    "stock_quantity", "is_available", "is_featured", "views", "favorites",
    "created_at",
)


def product_to_dict(product: ProductModel) -> dict[str, Any]:
    return {field: getattr(product, field) for field in _PRODUCT_FIELDS}


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CatalogService:
    """Product reads and writes outside the issuance workflow."""

    def __init__(self, settings: OpheliaSettings):
        self.settings = settings

    # ── Writes ──

    async def create_product(
        self, session: AsyncSession, artisan_id: str, draft: ProductDraft,
    ) -> ProductModel:
        product = ProductModel(
            artisan_id=artisan_id,
            title=draft.title,
            description=draft.description,
            story=draft.story,
            price=draft.price,
            category=draft.category,
            materials=list(draft.materials),
            dimensions=draft.dimensions,
            weight=draft.weight,
            images=list(draft.images) or [PLACEHOLDER_IMAGE],
            tags=list(draft.tags),
            stock_quantity=draft.stock_quantity,
            is_available=True,
        )
        session.add(product)
        await session.flush()
        return product

    async def update_product(
        self, session: AsyncSession, product_id: str, artisan_id: str, **updates: Any,
    ) -> ProductModel:
        product = await self.get_product(session, product_id)
        if product.artisan_id != artisan_id:
            raise NotProductOwnerError()
        for field in ("is_available", "stock_quantity", "price", "story"):
            if field in updates and updates[field] is not None:
                setattr(product, field, updates[field])
        await session.flush()
        return product

    async def increment_views(self, session: AsyncSession, product_id: str) -> None:
        await session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(views=ProductModel.views + 1)
        )

    async def add_favorite(self, session: AsyncSession, product_id: str) -> int:
        product = await self.get_product(session, product_id)
        product.favorites = (product.favorites or 0) + 1
        await session.flush()
        return product.favorites

    # ── Reads ──

    async def get_product(self, session: AsyncSession, product_id: str) -> ProductModel:
        product = await session.get(ProductModel, product_id)
        if product is None:
            raise ProductNotFoundError()
        return product

    async def list_artisan_products(
        self, session: AsyncSession, artisan_id: str,
    ) -> list[ProductModel]:
        result = await session.execute(
            select(ProductModel)
            .where(ProductModel.artisan_id == artisan_id)
            .order_by(ProductModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_marketplace(
        self,
        session: AsyncSession,
        category: str | None = None,
        limit: int | None = None,
        offset: int = 0,
        q: str | None = None,
    ) -> list[dict[str, Any]]:
        """Available products, newest first, with artisan and active certificate.

        ``q`` is a case-insensitive substring match on title, description or
        category.
        """
        limit = min(limit or self.settings.marketplace_page_size, self.settings.max_page_size)
        query = select(ProductModel).where(ProductModel.is_available == True)  # noqa: E712
        if category:
            query = query.where(ProductModel.category == category)
        if q:
            pattern = "%" + _escape_like(q) + "%"
            query = query.where(or_(
                ProductModel.title.ilike(pattern, escape="\\"),
                ProductModel.description.ilike(pattern, escape="\\"),
                ProductModel.category.ilike(pattern, escape="\\"),
            ))
        query = query.order_by(ProductModel.created_at.desc()).offset(offset).limit(limit)
        result = await session.execute(query)
        products = list(result.scalars().all())
        return await self._decorate(session, products)

    async def get_product_detail(
        self, session: AsyncSession, product_id: str,
    ) -> dict[str, Any]:
        """Product with its artisan and active certificate."""
        product = await self.get_product(session, product_id)
        decorated = await self._decorate(session, [product])
        return decorated[0]

    async def _decorate(
        self, session: AsyncSession, products: list[ProductModel],
    ) -> list[dict[str, Any]]:
        if not products:
            return []
        product_ids = [p.id for p in products]
        artisan_ids = {p.artisan_id for p in products}

        cert_result = await session.execute(
            select(CertificateModel)
            .where(
                CertificateModel.product_id.in_(product_ids),
                CertificateModel.is_active == True,  # noqa: E712
            )
            .order_by(CertificateModel.issue_date.desc())
        )
        certificates: dict[str, CertificateModel] = {}
        for cert in cert_result.scalars().all():
            certificates.setdefault(cert.product_id, cert)

        artisan_result = await session.execute(
            select(ArtisanProfileModel, ProfileModel)
            .join(ProfileModel, ProfileModel.id == ArtisanProfileModel.user_id)
            .where(ArtisanProfileModel.id.in_(artisan_ids))
        )
        artisans = {
            artisan.id: {
                "id": artisan.id,
                "full_name": profile.full_name,
                "country": profile.country,
                "craft_type": artisan.craft_type,
            }
            for artisan, profile in artisan_result.all()
        }

        items = []
        for product in products:
            item = product_to_dict(product)
            item["artisan"] = artisans.get(product.artisan_id)
            cert = certificates.get(product.id)
            item["certificate"] = (
                {
                    "certificate_hash": cert.certificate_hash,
                    "issue_date": cert.issue_date,
                    "is_active": cert.is_active,
                }
                if cert else None
            )
            items.append(item)
        return items
