"""Order service — orders, reviews, and platform analytics."""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ophelia_market.common.exceptions import (
    NotProductOwnerError,
    OrderError,
    OrderNotFoundError,
    ReviewError,
)
from ophelia_market.catalog.models import ProductModel
from ophelia_market.catalog.service import CatalogService
from ophelia_market.orders.models import OrderModel, ReviewModel
from ophelia_market.profiles.models import ArtisanProfileModel

VALID_STATUSES = frozenset({"pending", "paid", "shipped", "delivered", "cancelled"})
TRENDING_LIMIT = 5


class OrderService:
    """Buyer-facing order and review operations."""

    def __init__(self, catalog: CatalogService):
        self.catalog = catalog

    # ── Orders ──

    async def place_order(
        self,
        session: AsyncSession,
        buyer_id: str,
        product_id: str,
        quantity: int,
        shipping_address: dict[str, Any],
        notes: str = "",
    ) -> OrderModel:
        product = await self.catalog.get_product(session, product_id)
        if not product.is_available:
            raise OrderError("Product is not available", code="UNAVAILABLE")
        if quantity < 1:
            raise OrderError("Quantity must be at least 1")
        if quantity > product.stock_quantity:
            raise OrderError(
                f"Only {product.stock_quantity} left in stock", code="INSUFFICIENT_STOCK",
            )

        order = OrderModel(
            buyer_id=buyer_id,
            artisan_id=product.artisan_id,
            product_id=product.id,
            quantity=quantity,
            total_amount=round(product.price * quantity, 2),
            status="pending",
            shipping_address=shipping_address,
            notes=notes,
        )
        session.add(order)

        product.stock_quantity -= quantity
        artisan = await session.get(ArtisanProfileModel, product.artisan_id)
        if artisan is not None:
            artisan.total_sales = (artisan.total_sales or 0) + quantity
        await session.flush()
        return order

    async def get_order(self, session: AsyncSession, order_id: str) -> OrderModel:
        order = await session.get(OrderModel, order_id)
        if order is None:
            raise OrderNotFoundError()
        return order

    async def list_orders(
        self,
        session: AsyncSession,
        buyer_id: str | None = None,
        artisan_id: str | None = None,
    ) -> list[OrderModel]:
        query = select(OrderModel)
        if buyer_id is not None:
            query = query.where(OrderModel.buyer_id == buyer_id)
        if artisan_id is not None:
            query = query.where(OrderModel.artisan_id == artisan_id)
        result = await session.execute(query.order_by(OrderModel.created_at.desc()))
        return list(result.scalars().all())

    async def update_status(
        self,
        session: AsyncSession,
        order_id: str,
        artisan_id: str,
        status: str,
        tracking_number: str | None = None,
    ) -> OrderModel:
        if status not in VALID_STATUSES:
            raise OrderError(f"Unknown order status '{status}'", code="INVALID_STATUS")
        order = await self.get_order(session, order_id)
        if order.artisan_id != artisan_id:
            raise NotProductOwnerError("Order belongs to another artisan")
        if order.status == "cancelled":
            raise OrderError("Cancelled orders cannot change status", code="INVALID_STATUS")

        if status == "cancelled":
            product = await session.get(ProductModel, order.product_id)
            if product is not None:
                product.stock_quantity += order.quantity
            artisan = await session.get(ArtisanProfileModel, order.artisan_id)
            if artisan is not None:
                artisan.total_sales = max((artisan.total_sales or 0) - order.quantity, 0)
        order.status = status
        if tracking_number is not None:
            order.tracking_number = tracking_number
        await session.flush()
        return order

    # ── Reviews ──

    async def add_review(
        self,
        session: AsyncSession,
        buyer_id: str,
        product_id: str,
        rating: int,
        comment: str = "",
        images: list[str] | None = None,
    ) -> ReviewModel:
        if not 1 <= rating <= 5:
            raise ReviewError("Rating must be between 1 and 5")
        product = await self.catalog.get_product(session, product_id)

        review = ReviewModel(
            buyer_id=buyer_id,
            product_id=product.id,
            rating=rating,
            comment=comment,
            images=images or [],
        )
        session.add(review)

        artisan = await session.get(ArtisanProfileModel, product.artisan_id)
        if artisan is not None:
            count = artisan.total_reviews or 0
            artisan.rating = round(((artisan.rating or 0.0) * count + rating) / (count + 1), 2)
            artisan.total_reviews = count + 1
        await session.flush()
        return review

    async def list_reviews(self, session: AsyncSession, product_id: str) -> list[ReviewModel]:
        result = await session.execute(
            select(ReviewModel)
            .where(ReviewModel.product_id == product_id)
            .order_by(ReviewModel.created_at.desc())
        )
        return list(result.scalars().all())

    # ── Analytics ──

    async def platform_analytics(self, session: AsyncSession) -> dict[str, Any]:
        revenue = (await session.execute(
            select(func.coalesce(func.sum(OrderModel.total_amount), 0.0))
        )).scalar() or 0.0
        total_orders = (await session.execute(select(func.count(OrderModel.id)))).scalar() or 0
        total_products = (await session.execute(select(func.count(ProductModel.id)))).scalar() or 0
        total_artisans = (await session.execute(
            select(func.count(ArtisanProfileModel.id))
        )).scalar() or 0

        category_rows = await session.execute(
            select(ProductModel.category, func.count(ProductModel.id))
            .group_by(ProductModel.category)
            .order_by(func.count(ProductModel.id).desc(), ProductModel.category)
        )
        categories = [
            {"name": name or "Other", "value": count}
            for name, count in category_rows.all()
        ]

        trending_rows = await session.execute(
            select(ProductModel.id, ProductModel.title, ProductModel.views)
            .order_by(ProductModel.views.desc(), ProductModel.created_at.desc())
            .limit(TRENDING_LIMIT)
        )
        trending = [
            {"id": pid, "name": title, "views": views or 0}
            for pid, title, views in trending_rows.all()
        ]

        return {
            "total_revenue": round(float(revenue), 2),
            "total_orders": total_orders,
            "total_products": total_products,
            "total_artisans": total_artisans,
            "categories": categories,
            "trending": trending,
        }
