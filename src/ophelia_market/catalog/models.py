"""SQLAlchemy models for product listings."""

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ophelia_market.common.models import Base, TimestampMixin, generate_uuid

PLACEHOLDER_IMAGE = "/placeholder.svg"


class ProductModel(Base, TimestampMixin):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    artisan_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("artisan_profiles.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    story: Mapped[str] = mapped_column(Text, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    materials: Mapped[list] = mapped_column(JSON, default=list)
    dimensions: Mapped[str] = mapped_column(String(255), default="")
    weight: Mapped[str] = mapped_column(String(100), default="")
    images: Mapped[list] = mapped_column(JSON, default=lambda: [PLACEHOLDER_IMAGE])
    tags: Mapped[list] = mapped_column(JSON, default=list)
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    views: Mapped[int] = mapped_column(Integer, default=0)
    favorites: Mapped[int] = mapped_column(Integer, default=0)
