"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255)),
        sa.Column("user_type", sa.String(20)),
        sa.Column("country", sa.String(100)),
        sa.Column("location", sa.String(255)),
        sa.Column("bio", sa.Text()),
        sa.Column("avatar_url", sa.String(1024)),
        sa.Column("phone", sa.String(50)),
        sa.Column("languages", sa.JSON()),
        *_timestamps(),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)
    op.create_index("ix_profiles_created_at", "profiles", ["created_at"])

    op.create_table(
        "artisan_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("craft_type", sa.String(255), nullable=False),
        sa.Column("years_of_experience", sa.Integer(), nullable=True),
        sa.Column("specialties", sa.JSON()),
        sa.Column("workshop_location", sa.String(255)),
        sa.Column("story", sa.Text()),
        sa.Column("video_url", sa.String(1024)),
        sa.Column("certification_level", sa.String(50)),
        sa.Column("total_sales", sa.Integer()),
        sa.Column("total_reviews", sa.Integer()),
        sa.Column("rating", sa.Float()),
        *_timestamps(),
    )
    op.create_index("ix_artisan_profiles_user_id", "artisan_profiles", ["user_id"], unique=True)
    op.create_index("ix_artisan_profiles_created_at", "artisan_profiles", ["created_at"])

    op.create_table(
        "products",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("artisan_id", sa.String(36), sa.ForeignKey("artisan_profiles.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("story", sa.Text()),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(3)),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("materials", sa.JSON()),
        sa.Column("dimensions", sa.String(255)),
        sa.Column("weight", sa.String(100)),
        sa.Column("images", sa.JSON()),
        sa.Column("tags", sa.JSON()),
        sa.Column("stock_quantity", sa.Integer()),
        sa.Column("is_available", sa.Boolean()),
        sa.Column("is_featured", sa.Boolean()),
        sa.Column("views", sa.Integer()),
        sa.Column("favorites", sa.Integer()),
        *_timestamps(),
    )
    op.create_index("ix_products_artisan_id", "products", ["artisan_id"])
    op.create_index("ix_products_category", "products", ["category"])
    op.create_index("ix_products_is_available", "products", ["is_available"])
    op.create_index("ix_products_created_at", "products", ["created_at"])

    op.create_table(
        "product_certificates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("product_id", sa.String(36), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("certificate_hash", sa.String(128), nullable=False),
        sa.Column("issue_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("issuer_id", sa.String(36), nullable=False),
        sa.Column("is_active", sa.Boolean()),
        sa.Column("verification_criteria", sa.JSON()),
        *_timestamps(),
    )
    op.create_index("ix_product_certificates_product_id", "product_certificates", ["product_id"])
    op.create_index(
        "ix_product_certificates_certificate_hash", "product_certificates",
        ["certificate_hash"], unique=True,
    )
    op.create_index("ix_product_certificates_is_active", "product_certificates", ["is_active"])
    op.create_index("ix_product_certificates_created_at", "product_certificates", ["created_at"])

    op.create_table(
        "orders",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("buyer_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("artisan_id", sa.String(36), sa.ForeignKey("artisan_profiles.id"), nullable=False),
        sa.Column("product_id", sa.String(36), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer()),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(20)),
        sa.Column("shipping_address", sa.JSON()),
        sa.Column("tracking_number", sa.String(100)),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_orders_buyer_id", "orders", ["buyer_id"])
    op.create_index("ix_orders_artisan_id", "orders", ["artisan_id"])
    op.create_index("ix_orders_product_id", "orders", ["product_id"])
    op.create_index("ix_orders_status", "orders", ["status"])
    op.create_index("ix_orders_created_at", "orders", ["created_at"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("buyer_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("product_id", sa.String(36), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text()),
        sa.Column("images", sa.JSON()),
        *_timestamps(),
    )
    op.create_index("ix_reviews_buyer_id", "reviews", ["buyer_id"])
    op.create_index("ix_reviews_product_id", "reviews", ["product_id"])
    op.create_index("ix_reviews_created_at", "reviews", ["created_at"])


def downgrade() -> None:
    op.drop_table("reviews")
    op.drop_table("orders")
    op.drop_table("product_certificates")
    op.drop_table("products")
    op.drop_table("artisan_profiles")
    op.drop_table("profiles")
