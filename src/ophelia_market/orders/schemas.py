"""Pydantic schemas for order, review, and analytics endpoints."""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

OrderStatus = Literal["pending", "paid", "shipped", "delivered", "cancelled"]


class OrderCreate(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1, le=10_000)
    shipping_address: dict[str, Any]
    notes: str = Field(default="", max_length=2000)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    tracking_number: Optional[str] = None


class OrderResponse(BaseModel):
    id: str
    buyer_id: str
    artisan_id: str
    product_id: str
    quantity: int
    total_amount: float
    status: str
    shipping_address: dict[str, Any]
    tracking_number: str
    notes: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ReviewCreate(BaseModel):
    rating: int
    comment: str = Field(default="", max_length=2000)
    images: list[str] = Field(default_factory=list)


class ReviewResponse(BaseModel):
    id: str
    buyer_id: str
    product_id: str
    rating: int
    comment: str
    images: list[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class CategoryCount(BaseModel):
    name: str
    value: int


class TrendingProduct(BaseModel):
    id: str
    name: str
    views: int


class AnalyticsResponse(BaseModel):
    total_revenue: float
    total_orders: int
    total_products: int
    total_artisans: int
    categories: list[CategoryCount]
    trending: list[TrendingProduct]
