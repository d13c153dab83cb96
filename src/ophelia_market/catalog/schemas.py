"""Pydantic schemas for catalog endpoints."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ophelia_market.common.exceptions import ValidationFailedError

MAX_TITLE_LEN = 200
MAX_DESCRIPTION_LEN = 2000
MAX_PRICE = 1_000_000
MAX_STOCK = 10_000
MAX_IMAGES = 5


def _split_materials(value):
    if isinstance(value, str):
        return [m.strip() for m in value.split(",") if m.strip()]
    if isinstance(value, list):
        return [str(m).strip() for m in value if str(m).strip()]
    return value


def _required_text(value: str, label: str, max_len: int) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} required")
    if len(value) > max_len:
        raise ValueError(f"{label} too long (max {max_len} characters)")
    return value.strip()


class ProductDraft(BaseModel):
    """A product submission as entered by an artisan."""

    title: str
    description: str
    price: float = Field(..., gt=0, le=MAX_PRICE)
    stock_quantity: int = Field(default=0, ge=0, le=MAX_STOCK)
    category: str = Field(..., min_length=1, max_length=100)
    materials: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list, max_length=MAX_IMAGES)
    story: str = Field(default="", max_length=5000)
    dimensions: str = Field(default="", max_length=255)
    weight: str = Field(default="", max_length=100)
    tags: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _check_title(cls, v: str) -> str:
        return _required_text(v, "Product title", MAX_TITLE_LEN)

    @field_validator("description")
    @classmethod
    def _check_description(cls, v: str) -> str:
        return _required_text(v, "Description", MAX_DESCRIPTION_LEN)

    @field_validator("category")
    @classmethod
    def _check_category(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Category required")
        return v.strip()

    @field_validator("materials", mode="before")
    @classmethod
    def _check_materials(cls, v):
        return _split_materials(v)


def parse_draft(data: dict[str, Any]) -> ProductDraft:
    """Validate raw submission data, raising ValidationFailedError."""
    try:
        return ProductDraft.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise ValidationFailedError(f"{field}: {first['msg']}") from exc


class CertificateSummary(BaseModel):
    certificate_hash: str
    issue_date: datetime
    is_active: bool

    model_config = {"from_attributes": True}


class ProductResponse(BaseModel):
    id: str
    artisan_id: str
    title: str
    description: str
    story: str
    price: float
    currency: str
    category: str
    materials: list[str]
    dimensions: str
    weight: str
    images: list[str]
    tags: list[str]
    stock_quantity: int
    is_available: bool
    is_featured: bool
    views: int
    favorites: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ArtisanSummary(BaseModel):
    id: str
    full_name: str = ""
    country: str = ""
    craft_type: str = ""


class MarketplaceItem(ProductResponse):
    artisan: Optional[ArtisanSummary] = None
    certificate: Optional[CertificateSummary] = None


class ProductUpdate(BaseModel):
    is_available: Optional[bool] = None
    stock_quantity: Optional[int] = Field(default=None, ge=0, le=MAX_STOCK)
    price: Optional[float] = Field(default=None, gt=0, le=MAX_PRICE)
    story: Optional[str] = Field(default=None, max_length=5000)
