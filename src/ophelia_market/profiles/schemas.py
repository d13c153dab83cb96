"""Pydantic schemas for profile endpoints."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ophelia_market.catalog.schemas import ProductResponse


def split_csv(value):
    """Accept either a list or a comma-separated string."""
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


# ── Profiles ──

class ProfileCreate(BaseModel):
    email: EmailStr
    full_name: str = Field(default="", max_length=255)
    user_type: Literal["buyer", "artisan", "admin"] = "buyer"
    country: str = ""
    location: str = ""
    bio: str = Field(default="", max_length=2000)
    avatar_url: str = ""
    phone: str = ""
    languages: list[str] = Field(default_factory=list)


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str
    user_type: str
    country: str
    location: str
    bio: str
    avatar_url: str
    phone: str
    languages: list[str]
    created_at: datetime

    model_config = {"from_attributes": True}


# ── Artisans ──

class ArtisanSetup(BaseModel):
    craft_type: str = Field(..., min_length=1, max_length=255)
    years_of_experience: Optional[int] = Field(default=None, ge=0, le=100)
    specialties: list[str] = Field(default_factory=list)
    workshop_location: str = ""
    story: str = Field(default="", max_length=5000)
    video_url: str = ""

    @field_validator("specialties", mode="before")
    @classmethod
    def _split_specialties(cls, v):
        return split_csv(v)


class ArtisanResponse(BaseModel):
    id: str
    user_id: str
    craft_type: str
    years_of_experience: Optional[int] = None
    specialties: list[str]
    workshop_location: str
    story: str
    video_url: str
    certification_level: str
    total_sales: int
    total_reviews: int
    rating: float
    created_at: datetime

    model_config = {"from_attributes": True}


class DashboardStats(BaseModel):
    total_sales: int
    total_views: int
    total_favorites: int
    total_products: int


class DashboardResponse(BaseModel):
    artisan: ArtisanResponse
    products: list[ProductResponse]
    stats: DashboardStats
