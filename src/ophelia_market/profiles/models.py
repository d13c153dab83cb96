"""SQLAlchemy models for user and artisan profiles."""

from sqlalchemy import JSON, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ophelia_market.common.models import Base, TimestampMixin, generate_uuid


class ProfileModel(Base, TimestampMixin):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(255), default="")
    user_type: Mapped[str] = mapped_column(String(20), default="buyer")
    country: Mapped[str] = mapped_column(String(100), default="")
    location: Mapped[str] = mapped_column(String(255), default="")
    bio: Mapped[str] = mapped_column(Text, default="")
    avatar_url: Mapped[str] = mapped_column(String(1024), default="")
    phone: Mapped[str] = mapped_column(String(50), default="")
    languages: Mapped[list] = mapped_column(JSON, default=list)


class ArtisanProfileModel(Base, TimestampMixin):
    __tablename__ = "artisan_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id"), unique=True, nullable=False, index=True
    )
    craft_type: Mapped[str] = mapped_column(String(255), nullable=False)
    years_of_experience: Mapped[int | None] = mapped_column(Integer, nullable=True)
    specialties: Mapped[list] = mapped_column(JSON, default=list)
    workshop_location: Mapped[str] = mapped_column(String(255), default="")
    story: Mapped[str] = mapped_column(Text, default="")
    video_url: Mapped[str] = mapped_column(String(1024), default="")
    certification_level: Mapped[str] = mapped_column(String(50), default="verified")
    total_sales: Mapped[int] = mapped_column(Integer, default=0)
    total_reviews: Mapped[int] = mapped_column(Integer, default=0)
    rating: Mapped[float] = mapped_column(Float, default=0.0)
