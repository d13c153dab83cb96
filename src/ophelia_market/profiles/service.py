"""Profile service — user profiles, artisan setup, artisan dashboard."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ophelia_market.common.exceptions import (
    ArtisanProfileExistsError,
    ArtisanProfileNotFoundError,
    ProfileNotFoundError,
)
from ophelia_market.catalog.service import CatalogService
from ophelia_market.profiles.models import ArtisanProfileModel, ProfileModel


class ProfileService:
    """User and artisan profile operations."""

    def __init__(self, catalog: CatalogService):
        self.catalog = catalog

    # ── Profiles ──

    async def create_profile(
        self, session: AsyncSession, email: str, **kwargs: Any,
    ) -> ProfileModel:
        profile = ProfileModel(
            email=email,
            full_name=kwargs.get("full_name", ""),
            user_type=kwargs.get("user_type", "buyer"),
            country=kwargs.get("country", ""),
            location=kwargs.get("location", ""),
            bio=kwargs.get("bio", ""),
            avatar_url=kwargs.get("avatar_url", ""),
            phone=kwargs.get("phone", ""),
            languages=kwargs.get("languages", []),
        )
        session.add(profile)
        await session.flush()
        return profile

    async def get_profile(self, session: AsyncSession, user_id: str) -> ProfileModel:
        profile = await session.get(ProfileModel, user_id)
        if profile is None:
            raise ProfileNotFoundError()
        return profile

    async def find_profile_by_email(
        self, session: AsyncSession, email: str,
    ) -> ProfileModel | None:
        result = await session.execute(
            select(ProfileModel).where(ProfileModel.email == email)
        )
        return result.scalar_one_or_none()

    # ── Artisans ──

    async def setup_artisan(
        self, session: AsyncSession, user_id: str, craft_type: str, **kwargs: Any,
    ) -> ArtisanProfileModel:
        """Create the one artisan profile a user may have."""
        profile = await self.get_profile(session, user_id)
        if await self.find_artisan_by_user(session, user_id) is not None:
            raise ArtisanProfileExistsError()

        artisan = ArtisanProfileModel(
            user_id=profile.id,
            craft_type=craft_type,
            years_of_experience=kwargs.get("years_of_experience"),
            specialties=kwargs.get("specialties", []),
            workshop_location=kwargs.get("workshop_location", ""),
            story=kwargs.get("story", ""),
            video_url=kwargs.get("video_url", ""),
            certification_level="verified",
        )
        session.add(artisan)
        if profile.user_type == "buyer":
            profile.user_type = "artisan"
        await session.flush()
        return artisan

    async def find_artisan_by_user(
        self, session: AsyncSession, user_id: str,
    ) -> ArtisanProfileModel | None:
        result = await session.execute(
            select(ArtisanProfileModel).where(ArtisanProfileModel.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_artisan_by_user(
        self, session: AsyncSession, user_id: str,
    ) -> ArtisanProfileModel:
        artisan = await self.find_artisan_by_user(session, user_id)
        if artisan is None:
            raise ArtisanProfileNotFoundError("Please complete your artisan profile first")
        return artisan

    async def get_dashboard(self, session: AsyncSession, user_id: str) -> dict[str, Any]:
        """Artisan profile, their products newest first, and aggregate stats."""
        artisan = await self.get_artisan_by_user(session, user_id)
        products = await self.catalog.list_artisan_products(session, artisan.id)
        return {
            "artisan": artisan,
            "products": products,
            "stats": {
                "total_sales": artisan.total_sales or 0,
                "total_views": sum(p.views or 0 for p in products),
                "total_favorites": sum(p.favorites or 0 for p in products),
                "total_products": len(products),
            },
        }
