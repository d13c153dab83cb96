"""Profile and artisan API router."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError

from ophelia_market.common.exceptions import (
    ArtisanProfileExistsError,
    ArtisanProfileNotFoundError,
    ProfileNotFoundError,
)
from ophelia_market.common.security import require_user
from ophelia_market.catalog.schemas import ProductResponse
from ophelia_market.deps import ServiceContainer, get_services
from ophelia_market.profiles.schemas import (
    ArtisanResponse,
    ArtisanSetup,
    DashboardResponse,
    DashboardStats,
    ProfileCreate,
    ProfileResponse,
)

router = APIRouter()


# ── Profiles ──

@router.post("/profiles", response_model=ProfileResponse, status_code=201)
async def create_profile(body: ProfileCreate, services: ServiceContainer = Depends(get_services)):
    try:
        async with services.db.get_session() as session:
            profile = await services.profiles.create_profile(
                session, body.email, **body.model_dump(exclude={"email"}),
            )
            return ProfileResponse.model_validate(profile)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Email already registered")


@router.get("/profiles/{profile_id}", response_model=ProfileResponse)
async def get_profile(profile_id: str, services: ServiceContainer = Depends(get_services)):
    try:
        async with services.db.get_session() as session:
            profile = await services.profiles.get_profile(session, profile_id)
            return ProfileResponse.model_validate(profile)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


# ── Artisans ──

@router.post("/artisans", response_model=ArtisanResponse, status_code=201)
async def setup_artisan(
    body: ArtisanSetup,
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    try:
        async with services.db.get_session() as session:
            artisan = await services.profiles.setup_artisan(
                session, user_id, **body.model_dump(),
            )
            return ArtisanResponse.model_validate(artisan)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ArtisanProfileExistsError as e:
        raise HTTPException(status_code=409, detail=e.message)


@router.get("/artisans/me", response_model=ArtisanResponse)
async def get_my_artisan_profile(
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    try:
        async with services.db.get_session() as session:
            artisan = await services.profiles.get_artisan_by_user(session, user_id)
            return ArtisanResponse.model_validate(artisan)
    except ArtisanProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.get("/artisans/me/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    try:
        async with services.db.get_session() as session:
            data = await services.profiles.get_dashboard(session, user_id)
            return DashboardResponse(
                artisan=ArtisanResponse.model_validate(data["artisan"]),
                products=[ProductResponse.model_validate(p) for p in data["products"]],
                stats=DashboardStats(**data["stats"]),
            )
    except ArtisanProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
