"""Catalog API router — marketplace listing, product detail, counters."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ophelia_market.common.exceptions import (
    ArtisanProfileNotFoundError,
    NotProductOwnerError,
    ProductNotFoundError,
)
from ophelia_market.common.security import require_user
from ophelia_market.catalog.schemas import MarketplaceItem, ProductResponse, ProductUpdate
from ophelia_market.deps import ServiceContainer, get_services

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/marketplace", response_model=list[MarketplaceItem])
async def list_marketplace(
    category: Optional[str] = Query(None),
    q: Optional[str] = Query(None, max_length=200, description="Search title, description and category"),
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    services: ServiceContainer = Depends(get_services),
):
    async with services.db.get_session() as session:
        items = await services.catalog.list_marketplace(
            session, category=category, limit=limit, offset=offset, q=q,
        )
        return [MarketplaceItem(**item) for item in items]


@router.get("/products/{product_id}", response_model=MarketplaceItem)
async def get_product(product_id: str, services: ServiceContainer = Depends(get_services)):
    try:
        async with services.db.get_session() as session:
            item = await services.catalog.get_product_detail(session, product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    try:
        async with services.db.get_session() as session:
            await services.catalog.increment_views(session, product_id)
    except Exception:
        logger.exception("View counter update failed", extra={"context": {"product_id": product_id}})
    else:
        item["views"] = (item["views"] or 0) + 1

    return MarketplaceItem(**item)


@router.post("/products/{product_id}/favorite")
async def favorite_product(product_id: str, services: ServiceContainer = Depends(get_services)):
    try:
        async with services.db.get_session() as session:
            favorites = await services.catalog.add_favorite(session, product_id)
            return {"product_id": product_id, "favorites": favorites}
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.patch("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: ProductUpdate,
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    try:
        async with services.db.get_session() as session:
            artisan = await services.profiles.get_artisan_by_user(session, user_id)
            product = await services.catalog.update_product(
                session, product_id, artisan.id, **body.model_dump(exclude_unset=True),
            )
            return ProductResponse.model_validate(product)
    except ArtisanProfileNotFoundError as e:
        raise HTTPException(status_code=403, detail=e.message)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except NotProductOwnerError as e:
        raise HTTPException(status_code=403, detail=e.message)
