"""Order, review and analytics API router."""

from fastapi import APIRouter, Depends, HTTPException

from ophelia_market.common.exceptions import (
    ArtisanProfileNotFoundError,
    NotProductOwnerError,
    OrderError,
    OrderNotFoundError,
    ProductNotFoundError,
    ReviewError,
)
from ophelia_market.common.security import require_api_key, require_user
from ophelia_market.deps import ServiceContainer, get_services
from ophelia_market.orders.schemas import (
    AnalyticsResponse,
    OrderCreate,
    OrderResponse,
    OrderStatusUpdate,
    ReviewCreate,
    ReviewResponse,
)

router = APIRouter()


# ── Orders ──

@router.post("/orders", response_model=OrderResponse, status_code=201)
async def place_order(
    body: OrderCreate,
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    try:
        async with services.db.get_session() as session:
            order = await services.orders.place_order(
                session, user_id, body.product_id, body.quantity,
                shipping_address=body.shipping_address,
                notes=body.notes,
            )
            return OrderResponse.model_validate(order)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except OrderError as e:
        raise HTTPException(status_code=409, detail={"code": e.code, "message": e.message})


@router.get("/orders/mine", response_model=list[OrderResponse])
async def list_my_orders(
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    async with services.db.get_session() as session:
        orders = await services.orders.list_orders(session, buyer_id=user_id)
        return [OrderResponse.model_validate(o) for o in orders]


@router.get("/artisans/me/orders", response_model=list[OrderResponse])
async def list_artisan_orders(
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    try:
        async with services.db.get_session() as session:
            artisan = await services.profiles.get_artisan_by_user(session, user_id)
            orders = await services.orders.list_orders(session, artisan_id=artisan.id)
            return [OrderResponse.model_validate(o) for o in orders]
    except ArtisanProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: OrderStatusUpdate,
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    try:
        async with services.db.get_session() as session:
            artisan = await services.profiles.get_artisan_by_user(session, user_id)
            order = await services.orders.update_status(
                session, order_id, artisan.id, body.status,
                tracking_number=body.tracking_number,
            )
            return OrderResponse.model_validate(order)
    except ArtisanProfileNotFoundError as e:
        raise HTTPException(status_code=403, detail=e.message)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except NotProductOwnerError as e:
        raise HTTPException(status_code=403, detail=e.message)
    except OrderError as e:
        raise HTTPException(status_code=409, detail={"code": e.code, "message": e.message})


# ── Reviews ──

@router.post("/products/{product_id}/reviews", response_model=ReviewResponse, status_code=201)
async def add_review(
    product_id: str,
    body: ReviewCreate,
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    try:
        async with services.db.get_session() as session:
            review = await services.orders.add_review(
                session, user_id, product_id, body.rating,
                comment=body.comment,
                images=body.images,
            )
            return ReviewResponse.model_validate(review)
    except ReviewError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.get("/products/{product_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(product_id: str, services: ServiceContainer = Depends(get_services)):
    async with services.db.get_session() as session:
        reviews = await services.orders.list_reviews(session, product_id)
        return [ReviewResponse.model_validate(r) for r in reviews]


# ── Analytics ──

@router.get("/analytics", response_model=AnalyticsResponse)
async def platform_analytics(
    _=Depends(require_api_key),
    services: ServiceContainer = Depends(get_services),
):
    async with services.db.get_session() as session:
        return AnalyticsResponse(**await services.orders.platform_analytics(session))
