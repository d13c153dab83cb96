"""FastAPI application factory for Ophelia Market."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.types import Receive, Scope, Send

from ophelia_market.common.config import OpheliaSettings, get_settings
from ophelia_market.common.logging import setup_logging
from ophelia_market.common.schemas import HealthResponse
from ophelia_market.deps import ServiceContainer, build_services

OPEN_CORS_PREFIX = "/functions"


class ScopedCORSMiddleware(CORSMiddleware):
    """Configured-origin CORS for the API; /functions sets its own headers."""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].startswith(OPEN_CORS_PREFIX):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


def create_app(
    settings: OpheliaSettings | None = None,
    services: ServiceContainer | None = None,
) -> FastAPI:
    settings = settings or (services.settings if services else get_settings())
    services = services or build_services(settings)
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        await services.startup()
        yield
        # Shutdown
        await services.shutdown()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        ScopedCORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from ophelia_market.profiles.router import router as profiles_router
    from ophelia_market.catalog.router import router as catalog_router
    from ophelia_market.certificates.router import router as certificates_router
    from ophelia_market.orders.router import router as orders_router
    from ophelia_market.content.router import router as content_router

    prefix = settings.api_prefix
    app.include_router(profiles_router, prefix=prefix, tags=["profiles"])
    app.include_router(certificates_router, prefix=prefix, tags=["certificates"])
    app.include_router(catalog_router, prefix=prefix, tags=["catalog"])
    app.include_router(orders_router, prefix=prefix, tags=["orders"])
    # Browser-facing content functions keep their fixed paths.
    app.include_router(content_router, tags=["content"])

    return app
