"""Shared test fixtures for Ophelia Market."""

import pytest
from httpx import ASGITransport, AsyncClient

from ophelia_market.common.config import OpheliaSettings
from ophelia_market.deps import build_services


HMAC_KEY = "test-hmac-key-for-unit-tests"
API_KEY = "test-admin-api-key"
CONTENT_API_KEY = "test-content-api-key"


def make_settings(**overrides) -> OpheliaSettings:
    defaults = {
        "hmac_key": HMAC_KEY,
        "api_key": API_KEY,
        "db_url": "sqlite+aiosqlite://",
        "content_api_key": CONTENT_API_KEY,
        "content_api_base_url": "https://content.test/v1beta",
    }
    defaults.update(overrides)
    return OpheliaSettings(**defaults)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
async def services(settings):
    """Fully wired services on a fresh in-memory database."""
    container = build_services(settings)
    await container.startup()
    yield container
    await container.shutdown()


@pytest.fixture
def db(services):
    return services.db


@pytest.fixture
def make_artisan(services):
    """Factory creating a profile plus artisan profile; returns their ids."""
    counter = {"n": 0}

    async def _make(craft_type: str = "Pottery", full_name: str = "Test Artisan", country: str = "Peru"):
        counter["n"] += 1
        async with services.db.get_session() as session:
            profile = await services.profiles.create_profile(
                session, f"artisan{counter['n']}@example.com",
                full_name=full_name, country=country,
            )
            artisan = await services.profiles.setup_artisan(session, profile.id, craft_type)
            return {"user_id": profile.id, "artisan_id": artisan.id}

    return _make


@pytest.fixture
def make_buyer(services):
    counter = {"n": 0}

    async def _make(full_name: str = "Test Buyer"):
        counter["n"] += 1
        async with services.db.get_session() as session:
            profile = await services.profiles.create_profile(
                session, f"buyer{counter['n']}@example.com", full_name=full_name,
            )
            return profile.id

    return _make


@pytest.fixture
def app(services):
    from ophelia_market.app import create_app
    return create_app(services=services)


@pytest.fixture
async def client(app):
    # Services are started by the fixture since ASGITransport doesn't run lifespan
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers():
    return {"X-Ophelia-Api-Key": API_KEY}


@pytest.fixture
def user_headers():
    def _headers(user_id: str) -> dict[str, str]:
        return {"X-Ophelia-User-Id": user_id}
    return _headers
