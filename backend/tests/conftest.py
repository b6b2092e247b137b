"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.helpers import get_price_service, get_refresh_service
from database import Base, get_db
from main import app
from services.price_cache import PriceCache
from services.price_service import PriceService, PriceServiceConfig
from services.refresh_service import RefreshService
# Pytest fixtures - imported to make them available to tests
from tests.fixtures import portfolio, stocked_portfolio  # noqa: F401
from tests.fixtures.mocks import SAMPLE_PRICES, FakeClock, MockQuoteProvider


@pytest.fixture(name="db")
def db_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="clock")
def clock_fixture():
    return FakeClock(datetime(2025, 3, 14, 15, 0, tzinfo=timezone.utc))


@pytest.fixture(name="primary_provider")
def primary_provider_fixture():
    return MockQuoteProvider(prices=dict(SAMPLE_PRICES), name="finnhub")


@pytest.fixture(name="secondary_provider")
def secondary_provider_fixture():
    return MockQuoteProvider(prices={}, name="alphavantage")


@pytest.fixture(name="price_service")
def price_service_fixture(primary_provider, secondary_provider, clock):
    """PriceService with both live tiers enabled and mocked."""
    config = PriceServiceConfig(
        primary_api_key="test-primary",
        secondary_api_key="test-secondary",
        live_enabled=True,
    )
    return PriceService(
        config,
        primary=primary_provider,
        secondary=secondary_provider,
        cache=PriceCache(300, clock=clock),
        clock=clock,
    )


@pytest.fixture(name="client")
def client_fixture(db, price_service):
    """Create a test client with the test database and mocked price sources."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_service] = lambda: price_service
    app.dependency_overrides[get_refresh_service] = lambda: RefreshService(price_service)
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
