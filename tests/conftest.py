"""Shared test fixtures."""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

TEST_CONFIG = {
    "TESTING": True,
    "DEBUG": False,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "SQLALCHEMY_TRACK_MODIFICATIONS": False,
    "RATELIMIT_ENABLED": False,
    "START_SESSION_TICKER": False,
    "VENUE_ROOMS": ["101", "102", "201"],
    "PROOF_STORAGE_URL": None,
    "PROOF_STORAGE_KEY": None,
}


@pytest.fixture
def app():
    """Application with a fresh in-memory database."""
    from src.app import create_app
    from src.extensions import db

    app = create_app(dict(TEST_CONFIG))
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """SQLAlchemy session bound to the test app."""
    from src.extensions import db

    return db.session


@pytest.fixture
def inventory_item(db_session):
    """A boutique product with stock."""
    from src.models.inventory_item import InventoryItem

    item = InventoryItem(
        name="Cerveza",
        category="Bebidas",
        regular_price=Decimal("7000"),
        service_price=Decimal("12000"),
        stock=10,
        is_active=True,
    )
    db_session.add(item)
    db_session.commit()
    return item


class FrozenClock:
    """Controllable clock for services."""

    def __init__(self, now: datetime = datetime(2026, 3, 1, 20, 0, 0)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FrozenClock()
