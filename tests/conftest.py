"""Shared pytest fixtures.

Provides:
- an in-memory SQLite engine with all tables created
- a Session per test
- a DraftStore bound to a fixed clock
- builders for valid sections (sender, receiver, item)

Required settings are set BEFORE importing the package so that
`courier.core.config.get_settings()` succeeds without a .env file.
"""

import os
import uuid
from datetime import datetime, timezone

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("BUSINESS_TIMEZONE", "Africa/Lagos")

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from courier.models import draft as _draft_models  # noqa: F401
from courier.models import order as _order_models  # noqa: F401
from courier.models.user import User
from courier.schemas.draft import ItemDetails, Receiver, Sender
from courier.services.draft_store import DraftStore, draft_key

# Monday 19 October 2026, 09:00 local time
NOW = datetime(2026, 10, 19, 9, 0)
# Tuesday, inside business hours
VALID_PICKUP = datetime(2026, 10, 20, 10, 0)

STORE_CLOCK = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def customer(session) -> User:
    user = User(id=uuid.uuid4(), email="ada@example.com", name="ada", role="customer")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def store(session, customer) -> DraftStore:
    return DraftStore(session, draft_key(customer.id), clock=lambda: STORE_CLOCK)


@pytest.fixture
def sender() -> Sender:
    return Sender(
        name="Ada Obi",
        address="12 Marina Road",
        phone="+2348010000000",
        state="Lagos",
    )


@pytest.fixture
def receiver() -> Receiver:
    return Receiver(
        name="Tunde Bello",
        address="4 Garki Close",
        phone="+2348020000000",
        state="FCT",
        city="Abuja",
        delivery_method="delivery",
    )


def make_item(**overrides) -> ItemDetails:
    data = {
        "name": "Blender",
        "category": "Electronics",
        "subcategory": "Kitchen",
        "quantity": 1,
        "weight": 2.0,
        "value": 15000,
    }
    data.update(overrides)
    return ItemDetails(**data)
