"""Shared fixtures for eventlog tests."""

import pytest
from sqlalchemy import create_engine, text

from eventlog.auth import ActorContext
from eventlog.events import EventService, EventTypeRegistry
from eventlog.hooks import HookRegistry
from eventlog.persistence import EventStore
from eventlog.services import set_event_service


@pytest.fixture(autouse=True)
def reset_globals():
    """Clear hook registrations and the process-wide service around each test."""
    HookRegistry.clear()
    set_event_service(None)
    yield
    HookRegistry.clear()
    set_event_service(None)


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite engine (shared across threads, unlike :memory:)."""
    engine = create_engine(f"sqlite:///{tmp_path / 'events.db'}")
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return EventStore(engine)


@pytest.fixture
def registry():
    registry = EventTypeRegistry()
    registry.register("user_login", "User logged in", "A user signed in")
    registry.register("password_changed", "", "A user changed their password")
    registry.register("order_placed", "Order placed", hooks=["audit"])
    return registry


@pytest.fixture
def actor():
    """Mutable holder for the actor the service sees."""
    return {"current": ActorContext(url="/test")}


@pytest.fixture
def service(store, registry, actor):
    return EventService(store, registry, actor_provider=lambda: actor["current"])


@pytest.fixture
def add_user(engine):
    """Insert a user (and primary email) into the identity tables."""

    def _add_user(user_id, email, first_name="Test", last_name="User", gender="undisclosed"):
        with engine.connect() as conn:
            conn.execute(
                text(
                    'INSERT INTO "user" (id, first_name, last_name, profile_img, gender) '
                    "VALUES (:id, :first_name, :last_name, :img, :gender)"
                ),
                {
                    "id": user_id,
                    "first_name": first_name,
                    "last_name": last_name,
                    "img": f"/avatars/{user_id}.png",
                    "gender": gender,
                },
            )
            conn.execute(
                text(
                    "INSERT INTO user_email (user_id, email, is_primary) "
                    "VALUES (:user_id, :email, :is_primary)"
                ),
                {"user_id": user_id, "email": email, "is_primary": True},
            )
            conn.commit()

    return _add_user


@pytest.fixture
def row_count(engine):
    """Count rows in the event table directly."""

    def _row_count() -> int:
        with engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM event")).scalar_one()

    return _row_count
