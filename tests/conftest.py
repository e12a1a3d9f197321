import hashlib
import hmac
import json
import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import order_bot.config as config_mod
import order_bot.db as db
from order_bot.app_factory import create_app
from order_bot.models import Base, MenuItem, Restaurant
from order_bot.rate_limit import limiter

# Test admin credentials
TEST_ADMIN_USERNAME = "testadmin"
TEST_ADMIN_PASSWORD = "testpassword123"

# Key the test "vendor" signs webhooks with
TEST_RETELL_API_KEY = "test_retell_key"

RESTAURANT_PHONE = "+15550001111"
RESTAURANT_AGENT_ID = "agent_tonys"


def sign_retell_payload(raw_body, api_key, timestamp_ms=None):
    """Build an `x-retell-signature` header value the way the vendor signs deliveries."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    digest = hmac.new(
        api_key.encode("utf-8"),
        raw_body + str(timestamp_ms).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"v={timestamp_ms},d={digest}"


@pytest.fixture
def session_factory():
    """In-memory SQLite sessionmaker.

    Uses StaticPool so all connections share the same in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def restaurant(db_session):
    """Pizzeria with delivery, 8% tax and a $3.00 delivery fee, plus a small menu."""
    r = Restaurant(
        name="Tony's Pizza",
        slug="tonys-pizza",
        timezone="America/New_York",
        business_hours={},
        delivery_enabled=True,
        delivery_fee=3.0,
        tax_rate=0.08,
        retell_agent_id=RESTAURANT_AGENT_ID,
        retell_phone_number=RESTAURANT_PHONE,
    )
    db_session.add(r)
    db_session.flush()

    for name, price in [
        ("Cheese Pizza", 10.0),
        ("Pepperoni Pizza", 12.0),
        ("Garlic Knots", 5.0),
        ("Caesar Salad", 8.5),
        ("Soda", 2.0),
    ]:
        db_session.add(MenuItem(restaurant_id=r.id, name=name, base_price=price))

    db_session.commit()
    db_session.refresh(r)
    return r


@pytest.fixture
def client(session_factory, monkeypatch):
    """Shared FastAPI TestClient using the in-memory SQLite DB.

    Sets up test admin credentials and the webhook signing key.
    """
    monkeypatch.setattr(config_mod, "ADMIN_USERNAME", TEST_ADMIN_USERNAME)
    monkeypatch.setattr(config_mod, "ADMIN_PASSWORD", TEST_ADMIN_PASSWORD)
    monkeypatch.setattr(config_mod, "RETELL_API_KEY", TEST_RETELL_API_KEY)
    monkeypatch.setattr(limiter, "enabled", False)

    app = create_app()

    # Override FastAPI DB dependency
    def override_get_db():
        db_sess = session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_auth():
    """Returns HTTP Basic Auth tuple for admin endpoints."""
    return (TEST_ADMIN_USERNAME, TEST_ADMIN_PASSWORD)


@pytest.fixture
def post_webhook(client):
    """Post a lifecycle event signed the way the voice vendor signs it."""
    def _post(payload, signature=None, path="/webhooks/retell"):
        body = json.dumps(payload).encode("utf-8")
        if signature is None:
            signature = sign_retell_payload(body, TEST_RETELL_API_KEY)
        return client.post(
            path,
            content=body,
            headers={"content-type": "application/json", "x-retell-signature": signature},
        )
    return _post


def tool_call(tool_name, **args):
    """A transcript entry in the vendor's flat tool-call format."""
    return {
        "role": "tool_call_invocation",
        "tool_call_id": f"call_{tool_name}",
        "name": tool_name,
        "arguments": json.dumps(args),
    }
