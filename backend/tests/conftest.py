"""Shared test configuration and fixtures.

Key principles:
- All HTTP calls go through the local ASGI app (httpx.AsyncClient + ASGITransport).
- Each test gets its own in-memory Motor-compatible database.
- AnyIO is the single async runner via pytest-anyio (@pytest.mark.anyio).
"""

from typing import Any, AsyncGenerator, Dict, List

import sys
import uuid
from pathlib import Path

import httpx
import pytest
from httpx import ASGITransport
from mongomock_motor import AsyncMongoMockClient

# Ensure backend root is on sys.path so that `server` module is importable
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from server import app  # noqa: E402
from booking_api.db import get_db  # noqa: E402
from booking_api.services import booking_notifications  # noqa: E402


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Force pytest-anyio to use asyncio event loop."""

    return "asyncio"


@pytest.fixture(autouse=True)
def service_env(monkeypatch) -> None:
    """Deterministic environment: unsigned callbacks, configured email relay."""

    monkeypatch.delenv("PAYSTACK_WEBHOOK_SECRET", raising=False)
    monkeypatch.delenv("RESEND_REPLY_TO_EMAIL", raising=False)
    monkeypatch.setenv("RESEND_API_KEY", "re_test_key")
    monkeypatch.setenv("RESEND_FROM_EMAIL", "bookings@example.org")


@pytest.fixture(scope="function")
def test_db() -> Any:
    """Function-scoped isolated database for each test."""

    client = AsyncMongoMockClient()
    return client[f"booking_test_{uuid.uuid4().hex}"]


@pytest.fixture(scope="function")
async def app_with_overrides(test_db) -> AsyncGenerator[Any, None]:
    """FastAPI app instance whose get_db dependency points to test_db."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def async_client(app_with_overrides) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = ASGITransport(app=app_with_overrides)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture(scope="function")
def sent_emails(monkeypatch) -> List[Dict[str, Any]]:
    """Capture outgoing confirmation emails instead of calling Resend."""

    sent: List[Dict[str, Any]] = []

    async def _fake_send_email(**kwargs: Any) -> Dict[str, Any]:
        sent.append(kwargs)
        return {"id": f"email_{len(sent)}"}

    monkeypatch.setattr(booking_notifications, "send_email", _fake_send_email)
    return sent


@pytest.fixture
def booking_payload() -> Dict[str, Any]:
    return {
        "paymentId": "PAY1",
        "name": "Ada",
        "email": "ada@x.com",
        "amount": 5000,
        "time": "10:00",
        "startDate": "2024-01-01",
    }
