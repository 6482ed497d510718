from __future__ import annotations

from typing import Any

import pytest

from booking_api.domain.booking_status import is_new_transition, statuses_allowing
from booking_api.repositories.booking_repository import BookingRepository
from booking_api.services.payment_webhook import (
    OUTCOME_ALREADY_PAID,
    OUTCOME_NOT_FOUND,
    OUTCOME_NOT_PAYABLE,
    OUTCOME_PAID,
    mark_booking_paid,
)


def test_paid_is_reachable_from_pending_and_paid_only() -> None:
    assert statuses_allowing("paid") == ["paid", "pending"]
    assert statuses_allowing("pending") == []


def test_new_transition_detection() -> None:
    assert is_new_transition("pending", "paid") is True
    assert is_new_transition("paid", "paid") is False


@pytest.mark.anyio
async def test_mark_booking_paid_reports_first_and_repeat(test_db: Any) -> None:
    repo = BookingRepository(test_db)
    await repo.insert({"paymentId": "PAY9", "status": "pending", "email": "x@y.org"})

    first = await mark_booking_paid(test_db, "PAY9")
    second = await mark_booking_paid(test_db, "PAY9")

    assert first.outcome == OUTCOME_PAID
    assert first.should_notify is True
    assert first.booking["status"] == "paid"
    assert second.outcome == OUTCOME_ALREADY_PAID
    assert second.should_notify is False

    stored = await repo.find_by_payment_id("PAY9")
    assert stored["status"] == "paid"


@pytest.mark.anyio
async def test_mark_booking_paid_leaves_other_statuses_alone(test_db: Any) -> None:
    repo = BookingRepository(test_db)
    await repo.insert({"paymentId": "PAY7", "status": "cancelled"})

    result = await mark_booking_paid(test_db, "PAY7")

    assert result.outcome == OUTCOME_NOT_PAYABLE
    assert result.should_notify is False
    stored = await repo.find_by_payment_id("PAY7")
    assert stored["status"] == "cancelled"



@pytest.mark.anyio
async def test_booking_indexes_back_payment_lookup(test_db: Any) -> None:
    from booking_api.indexes.booking_indexes import ensure_booking_indexes

    await ensure_booking_indexes(test_db)

    info = await test_db.bookings.index_information()
    assert "bookings_by_payment_id" in info
    assert info["bookings_by_payment_id"].get("unique") is not True


@pytest.mark.anyio
async def test_mark_booking_paid_unknown_reference(test_db: Any) -> None:
    result = await mark_booking_paid(test_db, "MISSING")

    assert result.outcome == OUTCOME_NOT_FOUND
    assert await test_db.bookings.count_documents({}) == 0
