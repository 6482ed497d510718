from __future__ import annotations

from datetime import date
from typing import Any, Dict

import pytest
from pydantic import ValidationError

from booking_api.schemas.bookings import BookingCreate, PaymentEvent, validation_message
from booking_api.services.booking_service import build_booking_document


def _payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "paymentId": "PAY1",
        "name": "Ada",
        "email": "ada@x.com",
        "amount": 5000,
        "time": "10:00",
        "startDate": "2024-01-01",
    }
    payload.update(overrides)
    return payload


def test_booking_create_parses_aliases() -> None:
    booking = BookingCreate.model_validate(_payload(endDate="2024-01-03"))

    assert booking.payment_id == "PAY1"
    assert booking.start_date == date(2024, 1, 1)
    assert booking.end_date == date(2024, 1, 3)
    assert booking.ref_id is None


def test_document_defaults_ref_id_and_status() -> None:
    doc = build_booking_document(BookingCreate.model_validate(_payload()))

    assert doc["refId"] == "PAY1"
    assert doc["paymentId"] == "PAY1"
    assert doc["status"] == "pending"


def test_empty_ref_id_falls_back_to_payment_id() -> None:
    doc = build_booking_document(BookingCreate.model_validate(_payload(refId="")))

    assert doc["refId"] == "PAY1"


@pytest.mark.parametrize(
    "overrides",
    [
        {"paymentId": ""},
        {"email": "not-an-email"},
        {"amount": 0},
        {"amount": -10},
        {"amount": float("nan")},
        {"amount": float("inf")},
        {"amount": True},
        {"startDate": "tomorrow"},
        {"startDate": "2024-01-05", "endDate": "2024-01-01"},
        {"$where": "1"},
        {"a.b": "x"},
        {"createdAt": "2020-01-01"},
        {"notes": {"nested": True}},
        {"notes": float("nan")},
    ],
)
def test_invalid_payloads_are_rejected(overrides: Dict[str, Any]) -> None:
    with pytest.raises(ValidationError):
        BookingCreate.model_validate(_payload(**overrides))


def test_validation_message_names_missing_fields() -> None:
    payload = _payload()
    payload.pop("paymentId")
    payload.pop("time")

    with pytest.raises(ValidationError) as excinfo:
        BookingCreate.model_validate(payload)

    message = validation_message(excinfo.value)
    assert message.startswith("Booking validation failed: ")
    assert "paymentId" in message
    assert "time" in message


def test_payment_event_tolerates_missing_data() -> None:
    event = PaymentEvent.model_validate({"event": "charge.success"})

    assert event.event == "charge.success"
    assert event.data.reference is None
