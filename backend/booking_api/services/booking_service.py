from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from booking_api.domain.booking_status import STATUS_PENDING
from booking_api.errors import AppError
from booking_api.repositories.booking_repository import BookingRepository
from booking_api.schemas.bookings import BookingCreate, validation_message
from booking_api.utils import date_to_utc_midnight

logger = logging.getLogger("booking_service")


def build_booking_document(booking: BookingCreate) -> Dict[str, Any]:
    """Map a validated payload onto the stored booking shape.

    refId falls back to paymentId; status always starts as pending.
    """

    doc: Dict[str, Any] = dict(booking.extensions)
    doc.update(
        {
            "refId": booking.ref_id or booking.payment_id,
            "paymentId": booking.payment_id,
            "status": STATUS_PENDING,
            "name": booking.name,
            "email": booking.email,
            "amount": booking.amount,
            "time": booking.time,
            "startDate": date_to_utc_midnight(booking.start_date),
            "endDate": date_to_utc_midnight(booking.end_date) if booking.end_date else None,
        }
    )
    return doc


async def create_booking(db: AsyncIOMotorDatabase, payload: Dict[str, Any]) -> Dict[str, Any]:
    try:
        booking = BookingCreate.model_validate(payload)
    except ValidationError as exc:
        raise AppError(400, "validation_error", validation_message(exc), {"errors": _plain_errors(exc)})

    repo = BookingRepository(db)
    try:
        if await repo.payment_id_in_use(booking.payment_id):
            logger.warning("paymentId %s is already used by another booking", booking.payment_id)
        stored = await repo.insert(build_booking_document(booking))
    except PyMongoError as exc:
        logger.error("Error creating booking: %s", exc, exc_info=True)
        raise AppError(500, "store_error", "Failed to create booking")

    logger.info("Booking %s created for paymentId %s", stored["_id"], booking.payment_id)
    return stored


async def list_bookings(db: AsyncIOMotorDatabase, status: Optional[str] = None) -> List[Dict[str, Any]]:
    repo = BookingRepository(db)
    try:
        return await repo.list_bookings(status=status)
    except PyMongoError as exc:
        logger.error("Error fetching bookings: %s", exc, exc_info=True)
        raise AppError(500, "store_error", "Failed to fetch bookings")


def _plain_errors(exc: ValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
