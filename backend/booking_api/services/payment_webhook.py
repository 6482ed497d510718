from __future__ import annotations

"""Payment processor callbacks.

The public entrypoint is `handle_payment_webhook`, which is called from the
bookings router. This module is responsible for:
- verifying the callback signature (when a shared secret is configured)
- ignoring every event other than a successful charge
- moving the matching booking to paid in a single store operation

Callbacks may arrive more than once and out of order. Nothing here raises
for unknown references or store failures; the router always acknowledges.
"""

import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from booking_api import config
from booking_api.domain.booking_status import STATUS_PAID, is_new_transition
from booking_api.errors import AppError
from booking_api.repositories.booking_repository import BookingRepository
from booking_api.schemas.bookings import PaymentEvent

logger = logging.getLogger("booking_webhook")

OUTCOME_PAID = "paid"
OUTCOME_ALREADY_PAID = "already_paid"
OUTCOME_NOT_FOUND = "not_found"
OUTCOME_NOT_PAYABLE = "not_payable"
OUTCOME_IGNORED = "ignored"
OUTCOME_INVALID_PAYLOAD = "invalid_payload"
OUTCOME_STORE_ERROR = "store_error"


@dataclass
class WebhookResult:
    outcome: str
    reference: Optional[str] = None
    booking: Optional[Dict[str, Any]] = None

    @property
    def should_notify(self) -> bool:
        return self.outcome == OUTCOME_PAID and self.booking is not None


def compute_signature(raw_body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha512).hexdigest()


def verify_signature(raw_body: bytes, signature: Optional[str], secret: str) -> None:
    """Raise AppError(400) unless `signature` is the HMAC-SHA512 of the raw body."""

    if not signature:
        raise AppError(400, "invalid_signature", "Invalid signature", {"reason": "missing_signature"})

    expected = compute_signature(raw_body, secret)
    # header values arrive latin-1 decoded; compare as bytes
    provided = signature.strip().lower().encode("utf-8", "surrogateescape")
    if not hmac.compare_digest(expected.encode("ascii"), provided):
        raise AppError(400, "invalid_signature", "Invalid signature")


def parse_event(raw_body: bytes) -> Optional[PaymentEvent]:
    try:
        data = json.loads(raw_body or b"null")
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return PaymentEvent.model_validate(data)
    except ValidationError:
        return None


async def mark_booking_paid(db: AsyncIOMotorDatabase, reference: str) -> WebhookResult:
    repo = BookingRepository(db)
    before = await repo.apply_status_by_payment_id(reference, STATUS_PAID)

    if before is None:
        existing = await repo.find_by_payment_id(reference)
        if existing is None:
            logger.info("No booking found with paymentId %s.", reference)
            return WebhookResult(OUTCOME_NOT_FOUND, reference=reference)

        logger.warning(
            "Booking %s with paymentId %s is %s and cannot become paid.",
            existing["_id"],
            reference,
            existing.get("status"),
        )
        return WebhookResult(OUTCOME_NOT_PAYABLE, reference=reference)

    booking = dict(before)
    booking["status"] = STATUS_PAID

    if not is_new_transition(before.get("status"), STATUS_PAID):
        logger.info("Booking %s already paid; duplicate callback for %s.", before["_id"], reference)
        return WebhookResult(OUTCOME_ALREADY_PAID, reference=reference, booking=booking)

    logger.info("Booking %s updated to paid.", before["_id"])
    return WebhookResult(OUTCOME_PAID, reference=reference, booking=booking)


async def handle_payment_webhook(
    db: AsyncIOMotorDatabase,
    raw_body: bytes,
    signature: Optional[str],
) -> WebhookResult:
    secret = config.paystack_webhook_secret()
    if secret:
        verify_signature(raw_body, signature, secret)
    else:
        logger.warning("PAYSTACK_WEBHOOK_SECRET is not set; accepting unsigned payment callback")

    event = parse_event(raw_body)
    if event is None:
        logger.warning("Payment callback body is not a JSON object; ignoring")
        return WebhookResult(OUTCOME_INVALID_PAYLOAD)

    if event.event != config.PAYMENT_SUCCESS_EVENT:
        logger.info("Ignoring payment event %r", event.event)
        return WebhookResult(OUTCOME_IGNORED, reference=event.data.reference)

    reference = event.data.reference
    if not reference:
        logger.warning("%s callback without data.reference; ignoring", event.event)
        return WebhookResult(OUTCOME_INVALID_PAYLOAD)

    try:
        return await mark_booking_paid(db, reference)
    except Exception:
        logger.exception("Error updating booking status for %s", reference)
        return WebhookResult(OUTCOME_STORE_ERROR, reference=reference)
