from __future__ import annotations

import logging

from pymongo import ASCENDING, DESCENDING

logger = logging.getLogger("booking_indexes")


async def ensure_booking_indexes(db) -> None:
    async def _safe_create(collection, *args, **kwargs):
        try:
            await collection.create_index(*args, **kwargs)
        except Exception as exc:
            logger.warning("Index creation failed (%s): %s", kwargs.get("name"), exc)

    # Not unique: duplicate payment ids are tolerated and resolved to any match.
    await _safe_create(
        db.bookings,
        [("paymentId", ASCENDING)],
        name="bookings_by_payment_id",
    )

    await _safe_create(
        db.bookings,
        [("status", ASCENDING), ("createdAt", DESCENDING)],
        name="bookings_by_status_created",
    )

    await _safe_create(
        db.bookings,
        [("createdAt", DESCENDING)],
        name="bookings_by_created",
    )
