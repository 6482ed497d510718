from __future__ import annotations

from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from booking_api.domain.booking_status import statuses_allowing
from booking_api.utils import now_utc

BOOKINGS_COLLECTION = "bookings"


class BookingRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db
        self._col = db[BOOKINGS_COLLECTION]

    async def insert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a booking document, stamping createdAt/updatedAt.

        Returns the stored document including its `_id`.
        """

        now = now_utc()
        stored = dict(doc)
        stored["createdAt"] = now
        stored["updatedAt"] = now
        res = await self._col.insert_one(stored)
        stored["_id"] = res.inserted_id
        return stored

    async def find_by_payment_id(self, payment_id: str) -> Optional[Dict[str, Any]]:
        return await self._col.find_one({"paymentId": payment_id})

    async def payment_id_in_use(self, payment_id: str) -> bool:
        return await self._col.find_one({"paymentId": payment_id}, {"_id": 1}) is not None

    async def apply_status_by_payment_id(self, payment_id: str, new_status: str) -> Optional[Dict[str, Any]]:
        """Atomically move the booking for `payment_id` into `new_status`.

        Only bookings whose current status may transition into `new_status`
        match. Returns the document as it was *before* the update, or None
        when nothing matched. When several bookings share the payment id the
        store picks one of them.
        """

        return await self._col.find_one_and_update(
            {"paymentId": payment_id, "status": {"$in": statuses_allowing(new_status)}},
            {"$set": {"status": new_status, "updatedAt": now_utc()}},
            return_document=ReturnDocument.BEFORE,
        )

    async def list_bookings(self, *, status: Optional[str] = None) -> List[Dict[str, Any]]:
        flt: Dict[str, Any] = {}
        if status:
            flt["status"] = status

        cursor = self._col.find(flt).sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
        return await cursor.to_list(length=None)
